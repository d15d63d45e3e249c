"""Ordered, identifier-indexed collections with dense integer positions."""

from __future__ import annotations

from typing import (
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
)


class HasId(Protocol):
    @property
    def id(self) -> str: ...


T = TypeVar("T", bound=HasId)


class CollectionWithId(Generic[T]):
    """Maps identifiers to compact positions, much like an index table.

    Positions are only meaningful for the instance that handed them out.
    ``retain`` never touches the receiver: it builds a new collection whose
    positions are renumbered densely from zero, so a position taken from the
    old collection has to be translated back to its identifier before it can
    be looked up in the new one.
    """

    def __init__(self, objects: Iterable[T] = ()):
        self._objects: List[T] = []
        self._id_to_idx: Dict[str, int] = {}
        for obj in objects:
            obj_id = str(obj.id)
            if obj_id in self._id_to_idx:
                raise ValueError(f"identifier {obj_id!r} already present in collection")
            self._id_to_idx[obj_id] = len(self._objects)
            self._objects.append(obj)

    # ----------------------------------------------------------------- lookup
    def get(self, obj_id: str) -> Optional[T]:
        idx = self._id_to_idx.get(str(obj_id))
        return None if idx is None else self._objects[idx]

    def get_idx(self, obj_id: str) -> Optional[int]:
        return self._id_to_idx.get(str(obj_id))

    def __getitem__(self, idx: int) -> T:
        return self._objects[idx]

    def __contains__(self, obj_id: object) -> bool:
        return obj_id in self._id_to_idx

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[T]:
        return iter(self._objects)

    def __bool__(self) -> bool:
        return bool(self._objects)

    def __repr__(self) -> str:
        return f"CollectionWithId({[obj.id for obj in self._objects]!r})"

    @property
    def id_to_idx(self) -> Dict[str, int]:
        """Copy of the identifier to position table at this point in time."""
        return dict(self._id_to_idx)

    def ids(self) -> List[str]:
        return [obj.id for obj in self._objects]

    def values(self) -> List[T]:
        return list(self._objects)

    def items(self) -> Iterator[Tuple[int, T]]:
        return enumerate(self._objects)

    # ------------------------------------------------------------ compaction
    def retain(self, predicate: Callable[[T], bool]) -> "CollectionWithId[T]":
        return CollectionWithId(obj for obj in self._objects if predicate(obj))

    def retain_ids(self, ids: Iterable[str]) -> "CollectionWithId[T]":
        wanted = set(ids)
        return self.retain(lambda obj: obj.id in wanted)


__all__ = ["CollectionWithId"]
