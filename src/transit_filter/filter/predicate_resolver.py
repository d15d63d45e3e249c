"""Turn one (object type, property, values) predicate into surviving identifiers."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Set

from transit_filter.errors import EmptyMatch, NotFound, UnsupportedProperty
from transit_filter.model.collection import CollectionWithId

from .filter_spec import ObjectType

logger = logging.getLogger(__name__)

PropertyResolver = Callable[[ObjectType, str, Set[str], CollectionWithId], Set[str]]


def _match_identifiers(
    object_type: ObjectType, property_name: str, values: Set[str], collection: CollectionWithId
) -> Set[str]:
    for identifier in sorted(values):
        if identifier not in collection:
            raise NotFound(object_type, identifier)
    return set(values)


def _match_line_code(
    object_type: ObjectType, property_name: str, values: Set[str], collection: CollectionWithId
) -> Set[str]:
    ids = {line.id for line in collection if (line.code or "") in values}
    if not ids:
        raise EmptyMatch(property_name, values)
    return ids


_RESOLVERS: Dict[ObjectType, Dict[str, PropertyResolver]] = {
    ObjectType.OPERATOR: {"operator_id": _match_identifiers},
    ObjectType.LINE: {"line_code": _match_line_code},
}


def supported_properties(object_type: ObjectType) -> Iterable[str]:
    return tuple(_RESOLVERS.get(object_type, {}))


def resolve(
    object_type: ObjectType,
    property_name: str,
    values: Set[str],
    collection: CollectionWithId,
) -> Set[str]:
    """Return the identifiers of ``collection`` selected by the predicate.

    Raises:
        UnsupportedProperty: ``property_name`` is unknown for ``object_type``.
        NotFound: an ``operator_id`` value names no operator.
        EmptyMatch: a ``line_code`` predicate selects no line.
    """
    resolver = _RESOLVERS.get(object_type, {}).get(property_name)
    if resolver is None:
        raise UnsupportedProperty(object_type, property_name)
    ids = resolver(object_type, property_name, set(values), collection)
    logger.debug(
        "Predicate %s.%s in %s selected %d objects",
        object_type,
        property_name,
        sorted(values),
        len(ids),
    )
    return ids


def resolve_all(
    object_type: ObjectType,
    properties: Dict[str, Set[str]],
    collection: CollectionWithId,
) -> Set[str]:
    """Resolve every property of one object type; the last one wins."""
    ids: Set[str] = set()
    for property_name, values in properties.items():
        ids = resolve(object_type, property_name, values, collection)
    return ids


__all__ = ["resolve", "resolve_all", "supported_properties"]
