"""Follow relation lookups from selected objects to calendars and trips."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Set, Tuple

from transit_filter.model.collection import CollectionWithId
from transit_filter.model.relations import RelationIndex
from transit_filter.model.transit_model import TransitModel

from .filter_spec import ObjectType

logger = logging.getLogger(__name__)

RelationQuery = Callable[[RelationIndex, Iterable[int]], Set[int]]

# object type -> (to calendars, to vehicle journeys)
_QUERIES: Dict[ObjectType, Tuple[RelationQuery, RelationQuery]] = {
    ObjectType.OPERATOR: (
        RelationIndex.operators_to_calendars,
        RelationIndex.operators_to_vehicle_journeys,
    ),
    ObjectType.LINE: (
        RelationIndex.lines_to_calendars,
        RelationIndex.lines_to_vehicle_journeys,
    ),
}


@dataclass(frozen=True)
class ReachableSets:
    """Calendar and vehicle journey identifiers reached so far."""

    calendar_ids: FrozenSet[str] = field(default_factory=frozenset)
    vehicle_journey_ids: FrozenSet[str] = field(default_factory=frozenset)

    def union(self, other: "ReachableSets") -> "ReachableSets":
        return ReachableSets(
            calendar_ids=self.calendar_ids | other.calendar_ids,
            vehicle_journey_ids=self.vehicle_journey_ids | other.vehicle_journey_ids,
        )


def source_collection(model: TransitModel, object_type: ObjectType) -> CollectionWithId:
    if object_type is ObjectType.OPERATOR:
        return model.operators
    if object_type is ObjectType.LINE:
        return model.lines
    raise ValueError(f"No collection for object type {object_type!r}")


def cascade(
    object_type: ObjectType, survivor_ids: Iterable[str], model: TransitModel
) -> ReachableSets:
    """Return what ``survivor_ids`` of ``object_type`` reach in ``model``."""
    collection = source_collection(model, object_type)
    positions = {
        idx for idx in (collection.get_idx(obj_id) for obj_id in survivor_ids) if idx is not None
    }
    to_calendars, to_vehicle_journeys = _QUERIES[object_type]
    calendar_ids = frozenset(
        model.calendars[idx].id for idx in to_calendars(model.relations, positions)
    )
    vj_ids = frozenset(
        model.vehicle_journeys[idx].id
        for idx in to_vehicle_journeys(model.relations, positions)
    )
    logger.debug(
        "%d %s objects reach %d calendars and %d vehicle journeys",
        len(positions),
        object_type,
        len(calendar_ids),
        len(vj_ids),
    )
    return ReachableSets(calendar_ids=calendar_ids, vehicle_journey_ids=vj_ids)


__all__ = ["ReachableSets", "cascade", "source_collection"]
