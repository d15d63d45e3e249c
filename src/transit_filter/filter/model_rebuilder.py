"""Compact filtered collections and remap position-keyed attribute tables."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional, Set, TypeVar

from transit_filter.errors import EmptyModel
from transit_filter.model.collection import CollectionWithId
from transit_filter.model.domain_types import VehicleJourney
from transit_filter.model.transit_model import Collections, StopTimeKey, TransitModel

from .filter_spec import Action, ObjectType
from .relation_cascade import ReachableSets

logger = logging.getLogger(__name__)

V = TypeVar("V")


def retained_ids(collection: CollectionWithId, ids: Iterable[str], action: Action) -> Set[str]:
    """Identifiers kept by ``action`` given the identifiers a predicate resolved."""
    selected = set(ids)
    if action is Action.EXTRACT:
        return {obj_id for obj_id in collection.ids() if obj_id in selected}
    return {obj_id for obj_id in collection.ids() if obj_id not in selected}


def remap_attributes(
    attributes: Mapping[StopTimeKey, V],
    old_vj_ids: Mapping[int, str],
    vehicle_journeys: CollectionWithId[VehicleJourney],
) -> Dict[StopTimeKey, V]:
    """Re-key ``attributes`` from pre-filter positions to ``vehicle_journeys`` positions.

    Entries of vehicle journeys that are no longer present are dropped.
    """
    remapped: Dict[StopTimeKey, V] = {}
    for (old_idx, sequence), value in attributes.items():
        vj_id = old_vj_ids.get(old_idx)
        new_idx: Optional[int] = None if vj_id is None else vehicle_journeys.get_idx(vj_id)
        if new_idx is not None:
            remapped[(new_idx, sequence)] = value
    return remapped


def rebuild(
    snapshot: TransitModel,
    action: Action,
    survivors: Mapping[ObjectType, Set[str]],
    reachable: ReachableSets,
) -> TransitModel:
    """Build the filtered model out of the pre-filter ``snapshot``.

    ``survivors`` holds the identifiers each predicate resolved, before the
    action is applied. Calendars and vehicle journeys are kept when they are in
    ``reachable``. Operators and lines still referenced by a kept vehicle
    journey are restored so that the result stays referentially consistent.

    Raises:
        EmptyModel: no calendar is left after compaction.
        ValidationFailed: model construction rejected the rebuilt collections.
    """
    collections = snapshot.into_collections()

    # Positions are resolved against the snapshot only.
    calendar_positions = {snapshot.calendars.get_idx(cal_id) for cal_id in reachable.calendar_ids}
    vj_positions = {snapshot.vehicle_journeys.get_idx(vj_id) for vj_id in reachable.vehicle_journey_ids}
    calendars = CollectionWithId(
        calendar for idx, calendar in snapshot.calendars.items() if idx in calendar_positions
    )
    vehicle_journeys = CollectionWithId(
        vj for idx, vj in snapshot.vehicle_journeys.items() if idx in vj_positions
    )

    line_ids = set(snapshot.lines.ids())
    if ObjectType.LINE in survivors:
        line_ids = retained_ids(snapshot.lines, survivors[ObjectType.LINE], action)
    operator_ids = set(snapshot.operators.ids())
    if ObjectType.OPERATOR in survivors:
        operator_ids = retained_ids(snapshot.operators, survivors[ObjectType.OPERATOR], action)

    required_lines = {vj.line_id for vj in vehicle_journeys}
    restored_lines = required_lines - line_ids
    lines = snapshot.lines.retain_ids(line_ids | required_lines)
    required_operators = {line.operator_id for line in lines if line.id in required_lines}
    restored_operators = required_operators - operator_ids
    operators = snapshot.operators.retain_ids(operator_ids | required_operators)
    if restored_lines or restored_operators:
        # Under extract this is the plain union of the selections.
        log = logger.info if action is Action.REMOVE else logger.debug
        log(
            "Kept %d lines and %d operators outside the %s selection "
            "because retained vehicle journeys reference them",
            len(restored_lines),
            len(restored_operators),
            action.value,
        )

    old_vj_ids = {idx: vj.id for idx, vj in snapshot.vehicle_journeys.items()}
    for name, attributes in collections.attribute_maps().items():
        setattr(collections, name, remap_attributes(attributes, old_vj_ids, vehicle_journeys))

    if not calendars:
        raise EmptyModel()

    collections.operators = operators
    collections.lines = lines
    collections.calendars = calendars
    collections.vehicle_journeys = vehicle_journeys
    return TransitModel.from_collections(collections)


__all__ = ["rebuild", "remap_attributes", "retained_ids"]
