"""Filter a transit model by operators and lines.

The engine runs in three steps over a snapshot of the input model:

1. every object type of the :class:`FilterSpec` is resolved to the identifiers
   its predicates select (see :mod:`.predicate_resolver`);
2. the objects kept by the action (the selection for ``extract``, its
   complement for ``remove``) are cascaded to the calendars and vehicle
   journeys they reach, and the reachable sets of all object types are
   unioned;
3. the rebuilder compacts calendars and vehicle journeys, remaps every
   stop-time attribute table and validates the result as a new model.

The input model is never modified; any failure leaves it untouched.

Example::

    spec = FilterSpec(Action.EXTRACT).add(ObjectType.OPERATOR, "operator_id", "O1")
    filtered = apply(model, spec)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Set

from transit_filter.model.transit_model import TransitModel

from .filter_spec import FilterSpec, ObjectType
from .model_rebuilder import rebuild, retained_ids
from .predicate_resolver import resolve_all
from .relation_cascade import ReachableSets, cascade, source_collection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterReport:
    """Before/after object counts of one filter run."""

    before: Dict[str, int]
    after: Dict[str, int]
    model: TransitModel

    def removed(self, name: str) -> int:
        return self.before.get(name, 0) - self.after.get(name, 0)


def apply(model: TransitModel, spec: FilterSpec) -> TransitModel:
    """Return a new model holding only what ``spec`` selects."""
    if spec.is_empty():
        raise ValueError("Filter specification does not contain any predicate")

    survivors: Dict[ObjectType, Set[str]] = {}
    reachable = ReachableSets()
    for object_type, properties in spec.predicates.items():
        collection = source_collection(model, object_type)
        selected = resolve_all(object_type, properties, collection)
        survivors[object_type] = selected
        kept = retained_ids(collection, selected, spec.action)
        reachable = reachable.union(cascade(object_type, kept, model))

    logger.debug(
        "Cascade reached %d calendars and %d vehicle journeys",
        len(reachable.calendar_ids),
        len(reachable.vehicle_journey_ids),
    )
    return rebuild(model, spec.action, survivors, reachable)


def apply_with_report(model: TransitModel, spec: FilterSpec) -> FilterReport:
    filtered = apply(model, spec)
    report = FilterReport(before=model.counts(), after=filtered.counts(), model=filtered)
    logger.info(
        "%s filter kept %d/%d operators, %d/%d lines, %d/%d calendars, %d/%d vehicle journeys",
        spec.action.value,
        report.after["operators"],
        report.before["operators"],
        report.after["lines"],
        report.before["lines"],
        report.after["calendars"],
        report.before["calendars"],
        report.after["vehicle_journeys"],
        report.before["vehicle_journeys"],
    )
    return report


__all__ = ["FilterReport", "apply", "apply_with_report"]
