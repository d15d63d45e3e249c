"""In-memory transit model and the construction step that validates it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Dict, Iterable, List, Optional, Tuple

from transit_filter.errors import ValidationFailed

from .collection import CollectionWithId
from .domain_types import Calendar, Line, Operator, VehicleJourney
from .relations import RelationIndex

logger = logging.getLogger(__name__)

# (vehicle journey position, stop sequence)
StopTimeKey = Tuple[int, int]

# Every attribute table keyed by a vehicle journey position.
ATTRIBUTE_MAPS: Tuple[str, ...] = (
    "stop_time_ids",
    "stop_time_headsigns",
    "stop_time_comments",
)


@dataclass
class Collections:
    """Raw collections handed to and returned by model construction."""

    operators: CollectionWithId[Operator] = field(default_factory=CollectionWithId)
    lines: CollectionWithId[Line] = field(default_factory=CollectionWithId)
    calendars: CollectionWithId[Calendar] = field(default_factory=CollectionWithId)
    vehicle_journeys: CollectionWithId[VehicleJourney] = field(
        default_factory=CollectionWithId
    )
    stop_time_ids: Dict[StopTimeKey, str] = field(default_factory=dict)
    stop_time_headsigns: Dict[StopTimeKey, str] = field(default_factory=dict)
    stop_time_comments: Dict[StopTimeKey, str] = field(default_factory=dict)

    def copy(self) -> "Collections":
        """Shallow copy; collections are immutable, attribute maps are copied."""
        values = {}
        for item in fields(self):
            value = getattr(self, item.name)
            values[item.name] = dict(value) if item.name in ATTRIBUTE_MAPS else value
        return Collections(**values)

    def attribute_maps(self) -> Dict[str, Dict[StopTimeKey, str]]:
        return {name: getattr(self, name) for name in ATTRIBUTE_MAPS}


class TransitModel:
    """Validated snapshot of a transit network.

    Instances are never modified after construction; filtering produces a new
    model through :meth:`from_collections`.
    """

    def __init__(self, collections: Collections):
        self._collections = collections
        self.relations = RelationIndex(
            collections.operators,
            collections.lines,
            collections.calendars,
            collections.vehicle_journeys,
        )

    @classmethod
    def from_collections(cls, collections: Collections) -> "TransitModel":
        """Sanitize unused objects, check references and build the model."""
        sanitized = _sanitize(collections)
        problems = _check_references(sanitized)
        if problems:
            raise ValidationFailed("; ".join(problems))
        logger.debug(
            "Built model with %d operators, %d lines, %d calendars, %d vehicle journeys",
            len(sanitized.operators),
            len(sanitized.lines),
            len(sanitized.calendars),
            len(sanitized.vehicle_journeys),
        )
        return cls(sanitized)

    # ------------------------------------------------------------ collections
    @property
    def operators(self) -> CollectionWithId[Operator]:
        return self._collections.operators

    @property
    def lines(self) -> CollectionWithId[Line]:
        return self._collections.lines

    @property
    def calendars(self) -> CollectionWithId[Calendar]:
        return self._collections.calendars

    @property
    def vehicle_journeys(self) -> CollectionWithId[VehicleJourney]:
        return self._collections.vehicle_journeys

    @property
    def stop_time_ids(self) -> Dict[StopTimeKey, str]:
        return dict(self._collections.stop_time_ids)

    @property
    def stop_time_headsigns(self) -> Dict[StopTimeKey, str]:
        return dict(self._collections.stop_time_headsigns)

    @property
    def stop_time_comments(self) -> Dict[StopTimeKey, str]:
        return dict(self._collections.stop_time_comments)

    def into_collections(self) -> Collections:
        return self._collections.copy()

    def counts(self) -> Dict[str, int]:
        return {
            "operators": len(self.operators),
            "lines": len(self.lines),
            "calendars": len(self.calendars),
            "vehicle_journeys": len(self.vehicle_journeys),
        }


def _sanitize(collections: Collections) -> Collections:
    """Drop lines without vehicle journeys, then operators without lines."""
    result = collections.copy()
    used_lines = {vj.line_id for vj in result.vehicle_journeys}
    lines = result.lines.retain(lambda line: line.id in used_lines)
    used_operators = {line.operator_id for line in lines}
    operators = result.operators.retain(lambda operator: operator.id in used_operators)

    dropped_lines = len(result.lines) - len(lines)
    dropped_operators = len(result.operators) - len(operators)
    if dropped_lines or dropped_operators:
        logger.warning(
            "Sanitizing removed %d unused lines and %d unused operators",
            dropped_lines,
            dropped_operators,
        )
    result.lines = lines
    result.operators = operators
    return result


def _check_references(collections: Collections) -> List[str]:
    problems: List[str] = []
    for line in collections.lines:
        if line.operator_id not in collections.operators:
            problems.append(f"line {line.id!r} references unknown operator {line.operator_id!r}")
    for vj in collections.vehicle_journeys:
        if vj.line_id not in collections.lines:
            problems.append(
                f"vehicle journey {vj.id!r} references unknown line {vj.line_id!r}"
            )
        if vj.calendar_id not in collections.calendars:
            problems.append(
                f"vehicle journey {vj.id!r} references unknown calendar {vj.calendar_id!r}"
            )
    vj_count = len(collections.vehicle_journeys)
    for name, attributes in collections.attribute_maps().items():
        dangling = _dangling_positions(attributes.keys(), vj_count)
        if dangling is not None:
            problems.append(f"{name} references unknown vehicle journey position {dangling}")
    return problems


def _dangling_positions(keys: Iterable[StopTimeKey], vj_count: int) -> Optional[int]:
    for vj_idx, _sequence in keys:
        if vj_idx < 0 or vj_idx >= vj_count:
            return vj_idx
    return None


__all__ = ["ATTRIBUTE_MAPS", "Collections", "StopTimeKey", "TransitModel"]
