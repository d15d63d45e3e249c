"""Set-to-set relation lookups between operators, lines, calendars and trips."""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from .collection import CollectionWithId
from .domain_types import Calendar, Line, Operator, VehicleJourney


class RelationIndex:
    """Answers the four fixed relation queries over one set of collections.

    Every query takes a set of positions in the source collection and returns
    the set of positions in the target collection. The index is built once
    from the collections it was given and is only valid for them.
    """

    def __init__(
        self,
        operators: CollectionWithId[Operator],
        lines: CollectionWithId[Line],
        calendars: CollectionWithId[Calendar],
        vehicle_journeys: CollectionWithId[VehicleJourney],
    ):
        self._lines_by_operator: Dict[int, Set[int]] = {}
        self._vjs_by_line: Dict[int, Set[int]] = {}
        self._calendar_by_vj: Dict[int, int] = {}

        for line_idx, line in lines.items():
            operator_idx = operators.get_idx(line.operator_id)
            if operator_idx is not None:
                self._lines_by_operator.setdefault(operator_idx, set()).add(line_idx)
        for vj_idx, vj in vehicle_journeys.items():
            line_idx = lines.get_idx(vj.line_id)
            if line_idx is not None:
                self._vjs_by_line.setdefault(line_idx, set()).add(vj_idx)
            calendar_idx = calendars.get_idx(vj.calendar_id)
            if calendar_idx is not None:
                self._calendar_by_vj[vj_idx] = calendar_idx

    # ------------------------------------------------------------ line-based
    def lines_to_vehicle_journeys(self, line_positions: Iterable[int]) -> Set[int]:
        result: Set[int] = set()
        for line_idx in line_positions:
            result.update(self._vjs_by_line.get(line_idx, ()))
        return result

    def lines_to_calendars(self, line_positions: Iterable[int]) -> Set[int]:
        return self._calendars_of(self.lines_to_vehicle_journeys(line_positions))

    # -------------------------------------------------------- operator-based
    def operators_to_vehicle_journeys(self, operator_positions: Iterable[int]) -> Set[int]:
        return self.lines_to_vehicle_journeys(self._lines_of(operator_positions))

    def operators_to_calendars(self, operator_positions: Iterable[int]) -> Set[int]:
        return self._calendars_of(self.operators_to_vehicle_journeys(operator_positions))

    # --------------------------------------------------------------- helpers
    def _lines_of(self, operator_positions: Iterable[int]) -> List[int]:
        lines: List[int] = []
        for operator_idx in operator_positions:
            lines.extend(self._lines_by_operator.get(operator_idx, ()))
        return lines

    def _calendars_of(self, vj_positions: Iterable[int]) -> Set[int]:
        return {
            self._calendar_by_vj[vj_idx]
            for vj_idx in vj_positions
            if vj_idx in self._calendar_by_vj
        }


__all__ = ["RelationIndex"]
