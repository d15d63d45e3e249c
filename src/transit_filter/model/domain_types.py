"""Core dataclasses shared across the model and filter packages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class Operator:
    """Company running one or more lines."""

    id: str
    name: str = ""


@dataclass(frozen=True)
class Line:
    """Commercial line owned by an operator."""

    id: str
    operator_id: str
    name: str = ""
    code: Optional[str] = None


@dataclass(frozen=True)
class Calendar:
    """Service-validity pattern shared by vehicle journeys."""

    id: str
    dates: FrozenSet[date] = field(default_factory=frozenset)


@dataclass(frozen=True)
class VehicleJourney:
    """Single scheduled trip of a line running on one calendar."""

    id: str
    line_id: str
    calendar_id: str
    headsign: Optional[str] = None
