"""Transit model package exports."""

from .collection import CollectionWithId
from .domain_types import Calendar, Line, Operator, VehicleJourney
from .relations import RelationIndex
from .transit_model import ATTRIBUTE_MAPS, Collections, StopTimeKey, TransitModel

__all__ = [
    "ATTRIBUTE_MAPS",
    "Calendar",
    "CollectionWithId",
    "Collections",
    "Line",
    "Operator",
    "RelationIndex",
    "StopTimeKey",
    "TransitModel",
    "VehicleJourney",
]
