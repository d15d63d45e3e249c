"""
Extract or remove operators and lines from an in-memory transit model.
"""

from .errors import (
    EmptyMatch,
    EmptyModel,
    FilterError,
    NotFound,
    TransitModelError,
    UnsupportedProperty,
    ValidationFailed,
)
from .filter import Action, FilterReport, FilterSpec, ObjectType, apply, apply_with_report
from .model import Collections, TransitModel

__all__ = [
    "Action",
    "Collections",
    "EmptyMatch",
    "EmptyModel",
    "FilterError",
    "FilterReport",
    "FilterSpec",
    "NotFound",
    "ObjectType",
    "TransitModel",
    "TransitModelError",
    "UnsupportedProperty",
    "ValidationFailed",
    "apply",
    "apply_with_report",
]
