"""Typed failures raised while building or filtering a transit model."""

from __future__ import annotations

from typing import Iterable, Tuple


class TransitModelError(Exception):
    """Base class for every failure the package reports to callers."""


class ValidationFailed(TransitModelError):
    """The model-construction step rejected a set of collections."""

    def __init__(self, cause: str):
        self.cause = cause
        super().__init__(f"model validation failed: {cause}")


class FilterError(TransitModelError):
    """Base class for selection errors the caller has to correct."""


class NotFound(FilterError):
    def __init__(self, object_type: str, identifier: str):
        self.object_type = str(object_type)
        self.identifier = identifier
        super().__init__(f"{self.object_type} {identifier!r} not found")


class UnsupportedProperty(FilterError):
    def __init__(self, object_type: str, property_name: str):
        self.object_type = str(object_type)
        self.property_name = property_name
        super().__init__(
            f"property {property_name!r} is not supported for {self.object_type}"
        )


class EmptyMatch(FilterError):
    def __init__(self, property_name: str, values: Iterable[str]):
        self.property_name = property_name
        self.values: Tuple[str, ...] = tuple(sorted(values))
        super().__init__(
            f"no object matches property {property_name!r} with values {list(self.values)}"
        )


class EmptyModel(FilterError):
    def __init__(self) -> None:
        super().__init__("the filtered data does not contain any service anymore")


__all__ = [
    "EmptyMatch",
    "EmptyModel",
    "FilterError",
    "NotFound",
    "TransitModelError",
    "UnsupportedProperty",
    "ValidationFailed",
]
