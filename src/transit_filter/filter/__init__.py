"""Filter engine exports."""

from .engine import FilterReport, apply, apply_with_report
from .filter_spec import Action, FilterSpec, ObjectType, parse_filter_token
from .model_rebuilder import rebuild, remap_attributes, retained_ids
from .predicate_resolver import resolve, resolve_all
from .relation_cascade import ReachableSets, cascade

__all__ = [
    "Action",
    "FilterReport",
    "FilterSpec",
    "ObjectType",
    "ReachableSets",
    "apply",
    "apply_with_report",
    "cascade",
    "parse_filter_token",
    "rebuild",
    "remap_attributes",
    "resolve",
    "resolve_all",
    "retained_ids",
]
