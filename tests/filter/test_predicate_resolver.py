from __future__ import annotations

import pytest

from tests.helpers import make_model
from transit_filter.errors import EmptyMatch, NotFound, UnsupportedProperty
from transit_filter.filter import ObjectType, resolve, resolve_all


def test_operator_id_matches_exact_identifiers():
    model = make_model()
    assert resolve(ObjectType.OPERATOR, "operator_id", {"O1", "O3"}, model.operators) == {"O1", "O3"}


def test_operator_id_reports_first_missing_identifier():
    model = make_model()
    with pytest.raises(NotFound) as excinfo:
        resolve(ObjectType.OPERATOR, "operator_id", {"O1", "ZZ", "YY"}, model.operators)
    assert excinfo.value.object_type == "operator"
    assert excinfo.value.identifier == "YY"


def test_line_code_is_case_sensitive_and_treats_missing_code_as_empty():
    model = make_model()
    assert resolve(ObjectType.LINE, "line_code", {"1", "4"}, model.lines) == {"L1", "L4"}
    assert resolve(ObjectType.LINE, "line_code", {""}, model.lines) == {"L3"}


def test_line_code_without_match_fails():
    model = make_model()
    with pytest.raises(EmptyMatch) as excinfo:
        resolve(ObjectType.LINE, "line_code", {"b", "a"}, model.lines)
    assert excinfo.value.property_name == "line_code"
    assert excinfo.value.values == ("a", "b")


def test_property_must_belong_to_object_type():
    model = make_model()
    with pytest.raises(UnsupportedProperty) as excinfo:
        resolve(ObjectType.LINE, "operator_id", {"O1"}, model.lines)
    assert excinfo.value.property_name == "operator_id"
    assert excinfo.value.object_type == "line"


def test_resolve_all_evaluates_every_property_in_order():
    model = make_model()
    with pytest.raises(NotFound):
        resolve_all(
            ObjectType.OPERATOR,
            {"operator_id": {"NOPE"}, "bogus": {"x"}},
            model.operators,
        )
    with pytest.raises(UnsupportedProperty):
        resolve_all(
            ObjectType.OPERATOR,
            {"operator_id": {"O1"}, "bogus": {"x"}},
            model.operators,
        )


def test_resolve_all_keeps_the_last_property_result(monkeypatch):
    from transit_filter.filter import predicate_resolver

    def match_name(object_type, property_name, values, collection):
        return {op.id for op in collection if op.name in values}

    monkeypatch.setitem(
        predicate_resolver._RESOLVERS[ObjectType.OPERATOR], "operator_name", match_name
    )
    model = make_model()
    ids = resolve_all(
        ObjectType.OPERATOR,
        {"operator_id": {"O1"}, "operator_name": {"o2"}},
        model.operators,
    )
    assert ids == {"O2"}
