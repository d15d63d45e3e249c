from __future__ import annotations

import textwrap

import pytest
import yaml

from transit_filter.filter import Action, FilterSpec, ObjectType, parse_filter_token


def test_add_accumulates_values_per_property():
    spec = FilterSpec(Action.REMOVE)
    spec.add(ObjectType.OPERATOR, "operator_id", "O1")
    spec.add("operator", "operator_id", "O2")
    spec.add(ObjectType.LINE, "line_code", "12")

    assert spec.action is Action.REMOVE
    assert spec.predicates[ObjectType.OPERATOR] == {"operator_id": {"O1", "O2"}}
    assert spec.predicates[ObjectType.LINE] == {"line_code": {"12"}}


def test_properties_keep_insertion_order():
    spec = FilterSpec()
    spec.add(ObjectType.LINE, "line_code", "1")
    spec.add(ObjectType.LINE, "other", "x")
    spec.add(ObjectType.LINE, "line_code", "2")
    assert list(spec.predicates[ObjectType.LINE]) == ["line_code", "other"]


def test_unknown_tokens_are_rejected():
    with pytest.raises(ValueError):
        Action.parse("keep")
    with pytest.raises(ValueError):
        FilterSpec().add("network", "network_id", "N1")


def test_parse_filter_token():
    assert parse_filter_token("Line:line_code:A:1") == (ObjectType.LINE, "line_code", "A:1")
    with pytest.raises(ValueError):
        parse_filter_token("operator:O1")


def test_yaml_roundtrip(tmp_path):
    config_path = tmp_path / "filter.yaml"
    config_path.write_text(
        textwrap.dedent(
            """
            action: Remove
            filters:
              operator:
                operator_id: [O2, O1]
              line:
                line_code: "7"
            """
        ).strip(),
        encoding="utf-8",
    )
    spec = FilterSpec.from_yaml(config_path)
    assert spec.action is Action.REMOVE
    assert spec.predicates[ObjectType.OPERATOR]["operator_id"] == {"O1", "O2"}
    assert spec.predicates[ObjectType.LINE]["line_code"] == {"7"}

    roundtrip_path = tmp_path / "nested" / "roundtrip.yaml"
    spec.to_yaml(roundtrip_path)
    assert FilterSpec.from_yaml(roundtrip_path) == spec


def test_yaml_rejects_malformed_filters(tmp_path):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("filters:\n  operator:\n    operator_id: []\n", encoding="utf-8")
    with pytest.raises(ValueError):
        FilterSpec.from_yaml(config_path)
    with pytest.raises(TypeError):
        FilterSpec.from_mapping({"filters": ["operator"]})
    with pytest.raises(FileNotFoundError):
        FilterSpec.from_yaml(tmp_path / "missing.yaml")


def test_constructor_normalizes_string_keys():
    spec = FilterSpec("remove", {"Operator": {"operator_id": ["O1", 2]}})
    assert spec.action is Action.REMOVE
    assert spec.predicates == {ObjectType.OPERATOR: {"operator_id": {"O1", "2"}}}
    assert all(type(key) is ObjectType for key in spec.predicates)
    with pytest.raises(ValueError):
        FilterSpec(Action.EXTRACT, {"network": {"network_id": {"N1"}}})


@pytest.mark.parametrize("raw", ["1.5", "true", "01", "[7]"])
def test_yaml_requires_quoted_values(raw):
    data = yaml.safe_load(f"filters:\n  line:\n    line_code: {raw}\n")
    with pytest.raises(ValueError, match="quote"):
        FilterSpec.from_mapping(data)
