"""Unit tests for label/value field inference."""

from decimal import Decimal

import pytest

from kpi_dashboard.normalize.inference import (
    DEFAULT_RULES,
    FieldMapping,
    FieldRoles,
    InferenceRules,
    count_numeric_fields,
    infer_fields,
    is_ambiguous,
    placeholder_label,
    resolve_point,
)
from kpi_dashboard.normalize.utils import first_category, first_number, is_number, parse_number


def test_infer_fields_picks_first_string_and_first_numeric():
    """The first string key is the label and the first numeric key is the value."""
    record = {"department": "Engineering", "employee_count": 42, "percentage": 65.6}
    assert infer_fields(record) == FieldRoles(label_field="department", value_field="employee_count")


def test_percentage_is_never_the_value_field():
    """Display-only annotations are skipped even when they come first."""
    record = {"percentage": 45.0, "gender": "Female", "count": 9}
    roles = infer_fields(record)
    assert roles.value_field == "count"
    assert roles.label_field == "gender"


def test_numeric_synonym_used_when_generic_scan_finds_nothing():
    """Numbers serialized as strings are recovered through the synonym list."""
    record = {"item_name": "Paper", "count": "1,200"}
    assert infer_fields(record).value_field == "count"
    assert resolve_point(record, 0) == ("Paper", 1200.0)


def test_numeric_synonym_string_is_not_taken_as_label():
    """A serialized count listed first still feeds the value, not the label."""
    record = {"count": "1,200", "item": "Paper"}
    assert infer_fields(record) == FieldRoles(label_field="item", value_field="count")
    assert resolve_point(record, 0) == ("Paper", 1200.0)
    assert resolve_point({"count": "7"}, 2) == ("Item 3", 7.0)
    # Non-numeric text under a synonym name is still a label.
    assert infer_fields({"value": "Engineering", "n": 3}).label_field == "value"


def test_booleans_are_not_numbers():
    """A boolean flag never becomes the magnitude of a point."""
    record = {"name": "North", "active": True, "value": 3}
    assert infer_fields(record).value_field == "value"
    assert not is_number(True)


def test_empty_record_defaults_to_placeholder_and_zero():
    """An empty record still yields a displayable point."""
    assert resolve_point({}, 0) == ("Item 1", 0.0)


def test_only_numeric_fields_uses_placeholder_label():
    """Labels are never taken from numbers."""
    label, value = resolve_point({"year": 2024, "total": 7}, 2)
    assert label == "Item 3"
    assert value == 2024.0


def test_only_string_fields_value_defaults_to_zero():
    """Records without any number contribute zero."""
    assert resolve_point({"department": "Sales", "status": "open"}, 0) == ("Sales", 0.0)


def test_blank_label_falls_back_to_placeholder():
    """Whitespace-only labels are treated as missing."""
    assert resolve_point({"department": "  ", "count": 4}, 4) == ("Item 5", 4.0)


def test_mapping_overrides_inference_when_fields_exist():
    """An explicit mapping wins over inferred roles."""
    record = {"department": "Sales", "location": "Pune", "headcount": 10, "attrition": 2}
    mapping = FieldMapping(label_field="location", value_field="attrition")
    assert resolve_point(record, 0, mapping=mapping) == ("Pune", 2.0)


def test_mapping_falls_back_when_field_is_missing():
    """A mapping naming an absent field leaves the inferred role in place."""
    record = {"department": "Sales", "headcount": 10}
    mapping = FieldMapping(label_field="region", value_field="attrition")
    assert resolve_point(record, 0, mapping=mapping) == ("Sales", 10.0)


def test_custom_rule_order_changes_the_value_field():
    """Heuristic order is configuration, not code."""
    record = {"age": 40, "count": 3}
    synonym_first = InferenceRules(value_steps=("numeric_synonym", "first_numeric"))
    assert infer_fields(record).value_field == "age"
    assert infer_fields(record, synonym_first).value_field == "count"


def test_unknown_step_raises_value_error():
    """Misconfigured rule tables fail loudly."""
    with pytest.raises(ValueError, match="Unknown inference step"):
        infer_fields({"a": 1}, InferenceRules(value_steps=("median",)))


def test_display_only_match_is_case_insensitive():
    """Field names are compared after trimming and lowercasing."""
    assert DEFAULT_RULES.is_display_only(" Percentage ")
    assert not DEFAULT_RULES.is_display_only("count")


def test_ambiguity_counts_third_numeric_dimension():
    """A magnitude plus a percentage is expected; a third number is ambiguous."""
    assert count_numeric_fields({"a": 1, "b": 2.5, "c": "x"}) == 2
    assert not is_ambiguous({"department": "Sales", "count": 3, "percentage": 50.0})
    assert is_ambiguous({"department": "Sales", "headcount": 10, "attrition": 2, "percentage": 20.0})


def test_placeholder_label_is_one_based():
    assert placeholder_label(0) == "Item 1"


def test_parse_number_variants():
    """Numeric strings, decimals and junk are handled without raising."""
    assert parse_number("3.5") == 3.5
    assert parse_number(Decimal("2")) == 2.0
    assert parse_number("n/a") is None
    assert parse_number("") is None
    assert parse_number(float("nan")) is None
    assert parse_number(None) is None


def test_first_number_and_first_category():
    """Candidate keys are tried in order with documented fallbacks."""
    record = {"function": "", "department": "Ops", "employee_count": "7"}
    assert first_number(record, ("count", "employee_count")) == 7.0
    assert first_number(record, ("count",)) is None
    assert first_category(record, ("function", "department")) == "Ops"
    assert first_category(record, ("gender",)) == "Unknown"
