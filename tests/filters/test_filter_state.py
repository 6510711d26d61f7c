"""Unit tests for the immutable filter state and query construction."""

import pytest
from attrs.exceptions import FrozenInstanceError

from kpi_dashboard.filters.state import (
    EMPTY_STATE,
    KpiFilterState,
    active_filter_count,
    build_query,
    has_filters,
)


def test_empty_state_yields_empty_query():
    """No selections and no bounds produce no keys at all."""
    assert build_query(KpiFilterState()) == {}
    assert EMPTY_STATE.is_empty()


def test_query_omits_empty_dimensions_and_maps_keys():
    """Genders travel as ``gender`` and bounds as ``start_date``/``end_date``."""
    state = KpiFilterState(
        departments={"Sales", "Engineering"},
        genders={"Female"},
        start_month="2024-01-01",
    )
    assert build_query(state) == {
        "departments": ["Engineering", "Sales"],
        "gender": ["Female"],
        "start_date": "2024-01-01",
    }


def test_state_is_frozen():
    with pytest.raises(FrozenInstanceError):
        EMPTY_STATE.departments = frozenset({"Sales"})


def test_with_members_returns_new_state():
    """Transitions never mutate the previous state object."""
    updated = EMPTY_STATE.with_members("locations", ["Pune", "", None])
    assert updated.locations == frozenset({"Pune"})
    assert EMPTY_STATE.locations == frozenset()


def test_blank_bounds_are_absent():
    assert KpiFilterState(end_month="  ").end_month is None
    assert EMPTY_STATE.with_bound("end", "2024-03-01").bound("end") == "2024-03-01"


def test_unknown_dimension_or_bound_raises():
    with pytest.raises(ValueError, match="Unknown filter dimension"):
        EMPTY_STATE.members("regions")
    with pytest.raises(ValueError, match="Unknown range bound"):
        EMPTY_STATE.with_bound("middle", "2024-01-01")


def test_active_filter_count():
    """Members are counted individually and each set bound adds one."""
    state = KpiFilterState(
        departments={"Sales", "Ops"},
        designations={"Analyst"},
        start_month="2024-01-01",
        end_month="2024-02-01",
    )
    assert active_filter_count(state) == 5


def test_has_filters():
    assert not has_filters(None)
    assert not has_filters({})
    assert not has_filters({"departments": [], "start_date": ""})
    assert has_filters({"gender": ["Male"]})
    assert has_filters({"end_date": "2024-01-01"})
