"""Immutable filter selection and its translation into request parameters."""

from collections.abc import Iterable, Mapping

from attrs import define, evolve, field

MULTI_SELECT_DIMENSIONS = ("departments", "locations", "designations", "genders")
RANGE_BOUNDS = ("start", "end")

# Request keys understood by the dashboard endpoint.
QUERY_KEYS: dict[str, str] = {
    "departments": "departments",
    "locations": "locations",
    "designations": "designations",
    "genders": "gender",
}
BOUND_KEYS: dict[str, str] = {"start": "start_date", "end": "end_date"}


def _members(values: Iterable[str]) -> frozenset[str]:
    """Normalize a selection into a frozenset of non-empty strings."""
    if isinstance(values, str):
        values = [values]
    return frozenset(str(value) for value in values if value is not None and str(value) != "")


def _optional_month(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@define(slots=True, frozen=True)
class KpiFilterState:
    """A complete filter selection; replaced on every change, never mutated."""

    departments: frozenset[str] = field(factory=frozenset, converter=_members)
    locations: frozenset[str] = field(factory=frozenset, converter=_members)
    designations: frozenset[str] = field(factory=frozenset, converter=_members)
    genders: frozenset[str] = field(factory=frozenset, converter=_members)
    start_month: str | None = field(default=None, converter=_optional_month)
    end_month: str | None = field(default=None, converter=_optional_month)

    def members(self, dimension: str) -> frozenset[str]:
        """Return the selection for a multi-select ``dimension``."""
        _check_dimension(dimension)
        return getattr(self, dimension)

    def with_members(self, dimension: str, values: Iterable[str]) -> "KpiFilterState":
        """Return a copy with ``dimension`` replaced by ``values``."""
        _check_dimension(dimension)
        return evolve(self, **{dimension: values})

    def bound(self, bound: str) -> str | None:
        """Return the start or end month key."""
        _check_bound(bound)
        return getattr(self, f"{bound}_month")

    def with_bound(self, bound: str, month_key: str | None) -> "KpiFilterState":
        """Return a copy with the start or end month replaced."""
        _check_bound(bound)
        return evolve(self, **{f"{bound}_month": month_key})

    def is_empty(self) -> bool:
        """True when nothing is selected."""
        return active_filter_count(self) == 0


def _check_dimension(dimension: str) -> None:
    if dimension not in MULTI_SELECT_DIMENSIONS:
        valid = ", ".join(MULTI_SELECT_DIMENSIONS)
        raise ValueError(f"Unknown filter dimension {dimension!r}. Choose one of: {valid}.")


def _check_bound(bound: str) -> None:
    if bound not in RANGE_BOUNDS:
        raise ValueError(f"Unknown range bound {bound!r}. Choose start or end.")


def active_filter_count(state: KpiFilterState) -> int:
    """Count selected members plus one per date bound; used for display only."""
    count = sum(len(state.members(dimension)) for dimension in MULTI_SELECT_DIMENSIONS)
    count += sum(1 for bound in RANGE_BOUNDS if state.bound(bound) is not None)
    return count


def build_query(state: KpiFilterState) -> dict[str, list[str] | str]:
    """Translate a filter state into request parameters.

    Empty selections and absent bounds are omitted entirely. Member lists are
    sorted so identical selections always produce identical requests.
    """
    query: dict[str, list[str] | str] = {}
    for dimension in MULTI_SELECT_DIMENSIONS:
        members = state.members(dimension)
        if members:
            query[QUERY_KEYS[dimension]] = sorted(members)
    for bound in RANGE_BOUNDS:
        month = state.bound(bound)
        if month:
            query[BOUND_KEYS[bound]] = month
    return query


def has_filters(query: Mapping[str, object] | None) -> bool:
    """Return True when a query carries at least one non-empty filter."""
    if not query:
        return False
    for value in query.values():
        if isinstance(value, (list, tuple, set, frozenset)):
            if value:
                return True
        elif value is not None and value != "":
            return True
    return False


EMPTY_STATE = KpiFilterState()

__all__ = [
    "BOUND_KEYS",
    "EMPTY_STATE",
    "KpiFilterState",
    "MULTI_SELECT_DIMENSIONS",
    "QUERY_KEYS",
    "RANGE_BOUNDS",
    "active_filter_count",
    "build_query",
    "has_filters",
]
