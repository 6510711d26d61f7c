"""Draft/applied filter reconciliation driven by user interaction."""

import structlog
from attrs import Factory, define, field

from .state import (
    EMPTY_STATE,
    KpiFilterState,
    active_filter_count,
    build_query,
)

logger = structlog.get_logger(__name__)

ALL = "all"


def _is_clear(value: str | None) -> bool:
    """Return True when a single-select value means "no filter"."""
    return value is None or value == "" or value.lower() == ALL


@define(slots=True)
class FilterStateReconciler:
    """Own the draft selection and the state applied to the last fetch.

    Every transition swaps in a new :class:`KpiFilterState` for the draft, so a
    reader holding the previous object never sees a half-applied change.
    """

    applied: KpiFilterState = field(factory=KpiFilterState)
    draft: KpiFilterState = field(default=Factory(lambda self: self.applied, takes_self=True))
    refetch_pending: bool = field(default=False, init=False)

    def toggle_member(self, dimension: str, value: str) -> KpiFilterState:
        """Flip membership of ``value`` in a multi-select dimension of the draft."""
        members = self.draft.members(dimension)
        updated = members - {value} if value in members else members | {value}
        self.draft = self.draft.with_members(dimension, updated)
        logger.debug("filters.toggle", dimension=dimension, value=value, selected=value in updated)
        return self.draft

    def set_single(self, dimension: str, value: str | None) -> KpiFilterState:
        """Select exactly one member of ``dimension``; ``"all"`` clears it."""
        members = () if _is_clear(value) else (value,)
        self.draft = self.draft.with_members(dimension, members)
        return self.draft

    def set_range(self, bound: str, month_key: str | None) -> KpiFilterState:
        """Set the start or end month; ``"all"`` clears the bound."""
        self.draft = self.draft.with_bound(bound, None if _is_clear(month_key) else month_key)
        return self.draft

    def reset(self, *, apply: bool = False) -> KpiFilterState:
        """Clear the draft; with ``apply`` the empty state is committed as well."""
        self.draft = EMPTY_STATE
        if apply:
            self.commit()
        return self.draft

    def commit(self) -> dict[str, list[str] | str]:
        """Apply the draft and return the query for the refetch that is now due."""
        self.applied = self.draft
        self.refetch_pending = True
        query = build_query(self.applied)
        logger.info("filters.committed", active=active_filter_count(self.applied), query=query)
        return query

    def mark_fetched(self) -> None:
        """Record that the fetch for the applied state has been issued."""
        self.refetch_pending = False

    def sync_from_applied(self) -> KpiFilterState:
        """Discard the draft and reseed it from the applied state."""
        self.draft = self.applied
        return self.draft

    def replace_applied(self, state: KpiFilterState) -> KpiFilterState:
        """Handle an applied state changed elsewhere, e.g. a programmatic reset."""
        self.applied = state
        return self.sync_from_applied()

    def active_filter_count(self, state: KpiFilterState | None = None) -> int:
        """Return the badge count for ``state`` (the draft by default)."""
        return active_filter_count(self.draft if state is None else state)

    @property
    def is_dirty(self) -> bool:
        """True when the draft has changes that are not applied yet."""
        return self.draft != self.applied

    def query(self) -> dict[str, list[str] | str]:
        """Return request parameters for the applied state."""
        return build_query(self.applied)


__all__ = ["ALL", "FilterStateReconciler"]
