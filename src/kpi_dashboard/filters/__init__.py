"""Filter state, month ranges and draft/applied reconciliation."""

from .months import MonthOption, month_options, month_options_for
from .reconciler import FilterStateReconciler
from .state import (
    EMPTY_STATE,
    MULTI_SELECT_DIMENSIONS,
    KpiFilterState,
    active_filter_count,
    build_query,
    has_filters,
)

__all__ = [
    "EMPTY_STATE",
    "FilterStateReconciler",
    "KpiFilterState",
    "MULTI_SELECT_DIMENSIONS",
    "MonthOption",
    "active_filter_count",
    "build_query",
    "has_filters",
    "month_options",
    "month_options_for",
]
