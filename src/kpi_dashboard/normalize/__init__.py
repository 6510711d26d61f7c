"""Normalization of loosely typed KPI records into chart-ready structures."""

from .grouping import (
    GroupedSeries,
    StackRow,
    StackSegment,
    group_records,
)
from .inference import (
    DEFAULT_RULES,
    FieldMapping,
    FieldRoles,
    InferenceRules,
    infer_fields,
    resolve_point,
)
from .series import (
    KpiSeriesPoint,
    build_series,
    color_for,
    share_of_total,
    truncate_label,
)
from .summary import SummaryStats, summarize

__all__ = [
    "DEFAULT_RULES",
    "FieldMapping",
    "FieldRoles",
    "GroupedSeries",
    "InferenceRules",
    "KpiSeriesPoint",
    "StackRow",
    "StackSegment",
    "SummaryStats",
    "build_series",
    "color_for",
    "group_records",
    "infer_fields",
    "resolve_point",
    "share_of_total",
    "summarize",
    "truncate_label",
]
