"""View models consumed by the presentation layer."""

from .kpi import (
    CHART_KIND_ORDER,
    KpiView,
    NumberView,
    UnsupportedChartKind,
    build_dashboard_views,
    build_kpi_view,
    sort_views,
)
from .table import TableView, build_table

__all__ = [
    "CHART_KIND_ORDER",
    "KpiView",
    "NumberView",
    "TableView",
    "UnsupportedChartKind",
    "build_dashboard_views",
    "build_kpi_view",
    "build_table",
    "sort_views",
]
