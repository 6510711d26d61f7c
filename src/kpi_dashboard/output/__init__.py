"""Chart rendering and CSV export for KPI views."""

from .export import write_grouped_csv, write_table_csv
from .plots import ChartConfig, ChartReport, render_kpi_chart

__all__ = [
    "ChartConfig",
    "ChartReport",
    "render_kpi_chart",
    "write_grouped_csv",
    "write_table_csv",
]
