"""Render-ready view models for each KPI on the dashboard."""

from collections.abc import Iterable, Mapping

import structlog
from attrs import define

from ..data.endpoints import CHART_KINDS
from ..data.models import KpiPayload
from ..normalize.grouping import GroupedSeries, group_records
from ..normalize.inference import FieldMapping, resolve_point
from ..normalize.series import KpiSeriesPoint, build_series
from ..normalize.summary import SummaryStats, summarize
from .table import TableView, build_table

logger = structlog.get_logger(__name__)

# Layout order of the KPI grid.
CHART_KIND_ORDER = ("number", "bar", "pie", "line", "stacked_bar", "table")
SERIES_KINDS = ("bar", "pie", "line")


class UnsupportedChartKind(ValueError):
    """Raised when a KPI asks for a chart kind the dashboard cannot draw."""


@define(slots=True, frozen=True)
class NumberView:
    """Single headline figure."""

    value: float
    prefix: str = ""
    suffix: str = ""


@define(slots=True, frozen=True)
class KpiView:
    """Everything the presentation layer needs to draw one KPI card."""

    kpi_id: str
    kpi_name: str
    category: str
    chart_kind: str
    number: NumberView | None = None
    series: tuple[KpiSeriesPoint, ...] | None = None
    grouped: GroupedSeries | None = None
    table: TableView | None = None
    summary: SummaryStats | None = None

    @property
    def is_empty(self) -> bool:
        """True when the card should show its "no data" state."""
        if self.chart_kind == "number":
            return self.number is None
        if self.series is not None:
            return not self.series
        if self.grouped is not None:
            return not self.grouped.primaries
        if self.table is not None:
            return self.table.total_rows == 0
        return True

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation of the view."""
        return {
            "kpi_id": self.kpi_id,
            "kpi_name": self.kpi_name,
            "category": self.category,
            "chart_kind": self.chart_kind,
            "number": None
            if self.number is None
            else {"value": self.number.value, "prefix": self.number.prefix, "suffix": self.number.suffix},
            "series": None
            if self.series is None
            else [
                {
                    "label": point.label,
                    "full_label": point.full_label,
                    "value": point.value,
                    "color_index": point.color_index,
                }
                for point in self.series
            ],
            "grouped": None if self.grouped is None else self.grouped.to_dict(),
            "table": None if self.table is None else self.table.to_dict(),
            "summary": None if self.summary is None else self.summary.to_dict(),
        }


def build_kpi_view(
    payload: KpiPayload,
    *,
    chart_kind: str | None = None,
    mapping: FieldMapping | None = None,
) -> KpiView:
    """Derive the view model for one KPI from its raw records."""
    kind = (chart_kind or payload.chart_type or "bar").lower()
    if kind not in CHART_KINDS:
        raise UnsupportedChartKind(f"Chart type {kind!r} not supported for {payload.kpi_id!r}.")
    records = list(payload.records)
    base = {
        "kpi_id": payload.kpi_id,
        "kpi_name": payload.kpi_name,
        "category": payload.category,
        "chart_kind": kind,
    }

    if kind == "number":
        value = resolve_point(records[0], 0, mapping=mapping)[1] if records else 0.0
        return KpiView(**base, number=NumberView(value=value))
    summary = summarize(records)
    if kind in SERIES_KINDS:
        points = build_series(records, kind, mapping=mapping)
        return KpiView(**base, series=tuple(points), summary=summary)
    if kind == "stacked_bar":
        return KpiView(**base, grouped=group_records(records), summary=summary)
    return KpiView(**base, table=build_table(records), summary=summary)


def sort_views(views: Iterable[KpiView]) -> list[KpiView]:
    """Order cards by chart kind for the grid layout; ties keep their order."""
    return sorted(views, key=lambda view: CHART_KIND_ORDER.index(view.chart_kind))


def build_dashboard_views(
    payloads: Iterable[KpiPayload],
    *,
    mappings: Mapping[str, FieldMapping] | None = None,
) -> list[KpiView]:
    """Build every KPI view; a KPI that cannot be derived is left out entirely."""
    mappings = mappings or {}
    views: list[KpiView] = []
    for payload in payloads:
        log = logger.bind(kpi_id=payload.kpi_id, chart_kind=payload.chart_type)
        try:
            view = build_kpi_view(payload, mapping=mappings.get(payload.kpi_id))
        except (TypeError, ValueError) as exc:
            log.warning("views.kpi_skipped", error=str(exc), error_type=type(exc).__name__)
            continue
        log.debug("views.kpi_built", records=len(payload.records), empty=view.is_empty)
        views.append(view)
    return sort_views(views)


__all__ = [
    "CHART_KIND_ORDER",
    "KpiView",
    "NumberView",
    "UnsupportedChartKind",
    "build_dashboard_views",
    "build_kpi_view",
    "sort_views",
]
