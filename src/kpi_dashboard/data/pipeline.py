"""High level helpers turning committed filters into dashboard view models."""

from collections.abc import Mapping
from pathlib import Path

import structlog
from attrs import define, field

from ..filters.reconciler import FilterStateReconciler
from ..normalize.inference import FieldMapping
from ..views.kpi import KpiView, build_dashboard_views
from .ingest import DashboardDataBuilder
from .models import DashboardResponse

logger = structlog.get_logger(__name__)


@define(slots=True, frozen=True)
class DashboardSnapshot:
    """One fetched dashboard together with the query that produced it."""

    query: dict[str, list[str] | str]
    response: DashboardResponse
    views: tuple[KpiView, ...] = field(converter=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "query": dict(self.query),
            "timestamp": self.response.timestamp,
            "ai_decision": self.response.ai_decision,
            "successful_tools": list(self.response.successful_tools),
            "failed_tools": list(self.response.failed_tools),
            "kpis": [view.to_dict() for view in self.views],
        }


def refresh_dashboard(
    reconciler: FilterStateReconciler,
    *,
    builder: DashboardDataBuilder | None = None,
    mappings: Mapping[str, FieldMapping] | None = None,
) -> DashboardSnapshot:
    """Fetch the dashboard for the applied filters and build every KPI view."""
    query = reconciler.query()
    pipe_log = logger.bind(operation="refresh_dashboard", filters=sorted(query))
    pipe_log.info("pipeline.refresh_start")
    owned = builder is None
    builder = builder or DashboardDataBuilder()
    try:
        response = builder.load_dashboard(query)
    finally:
        if owned:
            builder.close()
    reconciler.mark_fetched()
    views = build_dashboard_views(response.kpis, mappings=mappings)
    pipe_log.info("pipeline.refresh_complete", kpis=len(response.kpis), views=len(views))
    return DashboardSnapshot(query=query, response=response, views=views)


def snapshot_from_file(
    path: str | Path,
    *,
    mappings: Mapping[str, FieldMapping] | None = None,
) -> DashboardSnapshot:
    """Build view models from a saved dashboard payload without calling the API."""
    builder = DashboardDataBuilder()
    try:
        response = builder.load_dashboard_file(path)
    finally:
        builder.close()
    views = build_dashboard_views(response.kpis, mappings=mappings)
    return DashboardSnapshot(query=dict(response.filters_applied), response=response, views=views)


__all__ = ["DashboardSnapshot", "refresh_dashboard", "snapshot_from_file"]
