"""Coordinate retrieval and parsing of dashboard payloads."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
from attrs import define, field

from .client import DashboardHttpClient
from .models import DashboardResponse, FiltersResponse
from .parser import load_json, parse_any_dashboard, parse_filters

logger = structlog.get_logger(__name__)


@define(slots=True)
class DashboardDataBuilder:
    """Fetch filters and KPI data from the API, or read saved payloads from disk."""

    client: DashboardHttpClient = field(factory=DashboardHttpClient)

    def load_filters(self) -> FiltersResponse:
        """Fetch the filter options offered by the backend."""
        filters = self.client.fetch_filters()
        logger.info(
            "builder.filters_loaded",
            departments=len(filters.departments),
            locations=len(filters.locations),
            designations=len(filters.designations),
            genders=len(filters.genders),
        )
        return filters

    def load_dashboard(self, query: Mapping[str, Any] | None = None) -> DashboardResponse:
        """Fetch the dashboard for an applied-filter query."""
        log = logger.bind(filters=sorted((query or {}).keys()))
        log.info("builder.dashboard_start")
        response = self.client.fetch_dashboard(query)
        if response.failed_tools:
            log.warning("builder.tools_failed", failed=list(response.failed_tools))
        log.info("builder.dashboard_loaded", kpis=len(response.kpis), success=response.success)
        return response

    def load_dashboard_file(self, path: str | Path) -> DashboardResponse:
        """Read a dashboard payload previously saved from either endpoint."""
        source = Path(path)
        response = parse_any_dashboard(load_json(source.read_text(encoding="utf-8")))
        logger.info("builder.dashboard_file_loaded", path=str(source), kpis=len(response.kpis))
        return response

    def load_filters_file(self, path: str | Path) -> FiltersResponse:
        """Read a filters payload previously saved to disk."""
        return parse_filters(load_json(Path(path).read_text(encoding="utf-8")))

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()
        logger.debug("builder.client_closed")


__all__ = ["DashboardDataBuilder"]
