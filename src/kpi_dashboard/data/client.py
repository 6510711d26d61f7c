"""HTTP client for the workforce dashboard API."""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urljoin

import requests
import structlog
from attrs import define, field

from ..filters.state import has_filters
from .endpoints import (
    BASE_URL,
    DASHBOARD_PATH,
    FILTERS_PATH,
    HEALTH_PATH,
    INITIAL_DASHBOARD_PATH,
    KPIS_PATH,
)
from .models import DashboardResponse, FiltersResponse, HealthStatus, KpiDefinition
from .parser import (
    parse_dashboard,
    parse_filters,
    parse_health,
    parse_initial_dashboard,
    parse_kpis,
)

logger = structlog.get_logger(__name__)


@define(slots=True)
class DashboardHttpClient:
    """Thin JSON wrapper around the dashboard endpoints; no retries, no caching."""

    base_url: str = BASE_URL
    timeout: float = 30.0
    session: requests.Session = field(factory=requests.Session)
    headers: dict[str, str] = field(
        factory=lambda: {
            "Accept": "application/json",
            "Content-Type": "application/json",
        },
    )

    def _url(self, path: str) -> str:
        base = self.base_url if self.base_url.endswith("/") else f"{self.base_url}/"
        return urljoin(base, path)

    def request_json(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Call an endpoint and return its decoded JSON object."""
        url = self._url(path)
        log = logger.bind(path=path, url=url, method=method)
        log.debug("http.fetch_start", timeout=self.timeout)
        try:
            response = self.session.request(
                method,
                url,
                json=dict(body) if body is not None else None,
                timeout=self.timeout,
                headers=self.headers,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            log.error("http.fetch_failed", status=status, exc_info=True)
            raise
        except requests.RequestException:
            log.error("http.request_error", exc_info=True)
            raise
        payload = response.json()
        log.debug("http.fetch_success", bytes=len(response.content))
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object from {url}.")
        return payload

    def fetch_filters(self) -> FiltersResponse:
        """Return the available filter options and the data date span."""
        return parse_filters(self.request_json(FILTERS_PATH))

    def fetch_initial_dashboard(self) -> DashboardResponse:
        """Return the unfiltered dashboard."""
        return parse_initial_dashboard(self.request_json(INITIAL_DASHBOARD_PATH))

    def fetch_dashboard(self, query: Mapping[str, Any] | None = None) -> DashboardResponse:
        """Return the dashboard for ``query``, using the initial endpoint when unfiltered."""
        if not has_filters(query):
            return self.fetch_initial_dashboard()
        body = {"filters": dict(query or {})}
        return parse_dashboard(self.request_json(DASHBOARD_PATH, method="POST", body=body))

    def fetch_kpis(self) -> list[KpiDefinition]:
        """Return the KPI catalog."""
        return parse_kpis(self.request_json(KPIS_PATH))

    def fetch_health(self) -> HealthStatus:
        """Return the backend health report."""
        return parse_health(self.request_json(HEALTH_PATH))

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()
        logger.debug("http.session_closed")


__all__ = ["DashboardHttpClient"]
