"""Dashboard API access: models, parsing and HTTP retrieval.

:mod:`kpi_dashboard.data.pipeline` depends on the view layer and is imported
explicitly rather than re-exported here.
"""

from .client import DashboardHttpClient
from .ingest import DashboardDataBuilder
from .models import (
    DashboardResponse,
    DateRange,
    FilterOption,
    FiltersResponse,
    HealthStatus,
    KpiDefinition,
    KpiPayload,
)

__all__ = [
    "DashboardDataBuilder",
    "DashboardHttpClient",
    "DashboardResponse",
    "DateRange",
    "FilterOption",
    "FiltersResponse",
    "HealthStatus",
    "KpiDefinition",
    "KpiPayload",
]
