"""Parsers turning dashboard API JSON into domain models."""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from .endpoints import get_category, get_chart_type
from .models import (
    DashboardResponse,
    DashboardResponseSchema,
    FiltersResponse,
    FiltersResponseSchema,
    HealthStatus,
    HealthStatusSchema,
    InitialDashboardSchema,
    KpiDefinition,
    KpiPayload,
    KpisListSchema,
)


def _clean_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a record with normalized keys, keeping the backend's key order."""
    return {str(key).strip(): value for key, value in record.items()}


def _kpi_payload(block: Mapping[str, Any]) -> KpiPayload:
    """Attach chart kind and category from the catalog to one KPI data block."""
    kpi_id = block["kpi_id"]
    return KpiPayload(
        kpi_id=kpi_id,
        kpi_name=block.get("kpi_name") or kpi_id,
        category=get_category(kpi_id),
        chart_type=get_chart_type(kpi_id),
        records=[_clean_record(row) for row in block.get("data") or []],
        filters_applied=block.get("filters_applied") or {},
    )


def normalize_kpi_blocks(blocks: Iterable[Mapping[str, Any]]) -> list[KpiPayload]:
    """Convert raw KPI data blocks into :class:`KpiPayload` objects."""
    return [_kpi_payload(block) for block in blocks]


def parse_filters(payload: Mapping[str, Any]) -> FiltersResponse:
    """Parse the filter options endpoint."""
    return FiltersResponseSchema().load(payload)


def parse_dashboard(payload: Mapping[str, Any]) -> DashboardResponse:
    """Parse the filtered dashboard endpoint, whose KPI blocks sit under ``data``."""
    data = DashboardResponseSchema().load(payload)
    return DashboardResponse(
        success=data["success"],
        filters_applied=data["filters_applied"] or {},
        tools_called=data["tools_called"],
        successful_tools=data["successful_tools"],
        failed_tools=data["failed_tools"],
        kpis=normalize_kpi_blocks(item["data"] for item in data["dashboard_data"]),
        ai_decision=data["ai_decision"],
        timestamp=data["timestamp"],
    )


def parse_initial_dashboard(payload: Mapping[str, Any]) -> DashboardResponse:
    """Parse the unfiltered initial endpoint into the common response shape."""
    data = InitialDashboardSchema().load(payload)
    return DashboardResponse(
        success=data["success"],
        filters_applied=data["filters_applied"] or {},
        tools_called=(),
        successful_tools=data["tools_used"],
        failed_tools=(),
        kpis=normalize_kpi_blocks(data["dashboard_data"]),
        ai_decision=data["ai_decision"],
        timestamp=data["timestamp"],
    )


def is_initial_payload(payload: Mapping[str, Any]) -> bool:
    """Return True when KPI blocks are listed directly instead of under ``data``."""
    if payload.get("initial_load") or "tools_used" in payload:
        return True
    items = payload.get("dashboard_data") or []
    return bool(items) and "kpi_id" in items[0]


def parse_any_dashboard(payload: Mapping[str, Any]) -> DashboardResponse:
    """Parse a saved dashboard payload from either endpoint."""
    if is_initial_payload(payload):
        return parse_initial_dashboard(payload)
    return parse_dashboard(payload)


def parse_kpis(payload: Mapping[str, Any]) -> list[KpiDefinition]:
    """Parse the KPI catalog endpoint."""
    return list(KpisListSchema().load(payload)["kpis"])


def parse_health(payload: Mapping[str, Any]) -> HealthStatus:
    """Parse the health endpoint."""
    return HealthStatusSchema().load(payload)


def load_json(text: str) -> dict[str, Any]:
    """Decode a JSON document that must be an object."""
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object at the top level.")
    return payload


__all__ = [
    "is_initial_payload",
    "load_json",
    "normalize_kpi_blocks",
    "parse_any_dashboard",
    "parse_dashboard",
    "parse_filters",
    "parse_health",
    "parse_initial_dashboard",
    "parse_kpis",
]
