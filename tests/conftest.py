"""Global test configuration and fixtures."""

from unittest.mock import MagicMock

import pytest
import requests
import structlog


@pytest.fixture
def department_gender_records():
    """Stacked-bar records as returned by the gender split KPI."""
    return [
        {"department": "Engineering", "gender": "Male", "count": 30},
        {"department": "Engineering", "gender": "Female", "count": 12},
        {"department": "Sales", "gender": "Female", "count": 9},
        {"department": "Sales", "gender": "Male", "count": 11},
        {"department": "Support", "gender": "Non-binary", "count": 2},
    ]


@pytest.fixture
def filters_payload():
    """Raw body of the filter options endpoint."""
    return {
        "departments": [
            {"value": "Engineering", "label": "Engineering", "count": 42},
            {"value": "Sales", "label": "Sales", "count": 20},
        ],
        "locations": [{"value": "Pune", "count": 31}],
        "designations": [{"value": "Analyst", "label": "Analyst"}],
        "genders": [{"value": "Female"}, {"value": "Male"}],
        "date_range": {"min_date": "2024-01-15 00:00:00", "max_date": "2024-03-10 00:00:00"},
        "last_updated": "2024-03-11T08:00:00",
        "server_version": "2.1",
    }


@pytest.fixture
def initial_dashboard_payload():
    """Raw body of the unfiltered initial dashboard endpoint."""
    return {
        "success": True,
        "initial_load": True,
        "filters_applied": {},
        "tools_used": ["get_total_active_employees", "get_active_employees_by_department"],
        "ai_decision": False,
        "timestamp": "2024-03-11T08:00:00",
        "dashboard_data": [
            {
                "kpi_id": "total_active_employees",
                "kpi_name": "Total Active Employees",
                "data": [{"total_active_employees": 64}],
            },
            {
                "kpi_id": "active_employees_by_department",
                "kpi_name": "Active Employees by Department",
                "data": [
                    {"department": "Engineering", "employee_count": 42, "percentage": 65.6},
                    {"department": "Sales", "employee_count": 22, "percentage": 34.4},
                ],
            },
            {
                "kpi_id": "gender_split_by_department",
                "kpi_name": "Gender Split by Department",
                "data": [
                    {"department": "Engineering", "gender": "Male", "count": 30},
                    {"department": "Engineering", "gender": "Female", "count": 12},
                    {"department": "Sales", "gender": "Female", "count": 9},
                ],
            },
            {
                "kpi_id": "avg_monthly_consumption_per_item",
                "kpi_name": "Avg Monthly Consumption",
                "data": [
                    {"item_name": "Paper", "avg_monthly_consumption": 12.345, "unit": "reams"},
                    {"item_name": "Toner", "avg_monthly_consumption": 2, "unit": "units"},
                ],
            },
        ],
    }


@pytest.fixture
def filtered_dashboard_payload():
    """Raw body of the filtered dashboard endpoint, with KPI blocks nested under ``data``."""
    return {
        "success": True,
        "filters_applied": {"departments": ["Sales"]},
        "tools_called": [{"tool": "get_gender_distribution", "parameters": {"departments": ["Sales"]}}],
        "successful_tools": ["get_gender_distribution"],
        "failed_tools": ["get_inventory_stock_levels"],
        "ai_decision": True,
        "timestamp": "2024-03-11T09:00:00",
        "dashboard_data": [
            {
                "tool": "get_gender_distribution",
                "parameters": {"departments": ["Sales"]},
                "data": {
                    "kpi_id": "gender_distribution",
                    "kpi_name": "Gender Distribution",
                    "data": [
                        {"gender": "Female", "count": 9, "percentage": 45.0},
                        {"gender": "Male", "count": 11, "percentage": 55.0},
                    ],
                    "filters_applied": {"departments": ["Sales"]},
                },
            }
        ],
    }


@pytest.fixture
def json_session():
    """Build a mocked ``requests.Session`` whose requests return ``payload``."""

    def make(payload=None, *, status_code=200, error=None):
        session = MagicMock()
        response = MagicMock()
        response.status_code = status_code
        response.content = b"{}"
        response.json.return_value = payload
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(response=response)
        if error is not None:
            session.request.side_effect = error
        else:
            session.request.return_value = response
        return session

    return make


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keep logging configuration from leaking between tests."""
    yield
    structlog.reset_defaults()
