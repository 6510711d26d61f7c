"""Dashboard API locations and the KPI catalog."""

BASE_URL = "http://127.0.0.1:8000/api/"

FILTERS_PATH = "filters/"
DASHBOARD_PATH = "dashboard/"
INITIAL_DASHBOARD_PATH = "dashboard/initial"
KPIS_PATH = "dashboard/kpis"
HEALTH_PATH = "dashboard/health"

CHART_KINDS = ("number", "bar", "pie", "line", "table", "stacked_bar")
DEFAULT_CHART_KIND = "bar"
DEFAULT_CATEGORY = "workforce"

CHART_TYPES: dict[str, str] = {
    "total_active_employees": "number",
    "active_employees_by_department": "bar",
    "gender_distribution": "pie",
    "active_employees_by_location": "bar",
    "active_employees_by_designation": "bar",
    "hiring_trend_by_joining_date": "line",
    "employee_tenure_analysis": "pie",
    "gender_split_by_department": "stacked_bar",
    "avg_monthly_consumption_per_item": "table",
    "inventory_stock_levels": "bar",
    "projected_headcount": "table",
}

CATEGORIES: dict[str, str] = {
    "total_active_employees": "workforce",
    "active_employees_by_department": "workforce",
    "gender_distribution": "diversity",
    "active_employees_by_location": "geographic",
    "active_employees_by_designation": "hierarchy",
    "hiring_trend_by_joining_date": "trend",
    "employee_tenure_analysis": "workforce",
    "gender_split_by_department": "diversity",
    "avg_monthly_consumption_per_item": "inventory",
    "inventory_stock_levels": "inventory",
    "projected_headcount": "forecast",
}


def get_chart_type(kpi_id: str) -> str:
    """Return the chart kind used for ``kpi_id``."""
    return CHART_TYPES.get(kpi_id, DEFAULT_CHART_KIND)


def get_category(kpi_id: str) -> str:
    """Return the dashboard category of ``kpi_id``."""
    return CATEGORIES.get(kpi_id, DEFAULT_CATEGORY)


__all__ = [
    "BASE_URL",
    "CATEGORIES",
    "CHART_KINDS",
    "CHART_TYPES",
    "get_category",
    "get_chart_type",
]
