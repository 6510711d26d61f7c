"""Shared formatting helpers for KPI rendering and export."""

import re
from datetime import date
from pathlib import Path

from ..normalize.utils import is_number

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def ensure_directory(path: str | Path) -> Path:
    """Create the directory at ``path`` if needed and return its Path."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def format_percent(value: float, digits: int = 1) -> str:
    """Format a value already expressed in percent, e.g. ``12.5`` -> ``12.5%``."""
    return f"{value:.{digits}f}%"


def format_number(value: float | int, max_fraction_digits: int = 3) -> str:
    """Group thousands and drop trailing zeros, e.g. ``1234.50`` -> ``1,234.5``."""
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:,}"
    text = f"{float(value):,.{max_fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_column_name(column: str) -> str:
    """Turn ``snake_case`` keys into table headings, e.g. ``employee_count`` -> ``Employee Count``."""
    return re.sub(r"\b\w", lambda match: match.group(0).upper(), column.replace("_", " "))


def format_cell(value: object, column: str) -> str:
    """Render one table cell; missing values show as a dash."""
    if value is None:
        return "-"
    if is_number(value):
        digits = 2 if ("consumption" in column or "count" in column) else 3
        return format_number(value, max_fraction_digits=digits)  # type: ignore[arg-type]
    return str(value)


def format_month_tick(label: str, *, long: bool = False) -> str:
    """Format ``YYYY-MM`` axis labels as ``Jan 24`` (or ``January 2024``); others pass through."""
    match = MONTH_PATTERN.match(label)
    if not match:
        return label
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return label
    return date(year, month, 1).strftime("%B %Y" if long else "%b %y")
