"""Month options for the date-range filter, derived from the backend's data span."""

from datetime import date, datetime

import structlog
from attrs import define

logger = structlog.get_logger(__name__)

DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d")
MONTH_KEY_FORMAT = "%Y-%m-%d"
MONTH_LABEL_FORMAT = "%b %Y"


@define(slots=True, frozen=True)
class MonthOption:
    """A selectable month: first-of-month key plus a human label."""

    value: str
    label: str


def parse_backend_date(value: object) -> date | None:
    """Parse a backend timestamp such as ``2024-01-15 00:00:00``; None when invalid."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _next_month(current: date) -> date:
    if current.month == 12:
        return date(current.year + 1, 1, 1)
    return date(current.year, current.month + 1, 1)


def month_options(min_date: object, max_date: object) -> list[MonthOption]:
    """Enumerate every calendar month intersecting ``[min_date, max_date]``.

    Both boundary months are included. Missing, malformed or reversed input
    yields an empty list.
    """
    start = parse_backend_date(min_date)
    end = parse_backend_date(max_date)
    if start is None or end is None:
        logger.debug("filters.month_range_invalid", min_date=min_date, max_date=max_date)
        return []
    if start > end:
        logger.debug("filters.month_range_reversed", min_date=min_date, max_date=max_date)
        return []

    options: list[MonthOption] = []
    current = start.replace(day=1)
    last = end.replace(day=1)
    while True:
        options.append(
            MonthOption(
                value=current.strftime(MONTH_KEY_FORMAT),
                label=current.strftime(MONTH_LABEL_FORMAT),
            )
        )
        # Stop before stepping past the last month; December 9999 has no successor.
        if current == last:
            break
        current = _next_month(current)
    return options


def month_options_for(filters: object) -> list[MonthOption]:
    """Return month options for a parsed filters response, or none when it is absent."""
    date_range = getattr(filters, "date_range", None)
    if date_range is None:
        return []
    return month_options(date_range.min_date, date_range.max_date)


__all__ = ["MonthOption", "month_options", "month_options_for", "parse_backend_date"]
