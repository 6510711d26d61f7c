"""Common helpers for reading loosely typed record values."""

import math
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, TypeAlias

RawValue: TypeAlias = str | int | float | Decimal | None
RawRecord: TypeAlias = Mapping[str, Any]

UNKNOWN_CATEGORY = "Unknown"


def is_number(value: object) -> bool:
    """Return True for real numeric values; booleans and NaN do not count."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return not math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return False


def parse_number(value: object) -> float | None:
    """Coerce a numeric value or numeric string into a float."""
    if is_number(value):
        return float(value)  # type: ignore[arg-type]
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return None
        if parsed.is_finite():
            return float(parsed)
    return None


def first_number(record: RawRecord, keys: tuple[str, ...] | list[str]) -> float | None:
    """Return the first value among ``keys`` that parses as a number."""
    for key in keys:
        if key not in record:
            continue
        number = parse_number(record[key])
        if number is not None:
            return number
    return None


def first_category(
    record: RawRecord,
    keys: tuple[str, ...] | list[str],
    *,
    default: str = UNKNOWN_CATEGORY,
) -> str:
    """Return the first non-empty value among ``keys`` as a string."""
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return default


__all__ = [
    "RawRecord",
    "RawValue",
    "UNKNOWN_CATEGORY",
    "first_category",
    "first_number",
    "is_number",
    "parse_number",
]
