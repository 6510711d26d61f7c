"""Summary statistics shown underneath KPI charts."""

from collections.abc import Sequence

import numpy as np
from attrs import asdict, define

from .utils import RawRecord, first_number

SUMMARY_FIELDS = ("count", "employee_count", "value", "total")


@define(slots=True, frozen=True)
class SummaryStats:
    """Total, average and count over the numeric column of a KPI."""

    total: float
    average: float
    count: int

    def to_dict(self) -> dict[str, float | int]:
        return asdict(self)


def collect_values(records: Sequence[RawRecord], fields: Sequence[str] = SUMMARY_FIELDS) -> list[float]:
    """Return at most one numeric value per record from the recognized fields."""
    keys = tuple(fields)
    values: list[float] = []
    for record in records:
        number = first_number(record, keys)
        if number is not None:
            values.append(number)
    return values


def summarize(
    records: Sequence[RawRecord],
    fields: Sequence[str] = SUMMARY_FIELDS,
) -> SummaryStats | None:
    """Summarize the records, or return None when nothing numeric was found.

    ``count`` is the number of values collected, which can be smaller than the
    number of records.
    """
    values = collect_values(records, fields)
    if not values:
        return None
    arr = np.asarray(values, dtype=float)
    total = float(arr.sum())
    return SummaryStats(total=total, average=total / arr.size, count=int(arr.size))


__all__ = ["SUMMARY_FIELDS", "SummaryStats", "collect_values", "summarize"]
