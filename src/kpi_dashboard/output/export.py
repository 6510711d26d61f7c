"""CSV export of complete KPI tables and aggregations."""

from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from ..normalize.grouping import GroupedSeries
from ..normalize.utils import RawRecord
from .utils import format_column_name


def table_columns(records: Sequence[RawRecord]) -> list[str]:
    """Return the union of record keys in first-seen order."""
    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def write_table_csv(records: Sequence[RawRecord], path: str | Path) -> Path:
    """Write every record and every column, not just the on-screen preview."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    columns = table_columns(records)
    df = pd.DataFrame([dict(record) for record in records], columns=columns)
    df.columns = [format_column_name(column) for column in columns]
    df.to_csv(output, index=False)
    return output


def write_grouped_csv(grouped: GroupedSeries, path: str | Path, *, primary_heading: str = "Category") -> Path:
    """Write the full primary x secondary aggregation with zero-filled gaps."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    rows = [
        {primary_heading: row.full_label, **row.segments, "Total": row.height}
        for row in grouped.stack_rows(limit=None)
    ]
    df = pd.DataFrame(rows, columns=[primary_heading, *grouped.secondaries, "Total"])
    df.to_csv(output, index=False)
    return output


__all__ = ["table_columns", "write_grouped_csv", "write_table_csv"]
