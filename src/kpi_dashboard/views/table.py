"""Compact table view for KPIs rendered as tables."""

from collections.abc import Sequence

from attrs import define

from ..normalize.utils import RawRecord
from ..output.utils import format_cell, format_column_name

MAX_TABLE_COLUMNS = 4
MAX_TABLE_ROWS = 10


@define(slots=True, frozen=True)
class TableView:
    """Formatted preview of a KPI table; the raw records stay available for export."""

    columns: tuple[str, ...]
    headings: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    total_rows: int

    @property
    def is_truncated(self) -> bool:
        """True when more rows exist than the preview shows."""
        return self.total_rows > len(self.rows)

    @property
    def footer(self) -> str | None:
        """Caption shown under a truncated table."""
        if not self.is_truncated:
            return None
        return f"Showing {len(self.rows)} of {self.total_rows} items"

    def to_dict(self) -> dict[str, object]:
        return {
            "columns": list(self.columns),
            "headings": list(self.headings),
            "rows": [list(row) for row in self.rows],
            "total_rows": self.total_rows,
            "footer": self.footer,
        }


def build_table(
    records: Sequence[RawRecord],
    *,
    max_columns: int = MAX_TABLE_COLUMNS,
    max_rows: int = MAX_TABLE_ROWS,
) -> TableView:
    """Build the table preview from the first record's columns."""
    if not records:
        return TableView(columns=(), headings=(), rows=(), total_rows=0)
    columns = tuple(records[0].keys())[:max_columns]
    rows = tuple(
        tuple(format_cell(record.get(column), column) for column in columns)
        for record in records[:max_rows]
    )
    return TableView(
        columns=columns,
        headings=tuple(format_column_name(column) for column in columns),
        rows=rows,
        total_rows=len(records),
    )


__all__ = ["MAX_TABLE_COLUMNS", "MAX_TABLE_ROWS", "TableView", "build_table"]
