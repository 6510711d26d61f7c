"""Unit tests for CSV export."""

import pandas as pd

from kpi_dashboard.normalize.grouping import group_records
from kpi_dashboard.output.export import table_columns, write_grouped_csv, write_table_csv


def test_table_export_includes_every_row_and_column(tmp_path):
    """Export is not limited to the on-screen preview."""
    records = [{"item_name": f"Item {index}", "stock": index} for index in range(15)]
    records.append({"item_name": "Toner", "reorder_level": 5})

    path = write_table_csv(records, tmp_path / "exports" / "stock.csv")

    df = pd.read_csv(path)
    assert list(df.columns) == ["Item Name", "Stock", "Reorder Level"]
    assert len(df) == 16
    assert pd.isna(df.loc[15, "Stock"])
    assert df.loc[15, "Reorder Level"] == 5


def test_table_columns_first_seen_order():
    assert table_columns([{"b": 1}, {"a": 2, "b": 3}]) == ["b", "a"]


def test_grouped_export_is_zero_filled_and_uncapped(tmp_path):
    records = [{"department": f"Dept {index}", "gender": "Male", "count": index} for index in range(9)]
    records.append({"department": "Dept 0", "gender": "Female", "count": 4})

    path = write_grouped_csv(group_records(records), tmp_path / "split.csv")

    df = pd.read_csv(path)
    assert list(df.columns) == ["Category", "Male", "Female", "Total"]
    assert len(df) == 9
    first = df.iloc[0]
    assert (first["Category"], first["Male"], first["Female"], first["Total"]) == ("Dept 0", 0, 4, 4)
    assert df.iloc[8]["Female"] == 0
