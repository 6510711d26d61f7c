"""Unit tests for the table preview."""

from kpi_dashboard.views.table import MAX_TABLE_ROWS, build_table


def test_preview_caps_columns_and_rows():
    records = [
        {"item_name": f"Item {index}", "avg_monthly_consumption": 12.5, "unit": "reams", "stock": 1200, "notes": "x"}
        for index in range(12)
    ]
    table = build_table(records)

    assert table.columns == ("item_name", "avg_monthly_consumption", "unit", "stock")
    assert table.headings == ("Item Name", "Avg Monthly Consumption", "Unit", "Stock")
    assert len(table.rows) == MAX_TABLE_ROWS
    assert table.rows[0] == ("Item 0", "12.5", "reams", "1,200")
    assert table.is_truncated
    assert table.footer == "Showing 10 of 12 items"


def test_missing_cells_render_as_dash():
    """Columns come from the first record; later records may lack them."""
    table = build_table([{"item": "Paper", "count": 3}, {"item": "Toner"}])
    assert table.rows[1] == ("Toner", "-")
    assert table.footer is None


def test_empty_table():
    table = build_table([])
    assert table.total_rows == 0
    assert table.to_dict()["rows"] == []
