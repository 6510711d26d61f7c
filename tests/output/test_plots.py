"""Unit tests for the chart renderers."""

import numpy as np
import pytest
from structlog.testing import capture_logs

from kpi_dashboard.data.models import KpiPayload
from kpi_dashboard.normalize.series import PALETTES
from kpi_dashboard.output.plots import ChartConfig, render_kpi_chart
from kpi_dashboard.views.kpi import build_kpi_view


@pytest.fixture
def mock_plt(mocker):
    """Fixture for a mock matplotlib.pyplot."""
    fig_mock = mocker.MagicMock()
    ax_mock = mocker.MagicMock()
    ax_mock.pie.return_value = ([mocker.MagicMock(), mocker.MagicMock()], [])
    subplots_mock = mocker.patch("matplotlib.pyplot.subplots", return_value=(fig_mock, ax_mock))
    close_mock = mocker.patch("matplotlib.pyplot.close")
    return subplots_mock, fig_mock, ax_mock, close_mock


def _view(chart_type, records, kpi_id="kpi"):
    return build_kpi_view(KpiPayload(kpi_id=kpi_id, kpi_name="Test KPI", chart_type=chart_type, records=records))


def test_bar_chart_uses_series_colours(mock_plt, tmp_path):
    """Bars are drawn horizontally with one palette colour per position."""
    subplots_mock, fig_mock, ax_mock, close_mock = mock_plt
    view = _view("bar", [{"department": "Engineering", "count": 42}, {"department": "Sales", "count": 22}])

    report = render_kpi_chart(view, output_dir=tmp_path)

    assert report.path == tmp_path / "kpi.png"
    assert report.chart_kind == "bar"
    _, kwargs = ax_mock.barh.call_args
    assert kwargs["color"] == [PALETTES["bar"][0], PALETTES["bar"][1]]
    ax_mock.set_yticklabels.assert_called_once_with(["Engineering", "Sales"])
    ax_mock.set_title.assert_called_with("Test KPI", fontsize=11)
    fig_mock.savefig.assert_called_once_with(tmp_path / "kpi.png", dpi=150)
    close_mock.assert_called_once_with(fig_mock)


def test_pie_chart_legend_shows_shares(mock_plt, tmp_path):
    _, _, ax_mock, _ = mock_plt
    view = _view("pie", [{"gender": "Female", "count": 1}, {"gender": "Male", "count": 3}])

    render_kpi_chart(view, output_dir=tmp_path, filename="gender.png")

    args, _ = ax_mock.legend.call_args
    assert args[1] == ["Female (25.0%)", "Male (75.0%)"]


def test_line_chart_formats_month_ticks(mock_plt, tmp_path):
    _, _, ax_mock, _ = mock_plt
    view = _view("line", [{"month": "2024-01", "hires": 3}, {"month": "2024-02", "hires": 5}])

    render_kpi_chart(view, output_dir=tmp_path)

    ax_mock.fill_between.assert_called_once()
    args, _ = ax_mock.set_xticklabels.call_args
    assert args[0] == ["Jan 24", "Feb 24"]


def test_stacked_chart_accumulates_bottoms(mock_plt, tmp_path, department_gender_records):
    """Each segment sits on top of the previous ones."""
    _, _, ax_mock, _ = mock_plt
    view = _view("stacked_bar", department_gender_records)

    render_kpi_chart(view, output_dir=tmp_path, config=ChartConfig(dpi=72))

    calls = ax_mock.bar.call_args_list
    assert [call.kwargs["label"] for call in calls] == ["Male", "Female", "Non-binary"]
    np.testing.assert_array_equal(calls[0].kwargs["bottom"], np.zeros(3))
    np.testing.assert_array_equal(calls[2].kwargs["bottom"], np.array([42.0, 20.0, 0.0]))


@pytest.mark.parametrize("chart_type", ["number", "table"])
def test_non_chart_views_are_rejected(mock_plt, tmp_path, chart_type):
    subplots_mock, _, _, _ = mock_plt
    with pytest.raises(ValueError, match="no chart"):
        render_kpi_chart(_view(chart_type, [{"total": 1}]), output_dir=tmp_path)
    subplots_mock.assert_not_called()


def test_render_writes_png(tmp_path):
    """A real render produces a file on disk."""
    view = _view("bar", [{"department": "Engineering", "count": 42}], kpi_id="by_department")
    report = render_kpi_chart(view, output_dir=tmp_path / "charts")
    assert report.path.exists()
    assert report.path.stat().st_size > 0


def test_pie_with_zero_total_is_not_drawn(mock_plt, tmp_path):
    """A filtered pie where every count is zero has nothing to draw."""
    subplots_mock, _, _, _ = mock_plt
    view = _view("pie", [{"gender": "Female", "count": 0}, {"gender": "Male", "count": 0}], kpi_id="gender")
    with pytest.raises(ValueError, match="no positive values"):
        render_kpi_chart(view, output_dir=tmp_path)
    subplots_mock.assert_not_called()


def test_pie_negative_wedges_are_clipped(mock_plt, tmp_path):
    _, _, ax_mock, close_mock = mock_plt
    view = _view("pie", [{"gender": "Female", "count": -2}, {"gender": "Male", "count": 5}])

    with capture_logs() as logs:
        render_kpi_chart(view, output_dir=tmp_path)

    args, _ = ax_mock.pie.call_args
    assert args[0] == [0.0, 5.0]
    warning = next(log for log in logs if log["event"] == "plots.negative_wedges_clipped")
    assert warning["log_level"] == "warning"
    assert warning["labels"] == ["Female"]
    close_mock.assert_called_once()


def test_figure_is_closed_when_drawing_fails(mock_plt, tmp_path):
    _, fig_mock, ax_mock, close_mock = mock_plt
    ax_mock.barh.side_effect = RuntimeError("backend failure")
    with pytest.raises(RuntimeError):
        render_kpi_chart(_view("bar", [{"department": "Sales", "count": 3}]), output_dir=tmp_path)
    close_mock.assert_called_once_with(fig_mock)
