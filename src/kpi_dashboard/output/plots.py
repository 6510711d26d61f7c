"""Chart rendering for KPI view models."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import matplotlib.pyplot as plt
import numpy as np
import structlog
from attrs import evolve
from matplotlib.ticker import FuncFormatter

from ..normalize.grouping import GroupedSeries
from ..normalize.series import KpiSeriesPoint, color_for, share_of_total
from .utils import ensure_directory, format_month_tick, format_number, format_percent

logger = structlog.get_logger(__name__)

RENDERABLE_KINDS = ("bar", "pie", "line", "stacked_bar")


@dataclass(frozen=True)
class ChartConfig:
    """Styling options shared by every KPI chart."""

    width: float = 8.0
    height: float = 4.5
    dpi: int = 150
    grid_color: str = "#d9dde3"
    text_color: str = "#5b6472"
    font_size: int = 9
    donut_width: float = 0.36
    line_fill_alpha: float = 0.3


@dataclass(frozen=True)
class ChartReport:
    """Metadata describing a saved chart."""

    path: Path
    kpi_id: str
    chart_kind: str


def _thousands(value: float, _position: int) -> str:
    return format_number(value, max_fraction_digits=0)


def _style_axes(ax: Any, config: ChartConfig) -> None:
    ax.tick_params(labelsize=config.font_size, colors=config.text_color)
    ax.grid(True, linestyle="--", linewidth=0.5, color=config.grid_color)
    ax.set_axisbelow(True)
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)


def _draw_bar(ax: Any, points: Sequence[KpiSeriesPoint], config: ChartConfig) -> None:
    # Horizontal bars read top-down in input order.
    positions = np.arange(len(points))
    ax.barh(
        positions,
        [point.value for point in points],
        color=[color_for("bar", point.color_index) for point in points],
    )
    ax.set_yticks(positions)
    ax.set_yticklabels([point.label for point in points])
    ax.invert_yaxis()
    ax.xaxis.set_major_formatter(FuncFormatter(_thousands))
    _style_axes(ax, config)


def _pie_points(view: Any) -> list[KpiSeriesPoint]:
    """Return the pie wedges with negative values clipped to zero."""
    negative = [point.full_label for point in view.series if point.value < 0]
    if negative:
        logger.warning("plots.negative_wedges_clipped", kpi_id=view.kpi_id, labels=negative)
    return [evolve(point, value=max(point.value, 0.0)) for point in view.series]


def _draw_pie(ax: Any, points: Sequence[KpiSeriesPoint], config: ChartConfig) -> None:
    shares = share_of_total(points)
    wedges, _ = ax.pie(
        [point.value for point in points],
        colors=[color_for("pie", point.color_index) for point in points],
        startangle=90,
        counterclock=False,
        wedgeprops={"width": config.donut_width, "edgecolor": "white", "linewidth": 2},
    )
    ax.legend(
        wedges,
        [f"{point.label} ({format_percent(share)})" for point, share in zip(points, shares)],
        loc="center left",
        bbox_to_anchor=(1.0, 0.5),
        frameon=False,
        fontsize=config.font_size,
    )
    ax.set_aspect("equal")


def _draw_line(ax: Any, points: Sequence[KpiSeriesPoint], config: ChartConfig) -> None:
    positions = np.arange(len(points))
    values = [point.value for point in points]
    color = color_for("line", 0)
    ax.plot(positions, values, color=color, linewidth=2)
    ax.fill_between(positions, values, color=color, alpha=config.line_fill_alpha)
    ax.set_xticks(positions)
    ax.set_xticklabels([format_month_tick(point.full_label) for point in points], rotation=45, ha="right")
    ax.yaxis.set_major_formatter(FuncFormatter(_thousands))
    _style_axes(ax, config)


def _draw_stacked(ax: Any, grouped: GroupedSeries, config: ChartConfig) -> None:
    rows = grouped.stack_rows()
    positions = np.arange(len(rows))
    bottom = np.zeros(len(rows))
    for segment in grouped.segments():
        values = np.asarray(segment.values, dtype=float)
        ax.bar(
            positions,
            values,
            bottom=bottom,
            label=segment.name,
            color=color_for("stacked_bar", segment.color_index),
        )
        bottom = bottom + values
    ax.set_xticks(positions)
    ax.set_xticklabels([row.label for row in rows])
    ax.yaxis.set_major_formatter(FuncFormatter(_thousands))
    ax.legend(loc="upper right", frameon=False, fontsize=config.font_size)
    _style_axes(ax, config)


def render_kpi_chart(
    view: Any,
    *,
    output_dir: str | Path = "out",
    filename: str | None = None,
    config: ChartConfig | None = None,
) -> ChartReport:
    """Render a KPI view to a PNG file and report where it was written."""
    config = config or ChartConfig()
    if view.chart_kind not in RENDERABLE_KINDS:
        raise ValueError(f"Chart kind {view.chart_kind!r} has no chart to render.")
    if view.chart_kind == "pie":
        wedges = _pie_points(view)
        if not any(point.value > 0 for point in wedges):
            raise ValueError(f"KPI {view.kpi_id!r} has no positive values to chart.")
    out_dir = ensure_directory(output_dir)

    output_path = out_dir / (filename or f"{view.kpi_id}.png")
    fig, ax = plt.subplots(figsize=(config.width, config.height))
    try:
        if view.chart_kind == "stacked_bar":
            _draw_stacked(ax, view.grouped, config)
        elif view.chart_kind == "pie":
            _draw_pie(ax, wedges, config)
        elif view.chart_kind == "line":
            _draw_line(ax, view.series, config)
        else:
            _draw_bar(ax, view.series, config)
        ax.set_title(view.kpi_name or view.kpi_id, fontsize=config.font_size + 2)
        fig.tight_layout()
        fig.savefig(output_path, dpi=config.dpi)
    finally:
        plt.close(fig)
    return ChartReport(path=output_path, kpi_id=view.kpi_id, chart_kind=view.chart_kind)


__all__ = ["ChartConfig", "ChartReport", "RENDERABLE_KINDS", "render_kpi_chart"]
