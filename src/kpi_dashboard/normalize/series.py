"""Single-series chart data (bar, pie, line) built from raw KPI records."""

from collections.abc import Sequence

import structlog
from attrs import define

from .inference import DEFAULT_RULES, FieldMapping, InferenceRules, is_ambiguous, resolve_point
from .utils import RawRecord

logger = structlog.get_logger(__name__)

ELLIPSIS = "…"

PRIMARY = "#2f4883"
TEAL = "#1fa5b7"
GREEN = "#20ac6b"
AMBER = "#f59f0a"
PINK = "#e23670"
VIOLET = "#673ab6"

# Palette order per chart kind; colour assignment is position modulo length.
PALETTES: dict[str, tuple[str, ...]] = {
    "bar": (PRIMARY, TEAL, GREEN, AMBER, PINK, VIOLET),
    "pie": (PRIMARY, TEAL, GREEN, AMBER, PINK, VIOLET),
    "line": (TEAL,),
    "stacked_bar": (PRIMARY, PINK, GREEN, AMBER),
}

LABEL_LIMITS: dict[str, int] = {
    "bar": 20,
    "pie": 25,
    "line": 25,
    "stacked_bar": 15,
}


@define(slots=True, frozen=True)
class KpiSeriesPoint:
    """One canonical chart point: display label, tooltip label, value and colour slot."""

    label: str
    full_label: str
    value: float
    color_index: int


def truncate_label(label: str, limit: int) -> str:
    """Shorten ``label`` to at most ``limit`` characters, ending with an ellipsis."""
    if limit < 2:
        raise ValueError("Label limit must be at least 2 characters.")
    if len(label) <= limit:
        return label
    return label[: limit - 1] + ELLIPSIS


def palette_for(chart_kind: str) -> tuple[str, ...]:
    """Return the colour palette used by ``chart_kind``."""
    return PALETTES.get(chart_kind, PALETTES["bar"])


def color_for(chart_kind: str, color_index: int) -> str:
    """Resolve a colour index into a concrete colour for ``chart_kind``."""
    palette = palette_for(chart_kind)
    return palette[color_index % len(palette)]


def build_series(
    records: Sequence[RawRecord],
    chart_kind: str = "bar",
    *,
    mapping: FieldMapping | None = None,
    rules: InferenceRules = DEFAULT_RULES,
    palette_size: int | None = None,
    label_limit: int | None = None,
) -> list[KpiSeriesPoint]:
    """Convert raw records into ordered chart points.

    Each record is inferred independently. Colours depend only on the record's
    position and the palette size, so identical input always renders
    identically regardless of what was built before.
    """
    size = palette_size if palette_size is not None else len(palette_for(chart_kind))
    if size <= 0:
        raise ValueError("palette_size must be a positive integer.")
    limit = label_limit if label_limit is not None else LABEL_LIMITS.get(chart_kind, 20)

    if mapping is None and any(is_ambiguous(record) for record in records):
        logger.warning(
            "inference.ambiguous_value_field",
            chart_kind=chart_kind,
            fields=list(records[0].keys()) if records else [],
        )

    points: list[KpiSeriesPoint] = []
    for position, record in enumerate(records):
        full_label, value = resolve_point(record, position, rules=rules, mapping=mapping)
        points.append(
            KpiSeriesPoint(
                label=truncate_label(full_label, limit),
                full_label=full_label,
                value=value,
                color_index=position % size,
            )
        )
    return points


def series_total(points: Sequence[KpiSeriesPoint]) -> float:
    """Return the sum of point values."""
    return float(sum(point.value for point in points))


def share_of_total(points: Sequence[KpiSeriesPoint]) -> list[float]:
    """Return each point's percentage share of the series total."""
    total = series_total(points)
    if total == 0:
        return [0.0 for _ in points]
    return [point.value / total * 100.0 for point in points]


__all__ = [
    "KpiSeriesPoint",
    "LABEL_LIMITS",
    "PALETTES",
    "build_series",
    "color_for",
    "palette_for",
    "series_total",
    "share_of_total",
    "truncate_label",
]
