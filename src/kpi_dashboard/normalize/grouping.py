"""Two-dimensional aggregation for stacked and grouped bar charts."""

from collections.abc import Sequence

import structlog
from attrs import define, field

from .series import LABEL_LIMITS, truncate_label
from .utils import RawRecord, first_category, first_number

logger = structlog.get_logger(__name__)

PRIMARY_KEYS = ("department", "function")
SECONDARY_KEYS = ("gender",)
COUNT_KEYS = ("count", "employee_count")

# Axis space fits this many stacks; the full aggregation is kept for export.
MAX_STACK_GROUPS = 7


@define(slots=True, frozen=True)
class StackRow:
    """One stack on the category axis with a segment for every secondary value."""

    label: str
    full_label: str
    segments: dict[str, float]

    @property
    def height(self) -> float:
        """Total height of the stack."""
        return float(sum(self.segments.values()))


@define(slots=True, frozen=True)
class StackSegment:
    """One secondary-category series aligned with the primary order."""

    name: str
    color_index: int
    values: tuple[float, ...]


@define(slots=True, frozen=True)
class GroupedSeries:
    """Accumulated totals keyed by primary then secondary category."""

    totals: dict[str, dict[str, float]] = field(factory=dict)
    primaries: tuple[str, ...] = ()
    secondaries: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.primaries)

    def value(self, primary: str, secondary: str) -> float:
        """Return the total for a combination, zero when it was never observed."""
        return self.totals.get(primary, {}).get(secondary, 0.0)

    def stack_height(self, primary: str) -> float:
        """Return the summed height of the stack for ``primary``."""
        return float(sum(self.totals.get(primary, {}).values()))

    @property
    def is_truncated(self) -> bool:
        """True when more primary groups exist than the chart displays."""
        return len(self.primaries) > MAX_STACK_GROUPS

    def stack_rows(
        self,
        limit: int | None = MAX_STACK_GROUPS,
        *,
        label_limit: int = LABEL_LIMITS["stacked_bar"],
    ) -> list[StackRow]:
        """Return render rows with zero-filled segments in a consistent order."""
        primaries = self.primaries if limit is None else self.primaries[:limit]
        return [
            StackRow(
                label=truncate_label(primary, label_limit),
                full_label=primary,
                segments={secondary: self.value(primary, secondary) for secondary in self.secondaries},
            )
            for primary in primaries
        ]

    def segments(self, limit: int | None = MAX_STACK_GROUPS, *, palette_size: int = 4) -> list[StackSegment]:
        """Return one series per secondary category for stacked rendering."""
        if palette_size <= 0:
            raise ValueError("palette_size must be a positive integer.")
        primaries = self.primaries if limit is None else self.primaries[:limit]
        return [
            StackSegment(
                name=secondary,
                color_index=position % palette_size,
                values=tuple(self.value(primary, secondary) for primary in primaries),
            )
            for position, secondary in enumerate(self.secondaries)
        ]

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation including the full aggregation."""
        return {
            "primaries": list(self.primaries),
            "secondaries": list(self.secondaries),
            "totals": {primary: dict(counts) for primary, counts in self.totals.items()},
            "rows": [
                {"label": row.label, "full_label": row.full_label, "segments": row.segments}
                for row in self.stack_rows()
            ],
            "truncated": self.is_truncated,
        }


def group_records(
    records: Sequence[RawRecord],
    primary_keys: Sequence[str] = PRIMARY_KEYS,
    secondary_keys: Sequence[str] = SECONDARY_KEYS,
    count_keys: Sequence[str] = COUNT_KEYS,
) -> GroupedSeries:
    """Group records by a primary category and accumulate counts per secondary category.

    Records without an explicit count contribute one unit each.
    """
    primary_keys = tuple(primary_keys)
    secondary_keys = tuple(secondary_keys)
    count_keys = tuple(count_keys)

    totals: dict[str, dict[str, float]] = {}
    secondaries: dict[str, None] = {}
    for record in records:
        primary = first_category(record, primary_keys)
        secondary = first_category(record, secondary_keys)
        count = first_number(record, count_keys)
        if count is None:
            count = 1.0
        bucket = totals.setdefault(primary, {})
        bucket[secondary] = bucket.get(secondary, 0.0) + count
        secondaries.setdefault(secondary, None)

    grouped = GroupedSeries(
        totals=totals,
        primaries=tuple(totals),
        secondaries=tuple(secondaries),
    )
    logger.debug(
        "grouping.complete",
        records=len(records),
        primaries=len(grouped.primaries),
        secondaries=len(grouped.secondaries),
    )
    return grouped


__all__ = [
    "COUNT_KEYS",
    "GroupedSeries",
    "MAX_STACK_GROUPS",
    "PRIMARY_KEYS",
    "SECONDARY_KEYS",
    "StackRow",
    "StackSegment",
    "group_records",
]
