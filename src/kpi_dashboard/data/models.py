"""Domain models for dashboard API payloads.

Backend payloads are loosely typed and change between versions, so every
schema excludes unknown keys and supplies defaults for absent ones. Records
inside a KPI stay plain dictionaries; interpreting them is the job of
:mod:`kpi_dashboard.normalize`.
"""

from typing import Any

import marshmallow as ma
from attrs import asdict as attrs_asdict, define, field


def _text(value: object) -> str:
    """Render a loosely typed scalar as a trimmed string."""
    if value is None:
        return ""
    return str(value).strip()


def _optional_int(value: object) -> int | None:
    if value is None or value == "":
        return None
    return int(value)  # type: ignore[call-overload]


class _LenientSchema(ma.Schema):
    """Base schema that ignores keys added by newer backend versions."""

    class Meta:
        unknown = ma.EXCLUDE


@define(slots=True, frozen=True)
class FilterOption:
    """One selectable value of a filter dimension."""

    value: str = field(converter=_text)
    label: str = field(converter=_text, default="")
    count: int | None = field(converter=_optional_int, default=None)


class FilterOptionSchema(_LenientSchema):
    """Marshmallow schema for :class:`FilterOption`."""

    value = ma.fields.Raw(required=True)
    label = ma.fields.Raw(load_default=None, allow_none=True)
    count = ma.fields.Int(load_default=None, allow_none=True)

    @ma.post_load
    def make_option(self, data: dict[str, Any], **kwargs: object) -> FilterOption:
        """Build a :class:`FilterOption`, labelling it with its value when unlabelled."""
        label = data.get("label")
        return FilterOption(
            value=data["value"],
            label=data["value"] if label in (None, "") else label,
            count=data.get("count"),
        )


@define(slots=True, frozen=True)
class DateRange:
    """Span of the data the backend holds, as reported strings."""

    min_date: str | None = None
    max_date: str | None = None


class DateRangeSchema(_LenientSchema):
    """Marshmallow schema for :class:`DateRange`."""

    min_date = ma.fields.Str(load_default=None, allow_none=True)
    max_date = ma.fields.Str(load_default=None, allow_none=True)

    @ma.post_load
    def make_range(self, data: dict[str, Any], **kwargs: object) -> DateRange:
        return DateRange(**data)


@define(slots=True, frozen=True)
class FiltersResponse:
    """Distinct values per filter dimension plus the available date span."""

    departments: tuple[FilterOption, ...] = field(converter=tuple, factory=tuple)
    locations: tuple[FilterOption, ...] = field(converter=tuple, factory=tuple)
    designations: tuple[FilterOption, ...] = field(converter=tuple, factory=tuple)
    genders: tuple[FilterOption, ...] = field(converter=tuple, factory=tuple)
    date_range: DateRange = field(factory=DateRange)
    last_updated: str | None = None

    def options(self, dimension: str) -> tuple[FilterOption, ...]:
        """Return the options for a filter dimension name."""
        if dimension not in {"departments", "locations", "designations", "genders"}:
            raise ValueError(f"Unknown filter dimension {dimension!r}.")
        return getattr(self, dimension)


class FiltersResponseSchema(_LenientSchema):
    """Marshmallow schema for :class:`FiltersResponse`."""

    departments = ma.fields.List(ma.fields.Nested(FilterOptionSchema), load_default=list)
    locations = ma.fields.List(ma.fields.Nested(FilterOptionSchema), load_default=list)
    designations = ma.fields.List(ma.fields.Nested(FilterOptionSchema), load_default=list)
    genders = ma.fields.List(ma.fields.Nested(FilterOptionSchema), load_default=list)
    date_range = ma.fields.Nested(DateRangeSchema, load_default=None, allow_none=True)
    last_updated = ma.fields.Str(load_default=None, allow_none=True)

    @ma.post_load
    def make_filters(self, data: dict[str, Any], **kwargs: object) -> FiltersResponse:
        """Instantiate :class:`FiltersResponse` from validated payloads."""
        return FiltersResponse(
            departments=data["departments"],
            locations=data["locations"],
            designations=data["designations"],
            genders=data["genders"],
            date_range=data["date_range"] or DateRange(),
            last_updated=data["last_updated"],
        )


@define(slots=True, frozen=True)
class KpiDefinition:
    """Catalog entry describing a KPI the backend can compute."""

    id: str = field(converter=_text)
    name: str = field(converter=_text)
    description: str = field(converter=_text, default="")
    category: str = field(converter=_text, default="")
    chart_type: str = field(converter=_text, default="bar")
    tool_name: str = field(converter=_text, default="")
    tool_parameter: str = field(converter=_text, default="")


class KpiDefinitionSchema(_LenientSchema):
    """Marshmallow schema for :class:`KpiDefinition`."""

    id = ma.fields.Str(required=True)
    name = ma.fields.Str(required=True)
    description = ma.fields.Str(load_default="", allow_none=True)
    category = ma.fields.Str(load_default="", allow_none=True)
    chart_type = ma.fields.Str(load_default="bar", allow_none=True)
    tool_name = ma.fields.Str(load_default="", allow_none=True)
    tool_parameter = ma.fields.Str(load_default="", allow_none=True)

    @ma.post_load
    def make_definition(self, data: dict[str, Any], **kwargs: object) -> KpiDefinition:
        return KpiDefinition(**data)


class KpisListSchema(_LenientSchema):
    """Envelope returned by the KPI catalog endpoint."""

    success = ma.fields.Bool(load_default=True)
    kpis = ma.fields.List(ma.fields.Nested(KpiDefinitionSchema), load_default=list)
    count = ma.fields.Int(load_default=None, allow_none=True)


@define(slots=True, frozen=True)
class KpiPayload:
    """Records of one KPI together with how they should be visualized."""

    kpi_id: str = field(converter=_text)
    kpi_name: str = field(converter=_text, default="")
    category: str = field(converter=_text, default="")
    chart_type: str = field(converter=_text, default="bar")
    records: tuple[dict[str, Any], ...] = field(converter=tuple, factory=tuple)
    filters_applied: dict[str, Any] = field(factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload = attrs_asdict(self)
        payload["records"] = list(self.records)
        return payload


class KpiDataSchema(_LenientSchema):
    """Raw KPI data block (``kpi_id``, ``kpi_name``, ``data``)."""

    kpi_id = ma.fields.Str(required=True)
    kpi_name = ma.fields.Str(load_default="", allow_none=True)
    data = ma.fields.List(ma.fields.Dict(keys=ma.fields.Str()), load_default=list, allow_none=True)
    filters_applied = ma.fields.Dict(load_default=dict, allow_none=True)


class DashboardItemSchema(_LenientSchema):
    """One tool call result from the filtered dashboard endpoint."""

    tool = ma.fields.Str(load_default="", allow_none=True)
    parameters = ma.fields.Dict(load_default=dict, allow_none=True)
    data = ma.fields.Nested(KpiDataSchema, required=True)


class ToolCallSchema(_LenientSchema):
    tool = ma.fields.Str(required=True)
    parameters = ma.fields.Dict(load_default=dict, allow_none=True)


@define(slots=True, frozen=True)
class DashboardResponse:
    """Normalized dashboard response regardless of which endpoint produced it."""

    success: bool = True
    filters_applied: dict[str, Any] = field(factory=dict)
    tools_called: tuple[dict[str, Any], ...] = field(converter=tuple, factory=tuple)
    successful_tools: tuple[str, ...] = field(converter=tuple, factory=tuple)
    failed_tools: tuple[str, ...] = field(converter=tuple, factory=tuple)
    kpis: tuple[KpiPayload, ...] = field(converter=tuple, factory=tuple)
    ai_decision: bool = False
    timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation of the response."""
        return {
            "success": self.success,
            "filters_applied": dict(self.filters_applied),
            "tools_called": list(self.tools_called),
            "successful_tools": list(self.successful_tools),
            "failed_tools": list(self.failed_tools),
            "kpis": [kpi.to_dict() for kpi in self.kpis],
            "ai_decision": self.ai_decision,
            "timestamp": self.timestamp,
        }


class DashboardResponseSchema(_LenientSchema):
    """Marshmallow schema for the filtered (POST) dashboard endpoint."""

    success = ma.fields.Bool(load_default=True)
    filters_applied = ma.fields.Dict(load_default=dict, allow_none=True)
    tools_called = ma.fields.List(ma.fields.Nested(ToolCallSchema), load_default=list)
    successful_tools = ma.fields.List(ma.fields.Str(), load_default=list)
    failed_tools = ma.fields.List(ma.fields.Str(), load_default=list)
    dashboard_data = ma.fields.List(ma.fields.Nested(DashboardItemSchema), load_default=list)
    ai_decision = ma.fields.Bool(load_default=False)
    timestamp = ma.fields.Str(load_default=None, allow_none=True)


class InitialDashboardSchema(_LenientSchema):
    """Marshmallow schema for the unfiltered initial dashboard endpoint."""

    success = ma.fields.Bool(load_default=True)
    dashboard_data = ma.fields.List(ma.fields.Nested(KpiDataSchema), load_default=list)
    initial_load = ma.fields.Bool(load_default=True)
    filters_applied = ma.fields.Dict(load_default=dict, allow_none=True)
    tools_used = ma.fields.List(ma.fields.Str(), load_default=list)
    ai_decision = ma.fields.Bool(load_default=False)
    timestamp = ma.fields.Str(load_default=None, allow_none=True)


@define(slots=True, frozen=True)
class HealthStatus:
    """Backend connectivity report."""

    status: str = field(converter=_text, default="unknown")
    mcp_connection: str = field(converter=_text, default="")
    ai_connection: str = field(converter=_text, default="")
    available_tools: int = 0
    available_kpis: int = 0

    @property
    def is_healthy(self) -> bool:
        return self.status.lower() == "healthy"


class HealthStatusSchema(_LenientSchema):
    """Marshmallow schema for :class:`HealthStatus`."""

    status = ma.fields.Str(load_default="unknown")
    mcp_connection = ma.fields.Str(load_default="", allow_none=True)
    ai_connection = ma.fields.Str(load_default="", allow_none=True)
    available_tools = ma.fields.Int(load_default=0)
    available_kpis = ma.fields.Int(load_default=0)

    @ma.post_load
    def make_health(self, data: dict[str, Any], **kwargs: object) -> HealthStatus:
        return HealthStatus(**data)


__all__ = [
    "DashboardItemSchema",
    "DashboardResponse",
    "DashboardResponseSchema",
    "DateRange",
    "DateRangeSchema",
    "FilterOption",
    "FilterOptionSchema",
    "FiltersResponse",
    "FiltersResponseSchema",
    "HealthStatus",
    "HealthStatusSchema",
    "InitialDashboardSchema",
    "KpiDataSchema",
    "KpiDefinition",
    "KpiDefinitionSchema",
    "KpiPayload",
    "KpisListSchema",
]
