"""Label/value field inference for loosely typed KPI records.

Each KPI returned by the backend uses its own column names, so the role of a
field is decided by an ordered rule table rather than per-KPI code. The table
is data (:class:`InferenceRules`), and every step is a named function in
:data:`LABEL_STEPS` / :data:`VALUE_STEPS`, so the fallback order can be
changed and tested without touching the algorithm.
"""

from collections.abc import Callable, Mapping

from attrs import define

from .utils import RawRecord, is_number, parse_number

PLACEHOLDER_LABEL = "Item {position}"


@define(slots=True, frozen=True)
class InferenceRules:
    """Declared heuristic table used by :func:`infer_fields`."""

    label_steps: tuple[str, ...] = ("first_string",)
    value_steps: tuple[str, ...] = ("first_numeric", "numeric_synonym")
    display_only_fields: tuple[str, ...] = ("percentage", "percent", "pct")
    value_synonyms: tuple[str, ...] = ("count", "employee_count", "value", "total")

    def is_display_only(self, key: str) -> bool:
        """Return True when ``key`` names a display annotation such as a percentage."""
        return key.strip().lower() in self.display_only_fields


DEFAULT_RULES = InferenceRules()


@define(slots=True, frozen=True)
class FieldRoles:
    """Field names chosen for the label and value roles of one record."""

    label_field: str | None = None
    value_field: str | None = None


@define(slots=True, frozen=True)
class FieldMapping:
    """Explicit per-KPI field choice that takes precedence over inference."""

    label_field: str | None = None
    value_field: str | None = None


def _first_string(record: RawRecord, rules: InferenceRules) -> str | None:
    for key, value in record.items():
        if not isinstance(value, str):
            continue
        # A numeric string under a value synonym is a magnitude, not a category.
        if key in rules.value_synonyms and parse_number(value) is not None:
            continue
        return key
    return None


def _first_numeric(record: RawRecord, rules: InferenceRules) -> str | None:
    for key, value in record.items():
        if is_number(value) and not rules.is_display_only(key):
            return key
    return None


def _numeric_synonym(record: RawRecord, rules: InferenceRules) -> str | None:
    # Recognized names may carry numbers serialized as strings.
    for key in rules.value_synonyms:
        if key in record and parse_number(record[key]) is not None:
            return key
    return None


Step = Callable[[RawRecord, InferenceRules], str | None]

LABEL_STEPS: Mapping[str, Step] = {"first_string": _first_string}
VALUE_STEPS: Mapping[str, Step] = {
    "first_numeric": _first_numeric,
    "numeric_synonym": _numeric_synonym,
}


def _run_steps(
    record: RawRecord,
    rules: InferenceRules,
    names: tuple[str, ...],
    registry: Mapping[str, Step],
) -> str | None:
    for name in names:
        try:
            step = registry[name]
        except KeyError as exc:
            raise ValueError(f"Unknown inference step {name!r}.") from exc
        found = step(record, rules)
        if found is not None:
            return found
    return None


def infer_fields(record: RawRecord, rules: InferenceRules = DEFAULT_RULES) -> FieldRoles:
    """Infer which fields of ``record`` hold the category label and the magnitude."""
    return FieldRoles(
        label_field=_run_steps(record, rules, rules.label_steps, LABEL_STEPS),
        value_field=_run_steps(record, rules, rules.value_steps, VALUE_STEPS),
    )


def apply_mapping(
    record: RawRecord,
    roles: FieldRoles,
    mapping: FieldMapping | None,
) -> FieldRoles:
    """Override inferred roles with explicitly mapped fields present in ``record``."""
    if mapping is None:
        return roles
    label_field = roles.label_field
    value_field = roles.value_field
    if mapping.label_field and mapping.label_field in record:
        label_field = mapping.label_field
    if mapping.value_field and mapping.value_field in record:
        value_field = mapping.value_field
    return FieldRoles(label_field=label_field, value_field=value_field)


def placeholder_label(position: int) -> str:
    """Return the positional fallback label for the zero-based ``position``."""
    return PLACEHOLDER_LABEL.format(position=position + 1)


def resolve_point(
    record: RawRecord,
    position: int,
    *,
    rules: InferenceRules = DEFAULT_RULES,
    mapping: FieldMapping | None = None,
) -> tuple[str, float]:
    """Return the ``(label, value)`` pair for a record at ``position``."""
    roles = apply_mapping(record, infer_fields(record, rules), mapping)

    label = ""
    if roles.label_field is not None:
        raw_label = record.get(roles.label_field)
        label = "" if raw_label is None else str(raw_label).strip()
    if not label:
        label = placeholder_label(position)

    value = 0.0
    if roles.value_field is not None:
        value = parse_number(record.get(roles.value_field)) or 0.0
    return label, value


def count_numeric_fields(record: RawRecord) -> int:
    """Count fields holding real numbers, display annotations included."""
    return sum(1 for value in record.values() if is_number(value))


def is_ambiguous(record: RawRecord) -> bool:
    """Return True when a record carries a third numeric dimension.

    A magnitude plus its percentage annotation is the expected shape; anything
    beyond that needs an explicit :class:`FieldMapping`.
    """
    return count_numeric_fields(record) > 2


__all__ = [
    "DEFAULT_RULES",
    "FieldMapping",
    "FieldRoles",
    "InferenceRules",
    "LABEL_STEPS",
    "VALUE_STEPS",
    "apply_mapping",
    "count_numeric_fields",
    "infer_fields",
    "is_ambiguous",
    "placeholder_label",
    "resolve_point",
]
