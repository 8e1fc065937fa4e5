"""
Filter and sort normalization.

Raw client input (decoded JSON or a literal string) is validated against an
entity's field allow-list (EntityFields) and turned into resolved
conditions that the repositories compile into SQL.

Accepted filter shapes:
    {"field": "price", "operator": "gte", "value": 10}
    {"operator": "or", "conditions": [{...}, {...}]}
    [{...}, {...}]                      implicit AND
    "salsa"                             free-text search over search_fields

Accepted sort shapes:
    {"field": "createdAt", "order": "desc", "nulls": "last"}
    [{...}, {...}]
    "price", "price:desc", "-price", "level,-price"
"""

from __future__ import annotations

import json
import re
import uuid
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Union

from shared.utils.exceptions import (
    InvalidFilterValueError,
    InvalidOperatorError,
    UnknownFieldError,
    ValidationError,
)
from shared.utils.validators import escape_like_pattern, normalize_search_term


class FieldType(str, Enum):
    TEXT = "text"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    UUID = "uuid"


class FilterOperator(str, Enum):
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NOT_IN = "not_in"
    LIKE = "like"
    ILIKE = "ilike"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"
    BETWEEN = "between"


class LogicalOperator(str, Enum):
    AND = "and"
    OR = "or"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class NullsPosition(str, Enum):
    FIRST = "first"
    LAST = "last"


_NULL_CHECKS = frozenset({FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL})
_LIST_OPERATORS = frozenset({FilterOperator.IN, FilterOperator.NOT_IN})
_ORDERED = frozenset({
    FilterOperator.EQ, FilterOperator.NE,
    FilterOperator.GT, FilterOperator.GTE, FilterOperator.LT, FilterOperator.LTE,
    FilterOperator.IN, FilterOperator.NOT_IN, FilterOperator.BETWEEN,
}) | _NULL_CHECKS

ALLOWED_OPERATORS: dict[FieldType, frozenset[FilterOperator]] = {
    FieldType.TEXT: frozenset({
        FilterOperator.EQ, FilterOperator.NE,
        FilterOperator.LIKE, FilterOperator.ILIKE,
        FilterOperator.IN, FilterOperator.NOT_IN,
    }) | _NULL_CHECKS,
    FieldType.INTEGER: _ORDERED,
    FieldType.NUMBER: _ORDERED,
    FieldType.DATE: _ORDERED,
    FieldType.DATETIME: _ORDERED,
    FieldType.BOOLEAN: frozenset({FilterOperator.EQ, FilterOperator.NE}) | _NULL_CHECKS,
    FieldType.UUID: frozenset({
        FilterOperator.EQ, FilterOperator.NE, FilterOperator.IN, FilterOperator.NOT_IN,
    }) | _NULL_CHECKS,
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
_TRUE_STRINGS = frozenset({"true", "1", "yes"})
_FALSE_STRINGS = frozenset({"false", "0", "no"})


def to_snake_case(name: str) -> str:
    """createdAt -> created_at; snake_case input is returned unchanged."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def decode_query_value(raw: Any) -> Any:
    """
    JSON-decode a query-string value.

    Non-strings pass through. Only objects, arrays and quoted strings replace
    the raw text; anything else (invalid JSON, or a bare number, boolean or
    null such as ``2024``) is returned unchanged as a literal. Never raises.
    """
    if not isinstance(raw, str):
        return raw
    try:
        decoded = json.loads(raw)
    except ValueError:
        return raw
    if isinstance(decoded, (dict, list, str)):
        return decoded
    return raw


# =============================================================================
# Field allow-lists
# =============================================================================


@dataclass(frozen=True)
class LocalField:
    column: str
    field_type: FieldType

    @property
    def path(self) -> str:
        return self.column


@dataclass(frozen=True)
class RelationField:
    relation: str
    column: str
    field_type: FieldType
    locale_aware: bool = False
    attribute: str = ""

    @property
    def path(self) -> str:
        return f"{self.relation}.{self.column}"

    @property
    def model_attribute(self) -> str:
        """Name of the ORM relationship backing this relation."""
        return self.attribute or self.relation


ResolvedField = Union[LocalField, RelationField]


@dataclass(frozen=True)
class RelationFields:
    """
    Filterable columns of a related table.

    ``attribute`` names the ORM relationship when it differs from the public
    relation name ("translation" -> Course.translations).
    """

    columns: Mapping[str, FieldType]
    locale_aware: bool = False
    attribute: str = ""


@dataclass(frozen=True)
class EntityFields:
    """
    Allow-list of filterable/sortable fields for one entity.

    ``aliases`` maps a public name to a dotted relation path, e.g.
    {"name": "translation.name"} lets clients filter on "name" directly.
    """

    entity: str
    columns: Mapping[str, FieldType]
    relations: Mapping[str, RelationFields] = field(default_factory=dict)
    aliases: Mapping[str, str] = field(default_factory=dict)
    search_fields: tuple[str, ...] = ()

    def resolve(self, name: Any) -> ResolvedField:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Field name must be a non-empty string", field="field")

        original = name.strip()
        normalized = ".".join(to_snake_case(part) for part in original.split("."))
        normalized = self.aliases.get(normalized, normalized)

        if normalized in self.columns:
            return LocalField(normalized, self.columns[normalized])

        relation_name, dot, column = normalized.partition(".")
        relation = self.relations.get(relation_name) if dot else None
        if relation is not None and column in relation.columns:
            return RelationField(
                relation_name,
                column,
                relation.columns[column],
                relation.locale_aware,
                relation.attribute,
            )

        raise UnknownFieldError(original, entity=self.entity)


# =============================================================================
# Resolved expressions
# =============================================================================


@dataclass(frozen=True)
class ResolvedCondition:
    field: ResolvedField
    operator: FilterOperator
    value: Any = None


@dataclass(frozen=True)
class ResolvedGroup:
    operator: LogicalOperator
    conditions: tuple["ResolvedFilter", ...]


ResolvedFilter = Union[ResolvedCondition, ResolvedGroup]


@dataclass(frozen=True)
class ResolvedSort:
    field: ResolvedField
    order: SortOrder = SortOrder.ASC
    nulls: NullsPosition | None = None


def iter_conditions(resolved: ResolvedFilter | None) -> Iterator[ResolvedCondition]:
    """Walk every leaf condition of a resolved filter."""
    if resolved is None:
        return
    if isinstance(resolved, ResolvedCondition):
        yield resolved
        return
    for child in resolved.conditions:
        yield from iter_conditions(child)


# =============================================================================
# Filter normalization
# =============================================================================


def normalize_filter(raw: Any, fields: EntityFields) -> ResolvedFilter | None:
    """
    Validate an already-decoded filter against ``fields``.

    Returns None when there is nothing to filter on. Raises ValidationError
    (or a subclass) naming the offending field otherwise.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        return _search(raw, fields)
    if isinstance(raw, list):
        return _group(LogicalOperator.AND, raw, fields)
    if isinstance(raw, Mapping):
        if "conditions" in raw:
            return _group(_logical(raw.get("operator")), raw["conditions"], fields)
        return _condition(raw, fields)
    raise ValidationError(
        "Filter must be an object, a list of conditions or a search term",
        field="filter",
    )


def _logical(raw: Any) -> LogicalOperator:
    if raw is None:
        return LogicalOperator.AND
    try:
        return LogicalOperator(str(raw).lower())
    except ValueError:
        raise ValidationError(
            f"Invalid logical operator '{raw}'. Use 'and' or 'or'",
            field="operator",
        ) from None


def _group(operator: LogicalOperator, conditions: Any, fields: EntityFields) -> ResolvedFilter | None:
    if not isinstance(conditions, list):
        raise ValidationError("Filter conditions must be a list", field="conditions")

    resolved = tuple(
        item for item in (normalize_filter(c, fields) for c in conditions) if item is not None
    )
    if not resolved:
        return None
    if len(resolved) == 1:
        return resolved[0]
    return ResolvedGroup(operator, resolved)


def _search(raw: str, fields: EntityFields) -> ResolvedFilter | None:
    term = normalize_search_term(raw)
    if not term:
        return None
    if not fields.search_fields:
        raise ValidationError(
            f"Free-text search is not supported for {fields.entity}",
            field="filter",
        )

    pattern = f"%{escape_like_pattern(term)}%"
    conditions = tuple(
        ResolvedCondition(fields.resolve(name), FilterOperator.ILIKE, pattern)
        for name in fields.search_fields
    )
    if len(conditions) == 1:
        return conditions[0]
    return ResolvedGroup(LogicalOperator.OR, conditions)


def _condition(raw: Mapping[str, Any], fields: EntityFields) -> ResolvedCondition:
    if "field" not in raw:
        raise ValidationError("Filter condition requires a 'field'", field="filter")

    resolved = fields.resolve(raw["field"])
    raw_operator = raw.get("operator", FilterOperator.EQ.value)
    try:
        operator = FilterOperator(str(raw_operator).lower())
    except ValueError:
        raise InvalidOperatorError(str(raw["field"]), str(raw_operator)) from None

    if operator not in ALLOWED_OPERATORS[resolved.field_type]:
        raise InvalidOperatorError(
            str(raw["field"]), operator.value, field_type=resolved.field_type.value
        )

    return ResolvedCondition(resolved, operator, _coerce_value(operator, raw.get("value"), resolved))


def _coerce_value(operator: FilterOperator, value: Any, resolved: ResolvedField) -> Any:
    if operator in _NULL_CHECKS:
        return None

    if operator in _LIST_OPERATORS:
        if not isinstance(value, (list, tuple)) or not value:
            raise InvalidFilterValueError(resolved.path, "expected a non-empty list")
        return tuple(_coerce_scalar(item, resolved) for item in value)

    if operator is FilterOperator.BETWEEN:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise InvalidFilterValueError(resolved.path, "expected a two-element list")
        return tuple(_coerce_scalar(item, resolved) for item in value)

    if isinstance(value, (list, tuple, Mapping)):
        raise InvalidFilterValueError(resolved.path, "expected a single value")
    return _coerce_scalar(value, resolved)


def _coerce_scalar(value: Any, resolved: ResolvedField) -> Any:
    field_type = resolved.field_type
    if value is None:
        raise InvalidFilterValueError(resolved.path, "missing value")

    try:
        if field_type is FieldType.TEXT:
            if isinstance(value, (bool, Mapping, list)):
                raise ValueError(value)
            return str(value)

        if field_type is FieldType.INTEGER:
            if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
                raise ValueError(value)
            return int(value)

        if field_type is FieldType.NUMBER:
            if isinstance(value, bool):
                raise ValueError(value)
            number = Decimal(str(value))
            if not number.is_finite():
                raise ValueError(value)
            return number

        if field_type is FieldType.BOOLEAN:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE_STRINGS:
                return True
            if text in _FALSE_STRINGS:
                return False
            raise ValueError(value)

        if field_type is FieldType.DATE:
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, date):
                return value
            text = str(value)
            return date.fromisoformat(text) if len(text) == 10 else _parse_datetime(text).date()

        if field_type is FieldType.DATETIME:
            if isinstance(value, datetime):
                return value
            return _parse_datetime(str(value))

        if field_type is FieldType.UUID:
            return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))

    except (TypeError, ValueError, InvalidOperation) as e:
        raise InvalidFilterValueError(resolved.path, f"expected {field_type.value}") from e

    raise InvalidFilterValueError(resolved.path, f"unsupported type {field_type.value}")


def _parse_datetime(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


# =============================================================================
# Sort normalization
# =============================================================================


def normalize_sort(raw: Any, fields: EntityFields) -> tuple[ResolvedSort, ...]:
    """
    Validate an already-decoded sort against ``fields``.

    Returns the sort expressions in the order they apply; an empty tuple
    means "no explicit order".
    """
    if raw is None:
        return ()
    return tuple(_sort_item(item, fields) for item in _sort_entries(raw))


def _sort_entries(raw: Any) -> Iterator[Mapping[str, Any]]:
    if isinstance(raw, str):
        yield from _parse_sort_string(raw)
    elif isinstance(raw, Mapping):
        yield raw
    elif isinstance(raw, list):
        for item in raw:
            if isinstance(item, str):
                yield from _parse_sort_string(item)
            elif isinstance(item, Mapping):
                yield item
            else:
                raise ValidationError("Sort entries must be objects or strings", field="sort")
    else:
        raise ValidationError("Sort must be an object, a list or a string", field="sort")


def _parse_sort_string(raw: str) -> Iterator[dict[str, str]]:
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if part.startswith("-"):
            yield {"field": part[1:], "order": SortOrder.DESC.value}
        elif ":" in part:
            name, _, order = part.partition(":")
            yield {"field": name, "order": order}
        else:
            yield {"field": part}


def _sort_item(raw: Mapping[str, Any], fields: EntityFields) -> ResolvedSort:
    if "field" not in raw:
        raise ValidationError("Sort entry requires a 'field'", field="sort")

    resolved = fields.resolve(raw["field"])

    raw_order = raw.get("order") or SortOrder.ASC.value
    try:
        order = SortOrder(str(raw_order).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Invalid sort order '{raw_order}'. Use 'asc' or 'desc'", field="order"
        ) from None

    nulls = None
    if raw.get("nulls") is not None:
        try:
            nulls = NullsPosition(str(raw["nulls"]).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Invalid nulls position '{raw['nulls']}'. Use 'first' or 'last'",
                field="nulls",
            ) from None

    return ResolvedSort(resolved, order, nulls)
