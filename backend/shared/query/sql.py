"""
SQLAlchemy rendering of resolved filters and sorts.

The repository decides which column (or correlated expression) backs each
resolved field; this module only turns operators into SQL.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy import and_, false, or_, true
from sqlalchemy.sql.elements import ColumnElement

from shared.query.filters import (
    FilterOperator,
    LogicalOperator,
    NullsPosition,
    ResolvedCondition,
    ResolvedFilter,
    ResolvedSort,
    SortOrder,
)

LIKE_ESCAPE = "\\"

ConditionRenderer = Callable[[ResolvedCondition], ColumnElement[bool]]


def operator_clause(column: Any, operator: FilterOperator, value: Any) -> ColumnElement[bool]:
    """Apply one filter operator to a column expression."""
    if operator is FilterOperator.EQ:
        return column == value
    if operator is FilterOperator.NE:
        # NULL-safe: rows with NULL are "not equal" to any value
        return or_(column != value, column.is_(None))
    if operator is FilterOperator.GT:
        return column > value
    if operator is FilterOperator.GTE:
        return column >= value
    if operator is FilterOperator.LT:
        return column < value
    if operator is FilterOperator.LTE:
        return column <= value
    if operator is FilterOperator.IN:
        return column.in_(value)
    if operator is FilterOperator.NOT_IN:
        return or_(column.not_in(value), column.is_(None))
    if operator is FilterOperator.LIKE:
        return column.like(value, escape=LIKE_ESCAPE)
    if operator is FilterOperator.ILIKE:
        return column.ilike(value, escape=LIKE_ESCAPE)
    if operator is FilterOperator.IS_NULL:
        return column.is_(None)
    if operator is FilterOperator.IS_NOT_NULL:
        return column.is_not(None)
    if operator is FilterOperator.BETWEEN:
        low, high = value
        return column.between(low, high)
    raise ValueError(f"Unsupported operator {operator!r}")


def render_filter(resolved: ResolvedFilter | None, render: ConditionRenderer) -> ColumnElement[bool] | None:
    """Render a resolved filter tree; leaves go through ``render``."""
    if resolved is None:
        return None
    if isinstance(resolved, ResolvedCondition):
        return render(resolved)

    clauses = [clause for clause in (render_filter(c, render) for c in resolved.conditions) if clause is not None]
    if not clauses:
        return true() if resolved.operator is LogicalOperator.AND else false()
    if resolved.operator is LogicalOperator.AND:
        return and_(*clauses)
    return or_(*clauses)


def order_clause(column: Any, sort: ResolvedSort) -> Any:
    """ORDER BY element for one resolved sort, with explicit NULL placement."""
    clause = column.desc() if sort.order is SortOrder.DESC else column.asc()
    if sort.nulls is NullsPosition.FIRST:
        clause = clause.nulls_first()
    elif sort.nulls is NullsPosition.LAST:
        clause = clause.nulls_last()
    return clause
