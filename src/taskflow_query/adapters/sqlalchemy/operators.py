"""
Clause builders backing the SQLAlchemy adapter.

Usage::

    from taskflow_query.adapters.sqlalchemy.operators import DEFAULT_SQLA_REGISTRY

    build = DEFAULT_SQLA_REGISTRY.resolve(FilterOperator.EQ)
    clause = build(TaskModel.status, "pending")
"""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any, Callable

from ...operators import FilterOperator, OperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

LIKE_ESCAPE = "\\"

ClauseBuilder = Callable[[Any, Any], "ColumnElement[bool]"]


def _between(column: Any, bounds: Any) -> ColumnElement[bool]:
    low, high = bounds
    return column.between(low, high)


_CLAUSES: dict[FilterOperator, ClauseBuilder] = {
    FilterOperator.EQ: operator.eq,
    FilterOperator.NE: operator.ne,
    FilterOperator.GT: operator.gt,
    FilterOperator.GE: operator.ge,
    FilterOperator.LT: operator.lt,
    FilterOperator.LE: operator.le,
    FilterOperator.IN: lambda column, values: column.in_(list(values)),
    FilterOperator.NOT_IN: lambda column, values: column.not_in(list(values)),
    FilterOperator.BETWEEN: _between,
    FilterOperator.LIKE: lambda column, p: column.like(p, escape=LIKE_ESCAPE),
    FilterOperator.ILIKE: lambda column, p: column.ilike(p, escape=LIKE_ESCAPE),
    FilterOperator.IS_NULL: lambda column, _: column.is_(None),
    FilterOperator.IS_NOT_NULL: lambda column, _: column.is_not(None),
}


def build_default_sqla_registry() -> OperatorRegistry[ClauseBuilder]:
    return OperatorRegistry("SQLAlchemy", _CLAUSES)


DEFAULT_SQLA_REGISTRY = build_default_sqla_registry()
