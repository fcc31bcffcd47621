"""Python predicates backing the in-memory adapter."""

from __future__ import annotations

import operator
import re
from typing import Any, Callable

from ...operators import FilterOperator, OperatorRegistry

Predicate = Callable[[Any, Any], bool]


def like_pattern_to_regex(pattern: str) -> str:
    """Convert a SQL LIKE pattern (``%``, ``_``, ``\\`` escape) to a regex."""
    parts: list[str] = []
    chars = iter(pattern)
    for ch in chars:
        if ch == "\\":
            parts.append(re.escape(next(chars, "\\")))
        elif ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return "".join(parts)


def _unless_null(predicate: Predicate) -> Predicate:
    # SQL-like: a missing value never satisfies an ordering or pattern test.
    def evaluate(field_value: Any, value: Any) -> bool:
        if field_value is None:
            return False
        return bool(predicate(field_value, value))

    return evaluate


def _between(field_value: Any, bounds: Any) -> bool:
    low, high = bounds
    return bool(low <= field_value <= high)


def _like(flags: int) -> Predicate:
    def evaluate(field_value: Any, pattern: Any) -> bool:
        regex = like_pattern_to_regex(str(pattern))
        return re.fullmatch(regex, str(field_value), flags) is not None

    return evaluate


_PREDICATES: dict[FilterOperator, Predicate] = {
    FilterOperator.EQ: operator.eq,
    FilterOperator.NE: operator.ne,
    FilterOperator.GT: _unless_null(operator.gt),
    FilterOperator.GE: _unless_null(operator.ge),
    FilterOperator.LT: _unless_null(operator.lt),
    FilterOperator.LE: _unless_null(operator.le),
    FilterOperator.IN: lambda field_value, values: field_value in values,
    FilterOperator.NOT_IN: _unless_null(
        lambda field_value, values: field_value not in values
    ),
    FilterOperator.BETWEEN: _unless_null(_between),
    FilterOperator.LIKE: _unless_null(_like(re.DOTALL)),
    FilterOperator.ILIKE: _unless_null(_like(re.DOTALL | re.IGNORECASE)),
    FilterOperator.IS_NULL: lambda field_value, _: field_value is None,
    FilterOperator.IS_NOT_NULL: lambda field_value, _: field_value is not None,
}


def build_default_registry() -> OperatorRegistry[Predicate]:
    """A fresh registry holding every built-in predicate."""
    return OperatorRegistry("in-memory evaluation", _PREDICATES)
