"""FilterOperator and the per-backend operator table."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Mapping

H = TypeVar("H", bound=Callable[..., Any])


class FilterOperator(str, Enum):
    """Operators a query handle must understand."""

    # Standard comparison
    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    IN = "in"
    NOT_IN = "not_in"
    BETWEEN = "between"

    # String operations
    LIKE = "like"
    ILIKE = "ilike"

    # Null checks
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"


class OperatorRegistry(Generic[H]):
    """
    Maps each :class:`FilterOperator` to one backend handler.

    A handler takes ``(target, value)``: the record's field value for
    the in-memory adapter, a mapped column for SQLAlchemy. Adapters hold
    their own registry, so a backend that lacks an operator fails when
    the filter is added rather than when the query runs.

    Usage::

        registry = OperatorRegistry[Predicate]("in-memory evaluation")

        @registry.register(FilterOperator.EQ)
        def _eq(field_value, value):
            return field_value == value
    """

    def __init__(
        self, backend: str, handlers: Mapping[FilterOperator, H] | None = None
    ) -> None:
        self._backend = backend
        self._handlers: dict[FilterOperator, H] = dict(handlers or {})

    def register(self, operator: FilterOperator) -> Callable[[H], H]:
        def decorator(handler: H) -> H:
            self._handlers[FilterOperator(operator)] = handler
            return handler

        return decorator

    def resolve(self, operator: FilterOperator | str) -> H:
        """
        Return the handler for *operator*.

        Raises:
            ValueError: If the operator is unknown or has no handler here.
        """
        try:
            return self._handlers[FilterOperator(operator)]
        except (KeyError, ValueError):
            raise ValueError(
                f"Unsupported operator for {self._backend}: {operator}"
            ) from None

    def __repr__(self) -> str:
        names = ", ".join(op.value for op in self._handlers)
        return f"OperatorRegistry({self._backend!r}, [{names}])"
