"""QueryHandle — protocol for the persistence collaborator's query object."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .enums import SortDirection
    from .operators import FilterOperator

Record = Any


class FieldCondition(NamedTuple):
    """A single ``field <operator> value`` predicate."""

    field: str
    operator: FilterOperator
    value: Any = None


@runtime_checkable
class QueryHandle(Protocol):
    """
    Opaque, not-yet-executed query owned by a persistence layer.

    Every refining method returns a *new* handle; ``count`` and
    ``execute`` are the only methods allowed to perform I/O.
    Implementations raise
    :class:`~taskflow_query.exceptions.QueryExecutionError` when the
    backend fails.
    """

    def filter_by_field(
        self, name: str, operator: FilterOperator, value: Any
    ) -> QueryHandle: ...

    def filter_any(self, conditions: Sequence[FieldCondition]) -> QueryHandle:
        """Restrict to rows matching at least one of *conditions*."""
        ...

    def order_by(self, name: str, direction: SortDirection) -> QueryHandle: ...

    def limit(self, n: int) -> QueryHandle: ...

    def offset(self, n: int) -> QueryHandle: ...

    def count(self) -> int: ...

    def execute(self) -> Sequence[Record]: ...
