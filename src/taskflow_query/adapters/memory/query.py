"""
InMemoryQuery — QueryHandle over a sequence of records.

Records may be mappings (looked up by key) or plain objects (looked up
by attribute). Every refining call returns a new handle; nothing is
evaluated until ``count()`` or ``execute()``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ...enums import SortDirection
from ...exceptions import FieldNotFoundError
from ...operators import FilterOperator
from ...ports import FieldCondition
from .operators import build_default_registry

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ...operators import OperatorRegistry
    from .operators import Predicate

_DEFAULT_REGISTRY = build_default_registry()


class InMemoryQuery:
    """
    Immutable in-memory query handle.

    Filters are kept as a tuple of OR-groups that are AND-ed together;
    ``filter_by_field`` adds a group of one condition.
    """

    __slots__ = ("_records", "_groups", "_ordering", "_limit", "_offset", "_registry")

    def __init__(
        self,
        records: Iterable[Any],
        *,
        registry: OperatorRegistry[Predicate] | None = None,
    ) -> None:
        self._records: tuple[Any, ...] = tuple(records)
        self._groups: tuple[tuple[FieldCondition, ...], ...] = ()
        self._ordering: tuple[tuple[str, SortDirection], ...] = ()
        self._limit: int | None = None
        self._offset: int | None = None
        self._registry = _DEFAULT_REGISTRY if registry is None else registry

    # -- refinement ----------------------------------------------------------

    def filter_by_field(
        self, name: str, operator: FilterOperator, value: Any
    ) -> InMemoryQuery:
        return self.filter_any([FieldCondition(name, operator, value)])

    def filter_any(self, conditions: Sequence[FieldCondition]) -> InMemoryQuery:
        group = tuple(
            FieldCondition(c.field, FilterOperator(c.operator), c.value)
            for c in conditions
        )
        if not group:
            raise ValueError("filter_any requires at least one condition")
        # Unsupported operators fail here, not at execute time.
        for condition in group:
            self._registry.resolve(condition.operator)
        return self._replace(_groups=(*self._groups, group))

    def order_by(self, name: str, direction: SortDirection) -> InMemoryQuery:
        return self._replace(
            _ordering=(*self._ordering, (name, SortDirection(direction)))
        )

    def limit(self, n: int) -> InMemoryQuery:
        if n < 0:
            raise ValueError("limit must be non-negative")
        return self._replace(_limit=n)

    def offset(self, n: int) -> InMemoryQuery:
        if n < 0:
            raise ValueError("offset must be non-negative")
        return self._replace(_offset=n)

    # -- execution -----------------------------------------------------------

    def count(self) -> int:
        return len(self.execute())

    def execute(self) -> list[Any]:
        rows = [r for r in self._records if self._matches(r)]
        for name, direction in reversed(self._ordering):
            rows.sort(
                key=lambda r, n=name: _sort_key(_resolve(r, n)),
                reverse=direction == SortDirection.DESC,
            )
        start = self._offset or 0
        end = None if self._limit is None else start + self._limit
        return rows[start:end]

    # -- internals -----------------------------------------------------------

    def _matches(self, record: Any) -> bool:
        return all(
            any(
                self._registry.resolve(c.operator)(_resolve(record, c.field), c.value)
                for c in group
            )
            for group in self._groups
        )

    def _replace(self, **changes: Any) -> InMemoryQuery:
        clone = object.__new__(InMemoryQuery)
        for slot in self.__slots__:
            object.__setattr__(clone, slot, changes.get(slot, getattr(self, slot)))
        return clone

    def _state(self) -> tuple[Any, ...]:
        return (self._records, self._groups, self._ordering, self._limit, self._offset)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InMemoryQuery):
            return NotImplemented
        return self._state() == other._state()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"InMemoryQuery(records={len(self._records)}, filters={self._groups!r}, "
            f"ordering={self._ordering!r}, limit={self._limit}, offset={self._offset})"
        )


def _resolve(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        if name not in record:
            raise FieldNotFoundError(name, type(record).__name__, list(record.keys()))
        return record[name]
    try:
        return getattr(record, name)
    except AttributeError:
        available = [a for a in dir(record) if not a.startswith("_")]
        raise FieldNotFoundError(name, type(record).__name__, available) from None


def _sort_key(value: Any) -> tuple[bool, Any]:
    # NULLs first ascending, last descending.
    return (value is not None, value)
