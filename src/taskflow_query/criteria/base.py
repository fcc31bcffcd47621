"""
Criterion and CriteriaSet — composable query filters.

A ``Criterion`` refines a :class:`~taskflow_query.ports.QueryHandle`
into a narrower one. Parameters are validated when the criterion is
constructed, so a bad filter fails before any query is touched.

A ``CriteriaSet`` applies its criteria strictly left to right, in the
order they were added.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from ..exceptions import InvalidCriterionError
from ..operators import FilterOperator

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ..ports import QueryHandle

E = TypeVar("E", bound=Enum)


class Criterion(ABC):
    """Base class for all filter criteria."""

    @abstractmethod
    def apply(self, query: QueryHandle) -> QueryHandle:
        """Return *query* refined by this criterion. Must not execute it."""
        ...

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible description of the criterion."""
        result: dict[str, Any] = {"criterion": type(self).__name__}
        if dataclasses.is_dataclass(self):
            for f in dataclasses.fields(self):
                result[f.name] = _jsonable(getattr(self, f.name))
        return result

    def _invalid(self, message: str) -> InvalidCriterionError:
        return InvalidCriterionError(type(self).__name__, message)

    def _members(self, enum_cls: type[E], values: Any) -> frozenset[E]:
        """Coerce one value or a collection of values to enum members."""
        if isinstance(values, (str, Enum)):
            values = (values,)
        elif not _is_iterable(values):
            raise self._invalid(f"expected {enum_cls.__name__} value(s)")
        members: set[E] = set()
        for value in values:
            try:
                members.add(enum_cls(value))
            except ValueError:
                allowed = ", ".join(m.value for m in enum_cls)
                raise self._invalid(
                    f"{value!r} is not a valid {enum_cls.__name__} "
                    f"(expected one of: {allowed})"
                ) from None
        if not members:
            raise self._invalid(f"at least one {enum_cls.__name__} is required")
        return frozenset(members)

    def _identifier(self, value: Any, name: str) -> int:
        """Coerce *value* to a positive integer id."""
        if isinstance(value, bool):
            raise self._invalid(f"{name} must be a positive integer")
        try:
            identifier = int(value)
        except (TypeError, ValueError):
            raise self._invalid(f"{name} must be a positive integer") from None
        if identifier < 1 or (isinstance(value, float) and not value.is_integer()):
            raise self._invalid(f"{name} must be a positive integer")
        return identifier


@dataclasses.dataclass(frozen=True)
class FieldCriterion(Criterion):
    """Generic ``field <operator> value`` criterion."""

    field: str
    operator: FilterOperator
    value: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.field, str) or not self.field.strip():
            raise self._invalid("field name must be a non-empty string")
        try:
            operator = FilterOperator(self.operator)
        except ValueError:
            raise self._invalid(f"unknown operator {self.operator!r}") from None
        object.__setattr__(self, "operator", operator)

        if operator in (FilterOperator.IN, FilterOperator.NOT_IN):
            if isinstance(self.value, (str, bytes)) or not _is_iterable(self.value):
                raise self._invalid(f"'{operator.value}' expects a collection")
            values = tuple(self.value)
            if not values:
                raise self._invalid(f"'{operator.value}' expects at least one value")
            object.__setattr__(self, "value", values)
        elif operator == FilterOperator.BETWEEN:
            if isinstance(self.value, (str, bytes)) or not _is_iterable(self.value):
                raise self._invalid("'between' expects a (low, high) pair")
            bounds = tuple(self.value)
            if len(bounds) != 2:
                raise self._invalid("'between' expects a (low, high) pair")
            try:
                inverted = bounds[0] > bounds[1]
            except TypeError:
                raise self._invalid("'between' bounds are not comparable") from None
            if inverted:
                raise self._invalid("'between' lower bound exceeds upper bound")
            object.__setattr__(self, "value", bounds)
        elif operator in (FilterOperator.IS_NULL, FilterOperator.IS_NOT_NULL):
            object.__setattr__(self, "value", None)
        elif self.value is None:
            raise self._invalid(
                f"'{operator.value}' needs a value; use is_null to match NULL"
            )

    def apply(self, query: QueryHandle) -> QueryHandle:
        return query.filter_by_field(self.field, self.operator, self.value)


@dataclasses.dataclass(frozen=True)
class CriteriaSet:
    """
    Ordered, immutable composition of criteria.

    Usage::

        criteria = (
            CriteriaSet.empty()
            .add(StatusCriterion(TaskStatus.PENDING))
            .add(SortCriterion("due_date"))
        )
        query = criteria.apply_all(base_query)
    """

    criteria: tuple[Criterion, ...] = ()

    @classmethod
    def empty(cls) -> CriteriaSet:
        return cls()

    @classmethod
    def of(cls, *criteria: Criterion) -> CriteriaSet:
        return cls.empty().extend(*criteria)

    def add(self, criterion: Criterion) -> CriteriaSet:
        """Return a new set with *criterion* appended."""
        if not isinstance(criterion, Criterion):
            raise TypeError(
                f"Expected a Criterion, got {type(criterion).__name__}"
            )
        return CriteriaSet(criteria=(*self.criteria, criterion))

    def extend(self, *criteria: Criterion) -> CriteriaSet:
        result = self
        for criterion in criteria:
            result = result.add(criterion)
        return result

    def apply_all(self, query: QueryHandle) -> QueryHandle:
        """Fold every criterion over *query*, left to right.

        The first failing ``apply`` propagates; nothing after it runs.
        """
        for criterion in self.criteria:
            query = criterion.apply(query)
        return query

    def to_list(self) -> list[dict[str, Any]]:
        return [criterion.to_dict() for criterion in self.criteria]

    def __iter__(self) -> Iterator[Criterion]:
        return iter(self.criteria)

    def __len__(self) -> int:
        return len(self.criteria)

    def __bool__(self) -> bool:
        return bool(self.criteria)


def _is_iterable(value: Any) -> bool:
    try:
        iter(value)
    except TypeError:
        return False
    return True


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (frozenset, set)):
        return sorted(_jsonable(v) for v in value)
    if isinstance(value, (tuple, list)):
        return [_jsonable(v) for v in value]
    return value
