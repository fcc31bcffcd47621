"""Criteria for filtering and ordering tasks."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from ..enums import SortDirection, TaskPriority, TaskStatus
from ..operators import FilterOperator
from ..ports import FieldCondition
from .base import Criterion

if TYPE_CHECKING:
    from ..ports import QueryHandle

TASK_SORTABLE_FIELDS: frozenset[str] = frozenset({"due_date", "created_at"})


def _filter_members(
    query: QueryHandle, name: str, members: frozenset[TaskStatus] | frozenset[TaskPriority]
) -> QueryHandle:
    values = sorted(m.value for m in members)
    if len(values) == 1:
        return query.filter_by_field(name, FilterOperator.EQ, values[0])
    return query.filter_by_field(name, FilterOperator.IN, tuple(values))


@dataclass(frozen=True)
class StatusCriterion(Criterion):
    """Tasks in any of the given statuses."""

    statuses: frozenset[TaskStatus]

    def __post_init__(self) -> None:
        object.__setattr__(self, "statuses", self._members(TaskStatus, self.statuses))

    def apply(self, query: QueryHandle) -> QueryHandle:
        return _filter_members(query, "status", self.statuses)


@dataclass(frozen=True)
class PriorityCriterion(Criterion):
    """Tasks with any of the given priorities."""

    priorities: frozenset[TaskPriority]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "priorities", self._members(TaskPriority, self.priorities)
        )

    def apply(self, query: QueryHandle) -> QueryHandle:
        return _filter_members(query, "priority", self.priorities)


@dataclass(frozen=True)
class ProjectCriterion(Criterion):
    project_id: int

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "project_id", self._identifier(self.project_id, "project_id")
        )

    def apply(self, query: QueryHandle) -> QueryHandle:
        return query.filter_by_field("project_id", FilterOperator.EQ, self.project_id)


@dataclass(frozen=True)
class AssigneeCriterion(Criterion):
    user_id: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "user_id", self._identifier(self.user_id, "user_id"))

    def apply(self, query: QueryHandle) -> QueryHandle:
        return query.filter_by_field("assigned_to", FilterOperator.EQ, self.user_id)


@dataclass(frozen=True)
class UserCriterion(Criterion):
    """Tasks the user either created or is assigned to."""

    user_id: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "user_id", self._identifier(self.user_id, "user_id"))

    def apply(self, query: QueryHandle) -> QueryHandle:
        return query.filter_any(
            [
                FieldCondition("created_by", FilterOperator.EQ, self.user_id),
                FieldCondition("assigned_to", FilterOperator.EQ, self.user_id),
            ]
        )


@dataclass(frozen=True)
class SortCriterion(Criterion):
    """Order by one whitelisted field."""

    field: str
    direction: SortDirection = SortDirection.ASC
    allowed_fields: frozenset[str] = dataclasses.field(
        default=TASK_SORTABLE_FIELDS, repr=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.field, str) or self.field not in self.allowed_fields:
            allowed = ", ".join(sorted(self.allowed_fields))
            raise self._invalid(
                f"invalid sort field {self.field!r} (expected one of: {allowed})"
            )
        raw = self.direction
        if isinstance(raw, str) and not isinstance(raw, SortDirection):
            raw = raw.strip().lower()
        try:
            direction = SortDirection(raw)
        except ValueError:
            raise self._invalid(f"invalid sort direction {self.direction!r}") from None
        object.__setattr__(self, "direction", direction)

    def apply(self, query: QueryHandle) -> QueryHandle:
        return query.order_by(self.field, self.direction)


@dataclass(frozen=True)
class DueDateRangeCriterion(Criterion):
    """Tasks due within ``[start, end]``; either bound may be open."""

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.start is None and self.end is None:
            raise self._invalid("at least one of start or end is required")
        for name in ("start", "end"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, datetime):
                raise self._invalid(f"{name} must be a datetime, got {value!r}")
        if self.start is not None and self.end is not None:
            try:
                inverted = self.start > self.end
            except TypeError:
                # Mixed naive and timezone-aware bounds.
                raise self._invalid("start and end are not comparable") from None
            if inverted:
                raise self._invalid("start must not be after end")

    def apply(self, query: QueryHandle) -> QueryHandle:
        if self.start is not None:
            query = query.filter_by_field("due_date", FilterOperator.GE, self.start)
        if self.end is not None:
            query = query.filter_by_field("due_date", FilterOperator.LE, self.end)
        return query


@dataclass(frozen=True)
class OverdueCriterion(Criterion):
    """Unfinished tasks whose due date lies before *as_of*."""

    as_of: datetime

    def __post_init__(self) -> None:
        if not isinstance(self.as_of, datetime):
            raise self._invalid("as_of must be a datetime")

    def apply(self, query: QueryHandle) -> QueryHandle:
        query = query.filter_by_field("due_date", FilterOperator.LT, self.as_of)
        return query.filter_by_field(
            "status", FilterOperator.NE, TaskStatus.COMPLETED.value
        )


@dataclass(frozen=True)
class DueSoonCriterion(Criterion):
    """Unfinished tasks due within the next *days* days of *as_of*."""

    as_of: datetime
    days: int = 7

    def __post_init__(self) -> None:
        if not isinstance(self.as_of, datetime):
            raise self._invalid("as_of must be a datetime")
        if isinstance(self.days, bool) or not isinstance(self.days, int) or self.days < 1:
            raise self._invalid("days must be a positive integer")

    def apply(self, query: QueryHandle) -> QueryHandle:
        query = query.filter_by_field(
            "due_date",
            FilterOperator.BETWEEN,
            (self.as_of, self.as_of + timedelta(days=self.days)),
        )
        return query.filter_by_field(
            "status", FilterOperator.NE, TaskStatus.COMPLETED.value
        )
