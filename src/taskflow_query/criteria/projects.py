"""Criteria for filtering projects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..enums import ProjectStatus
from ..operators import FilterOperator
from ..ports import FieldCondition
from .base import Criterion

if TYPE_CHECKING:
    from ..ports import QueryHandle

PROJECT_SORTABLE_FIELDS: frozenset[str] = frozenset({"name", "created_at"})


@dataclass(frozen=True)
class ProjectStatusCriterion(Criterion):
    statuses: frozenset[ProjectStatus]

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "statuses", self._members(ProjectStatus, self.statuses)
        )

    def apply(self, query: QueryHandle) -> QueryHandle:
        values = sorted(s.value for s in self.statuses)
        if len(values) == 1:
            return query.filter_by_field("status", FilterOperator.EQ, values[0])
        return query.filter_by_field("status", FilterOperator.IN, tuple(values))


@dataclass(frozen=True)
class OwnerCriterion(Criterion):
    """Projects created by the given user."""

    user_id: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "user_id", self._identifier(self.user_id, "user_id"))

    def apply(self, query: QueryHandle) -> QueryHandle:
        return query.filter_by_field("created_by", FilterOperator.EQ, self.user_id)


@dataclass(frozen=True)
class SearchCriterion(Criterion):
    """Case-insensitive substring match on any of *fields*."""

    term: str
    fields: tuple[str, ...] = ("name", "description")

    def __post_init__(self) -> None:
        if not isinstance(self.term, str) or not self.term.strip():
            raise self._invalid("search term must be a non-empty string")
        if isinstance(self.fields, str):
            object.__setattr__(self, "fields", (self.fields,))
        else:
            object.__setattr__(self, "fields", tuple(self.fields))
        if not self.fields:
            raise self._invalid("at least one field to search is required")
        object.__setattr__(self, "term", self.term.strip())

    def apply(self, query: QueryHandle) -> QueryHandle:
        pattern = f"%{_escape_like(self.term)}%"
        return query.filter_any(
            [FieldCondition(name, FilterOperator.ILIKE, pattern) for name in self.fields]
        )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
