"""TaskFilterParser / ProjectFilterParser — raw filter map -> CriteriaSet."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from .base import CriteriaSet
from .projects import (
    PROJECT_SORTABLE_FIELDS,
    OwnerCriterion,
    ProjectStatusCriterion,
    SearchCriterion,
)
from .tasks import (
    TASK_SORTABLE_FIELDS,
    AssigneeCriterion,
    DueDateRangeCriterion,
    PriorityCriterion,
    ProjectCriterion,
    SortCriterion,
    StatusCriterion,
    UserCriterion,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .base import Criterion


class TaskFilterParser:
    """Build the task list criteria from a raw filter map.

    Keys are read in a fixed order so the resulting ``CriteriaSet`` is
    deterministic: ``status``, ``priority``, ``project_id``,
    ``assigned_to``, ``due_from``/``due_to``, then ordering. Without
    ``sort_by`` the newest tasks come first.
    """

    def __init__(
        self,
        *,
        sortable_fields: frozenset[str] = TASK_SORTABLE_FIELDS,
        default_sort: tuple[str, str] = ("created_at", "desc"),
    ) -> None:
        self._sortable_fields = sortable_fields
        self._default_sort = default_sort

    def parse(self, filters: Mapping[str, Any]) -> CriteriaSet:
        criteria: list[Criterion] = []
        if _present(filters, "status"):
            criteria.append(StatusCriterion(_split(filters["status"])))
        if _present(filters, "priority"):
            criteria.append(PriorityCriterion(_split(filters["priority"])))
        if _present(filters, "project_id"):
            criteria.append(ProjectCriterion(filters["project_id"]))
        if _present(filters, "assigned_to"):
            criteria.append(AssigneeCriterion(filters["assigned_to"]))
        if _present(filters, "due_from") or _present(filters, "due_to"):
            criteria.append(
                DueDateRangeCriterion(
                    start=_datetime(filters.get("due_from")),
                    end=_datetime(filters.get("due_to")),
                )
            )
        criteria.append(self._sort(filters))
        return CriteriaSet.of(*criteria)

    def _sort(self, filters: Mapping[str, Any]) -> SortCriterion:
        if _present(filters, "sort_by"):
            direction = filters.get("sort_order") or "asc"
            return SortCriterion(
                filters["sort_by"], direction, allowed_fields=self._sortable_fields
            )
        field, direction = self._default_sort
        return SortCriterion(field, direction, allowed_fields=self._sortable_fields)


class ProjectFilterParser:
    """Build the project list criteria from a raw filter map."""

    def __init__(
        self, *, sortable_fields: frozenset[str] = PROJECT_SORTABLE_FIELDS
    ) -> None:
        self._sortable_fields = sortable_fields

    def parse(self, filters: Mapping[str, Any]) -> CriteriaSet:
        criteria = CriteriaSet.empty()
        if _present(filters, "status"):
            criteria = criteria.add(ProjectStatusCriterion(_split(filters["status"])))
        if _present(filters, "owner_id"):
            criteria = criteria.add(OwnerCriterion(filters["owner_id"]))
        if _present(filters, "search"):
            criteria = criteria.add(SearchCriterion(filters["search"]))
        if _present(filters, "sort_by"):
            criteria = criteria.add(
                SortCriterion(
                    filters["sort_by"],
                    filters.get("sort_order") or "asc",
                    allowed_fields=self._sortable_fields,
                )
            )
        return criteria


def restrict_to_user(criteria: CriteriaSet, user_id: int) -> CriteriaSet:
    """Limit *criteria* to tasks the user created or is assigned to."""
    return criteria.add(UserCriterion(user_id))


def _present(filters: Mapping[str, Any], key: str) -> bool:
    value = filters.get(key)
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _split(value: Any) -> Any:
    """Accept ``"a,b"`` as well as a list for multi-valued filters."""
    if isinstance(value, str) and not isinstance(value, Enum):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def _datetime(value: Any) -> Any:
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            # Left as-is so DueDateRangeCriterion reports it.
            return value
    if isinstance(value, str):
        return None
    return value
