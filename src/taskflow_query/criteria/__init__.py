"""Composable filter criteria for task and project queries."""

from __future__ import annotations

from .base import CriteriaSet, Criterion, FieldCriterion
from .filters import ProjectFilterParser, TaskFilterParser, restrict_to_user
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
    DueSoonCriterion,
    OverdueCriterion,
    PriorityCriterion,
    ProjectCriterion,
    SortCriterion,
    StatusCriterion,
    UserCriterion,
)

__all__ = [
    # Core types
    "Criterion",
    "CriteriaSet",
    "FieldCriterion",
    # Tasks
    "TASK_SORTABLE_FIELDS",
    "AssigneeCriterion",
    "DueDateRangeCriterion",
    "DueSoonCriterion",
    "OverdueCriterion",
    "PriorityCriterion",
    "ProjectCriterion",
    "SortCriterion",
    "StatusCriterion",
    "UserCriterion",
    # Projects
    "PROJECT_SORTABLE_FIELDS",
    "OwnerCriterion",
    "ProjectStatusCriterion",
    "SearchCriterion",
    # Parsers
    "ProjectFilterParser",
    "TaskFilterParser",
    "restrict_to_user",
]
