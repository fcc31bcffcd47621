"""Composable query filtering and pagination for task/project list endpoints."""

from __future__ import annotations

from .criteria import (
    AssigneeCriterion,
    CriteriaSet,
    Criterion,
    DueDateRangeCriterion,
    DueSoonCriterion,
    FieldCriterion,
    OverdueCriterion,
    OwnerCriterion,
    PriorityCriterion,
    ProjectCriterion,
    ProjectFilterParser,
    ProjectStatusCriterion,
    SearchCriterion,
    SortCriterion,
    StatusCriterion,
    TaskFilterParser,
    UserCriterion,
    restrict_to_user,
)
from .engine import EngineConfig, QueryFilterEngine
from .enums import ProjectStatus, SortDirection, TaskPriority, TaskStatus
from .exceptions import (
    FieldNotFoundError,
    InfrastructureError,
    InvalidCriterionError,
    QueryExecutionError,
    TaskflowQueryError,
    ValidationError,
)
from .operators import FilterOperator, OperatorRegistry
from .page import PageResult
from .pagination import PaginationSpec
from .ports import FieldCondition, QueryHandle
from .requests import IndexParams, ProjectIndexParams, TaskIndexParams

__all__ = [
    # Core types
    "PaginationSpec",
    "PageResult",
    "Criterion",
    "CriteriaSet",
    "FieldCriterion",
    "QueryFilterEngine",
    "EngineConfig",
    # Ports
    "FieldCondition",
    "FilterOperator",
    "OperatorRegistry",
    "QueryHandle",
    # Task criteria
    "AssigneeCriterion",
    "DueDateRangeCriterion",
    "DueSoonCriterion",
    "OverdueCriterion",
    "PriorityCriterion",
    "ProjectCriterion",
    "SortCriterion",
    "StatusCriterion",
    "UserCriterion",
    # Project criteria
    "OwnerCriterion",
    "ProjectStatusCriterion",
    "SearchCriterion",
    # Raw input
    "IndexParams",
    "ProjectFilterParser",
    "ProjectIndexParams",
    "TaskFilterParser",
    "TaskIndexParams",
    "restrict_to_user",
    # Enums
    "ProjectStatus",
    "SortDirection",
    "TaskPriority",
    "TaskStatus",
    # Exceptions
    "TaskflowQueryError",
    "ValidationError",
    "InvalidCriterionError",
    "FieldNotFoundError",
    "InfrastructureError",
    "QueryExecutionError",
]
