"""
Index request parameters — validated with Pydantic.

``TaskIndexParams`` and ``ProjectIndexParams`` validate the raw query
map of a list endpoint and hand out the pieces the engine needs::

    params = TaskIndexParams.from_raw_map(request.query_params)
    page = engine.fetch_page(base, params.criteria(), params.pagination())

Pydantic errors are converted into
:class:`~taskflow_query.exceptions.ValidationError` with
``{field: [messages]}``.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from .criteria.filters import ProjectFilterParser, TaskFilterParser
from .enums import ProjectStatus, SortDirection, TaskPriority, TaskStatus
from .exceptions import ValidationError
from .pagination import DEFAULT_PAGE, DEFAULT_PER_PAGE, PaginationSpec

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .criteria.base import CriteriaSet

P = TypeVar("P", bound="IndexParams")

_PAGINATION_FIELDS = {"page", "per_page"}


class IndexParams(BaseModel):
    """
    Fields shared by every list endpoint.

    Abstract: each endpoint subclasses it with its own filters and
    implements :meth:`criteria`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1)
    sort_order: SortDirection | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_blank(cls, data: Any) -> Any:
        # Blank query-string values mean "not given".
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if value is not None and not (isinstance(value, str) and not value.strip())
        }

    @field_validator("page", "per_page", mode="before")
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        # Pydantic lax mode would read True as 1.
        if isinstance(value, bool):
            raise ValueError("must be an integer")
        return value

    @classmethod
    def from_raw_map(cls: type[P], data: Mapping[str, Any]) -> P:
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as exc:
            errors: dict[str, list[str]] = {}
            for error in exc.errors():
                loc = ".".join(str(p) for p in error.get("loc", ())) or "__root__"
                msg = error.get("msg", "validation error")
                errors.setdefault(loc, []).append(msg)
            raise ValidationError(errors) from exc

    def pagination(self) -> PaginationSpec:
        return PaginationSpec(page=self.page, per_page=self.per_page)

    def filters(self) -> dict[str, Any]:
        """Non-empty filter and sort values, without pagination."""
        return self.model_dump(exclude=_PAGINATION_FIELDS, exclude_none=True)

    def filter_summary(self) -> dict[str, Any]:
        filters = self.filters()
        return {
            "filters_applied": len(filters),
            "has_sorting": "sort_by" in filters,
            "filter_keys": sorted(filters),
        }

    @abstractmethod
    def criteria(self) -> CriteriaSet:
        """Parsed criteria for this endpoint, in a fixed order."""


class TaskIndexParams(IndexParams):
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    project_id: PositiveInt | None = None
    assigned_to: PositiveInt | None = None
    due_from: datetime | None = None
    due_to: datetime | None = None
    sort_by: Literal["due_date", "created_at"] | None = None

    def criteria(self) -> CriteriaSet:
        return TaskFilterParser().parse(self.filters())


class ProjectIndexParams(IndexParams):
    status: ProjectStatus | None = None
    owner_id: PositiveInt | None = None
    search: str | None = Field(default=None, max_length=255)
    sort_by: Literal["name", "created_at"] | None = None

    def criteria(self) -> CriteriaSet:
        return ProjectFilterParser().parse(self.filters())
