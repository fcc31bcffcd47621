"""Exception hierarchy for taskflow-query.

All exceptions inherit from ``TaskflowQueryError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class TaskflowQueryError(Exception):
    """Root exception for the entire taskflow-query library."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ValidationError(TaskflowQueryError):
    """Raised when pagination or request parameters are invalid.

    Carries structured errors: ``{field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "VALIDATION_ERROR",
            "errors": self.errors,
        }


class InvalidCriterionError(TaskflowQueryError):
    """Raised when a criterion is constructed with invalid parameters."""

    def __init__(self, criterion: str, message: str) -> None:
        self.criterion = criterion
        self.message = message
        super().__init__(f"{criterion}: {message}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_CRITERION",
            "criterion": self.criterion,
            "message": self.message,
        }


class FieldNotFoundError(TaskflowQueryError):
    """
    Unknown field referenced by a query handle.

    Uses fuzzy matching to suggest similar valid field names.
    """

    def __init__(
        self,
        invalid_field: str,
        model_name: str,
        available_fields: list[str],
        cutoff: float = 0.6,
    ) -> None:
        self.invalid_field = invalid_field
        self.model_name = model_name
        self.available_fields = available_fields
        self.suggestions = get_close_matches(
            invalid_field, available_fields, n=5, cutoff=cutoff
        )

        message = f"Invalid field '{invalid_field}' on '{model_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.invalid_field,
            "model": self.model_name,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }


class InfrastructureError(TaskflowQueryError):
    """Base class for all infrastructure-related errors."""


class QueryExecutionError(InfrastructureError):
    """Raised by a persistence collaborator when ``count()`` or ``execute()`` fails.

    The engine propagates it unchanged; it is never retried.
    """
