"""
Pagination parameters for list endpoints.

``PaginationSpec`` is the validated, immutable page/per_page pair.
Raw request input uses the external key names ``page`` and
``per_page``; :meth:`PaginationSpec.from_raw_map` and
:meth:`PaginationSpec.to_raw_map` translate between the two.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 15

PAGE_KEY = "page"
PER_PAGE_KEY = "per_page"


@dataclass(frozen=True)
class PaginationSpec:
    """
    Immutable pagination parameters.

    Attributes:
        page: 1-based page number.
        per_page: Maximum number of records per page.

    Both values must be integers ``>= 1``; construction raises
    :class:`ValidationError` otherwise.
    """

    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE

    def __post_init__(self) -> None:
        errors: dict[str, list[str]] = {}
        for name in ("page", "per_page"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                errors[name] = [f"{name} must be an integer"]
            elif value < 1:
                errors[name] = [f"{name} must be at least 1"]
        if errors:
            raise ValidationError(errors)

    # ── Factory methods ──────────────────────────────────────────

    @classmethod
    def create(
        cls, page: int | None = None, per_page: int | None = None
    ) -> PaginationSpec:
        """Build a spec; ``None`` falls back to the defaults (1, 15)."""
        return cls(
            page=DEFAULT_PAGE if page is None else page,
            per_page=DEFAULT_PER_PAGE if per_page is None else per_page,
        )

    @classmethod
    def from_raw_map(cls, data: Mapping[str, Any]) -> PaginationSpec:
        """Build a spec from untyped request input (``page``, ``per_page``)."""
        errors: dict[str, list[str]] = {}
        page = _coerce_int(data.get(PAGE_KEY), PAGE_KEY, errors)
        per_page = _coerce_int(data.get(PER_PAGE_KEY), PER_PAGE_KEY, errors)
        if errors:
            raise ValidationError(errors)
        return cls.create(page=page, per_page=per_page)

    # ── Serialisation ────────────────────────────────────────────

    def to_raw_map(self) -> dict[str, Any]:
        """Serialise with the external key names."""
        return {PAGE_KEY: self.page, PER_PAGE_KEY: self.per_page}

    # ── Derivation ───────────────────────────────────────────────

    def with_changes(
        self, page: int | None = None, per_page: int | None = None
    ) -> PaginationSpec:
        """Return a new validated copy with the given overrides."""
        return PaginationSpec(
            page=self.page if page is None else page,
            per_page=self.per_page if per_page is None else per_page,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page


def _coerce_int(value: Any, key: str, errors: dict[str, list[str]]) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        errors[key] = [f"{key} must be an integer"]
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        errors[key] = [f"{key} must be an integer"]
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return int(value.strip())
        except ValueError:
            errors[key] = [f"{key} must be an integer"]
            return None
    errors[key] = [f"{key} must be an integer"]
    return None
