"""PageResult — bounded slice of records plus pagination metadata."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


@dataclass(frozen=True)
class PageResult(Generic[T]):
    """
    One page of records.

    ``total`` is ``None`` when the caller skipped the count query; the
    navigation properties that depend on it then return ``None`` too.
    """

    records: tuple[T, ...]
    total: int | None
    page: int
    per_page: int

    def __post_init__(self) -> None:
        if len(self.records) > self.per_page:
            raise ValueError(
                f"Page holds {len(self.records)} records, "
                f"more than per_page={self.per_page}"
            )

    def __len__(self) -> int:
        return len(self.records)

    @property
    def last_page(self) -> int | None:
        if self.total is None:
            return None
        return max(1, math.ceil(self.total / self.per_page))

    @property
    def first_item(self) -> int | None:
        """1-based position of the first record on this page."""
        if not self.records:
            return None
        return (self.page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        """1-based position of the last record on this page."""
        if not self.records:
            return None
        return (self.page - 1) * self.per_page + len(self.records)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool | None:
        last_page = self.last_page
        if last_page is None:
            return None
        return self.page < last_page

    def map(self, fn: Callable[[T], Any]) -> PageResult[Any]:
        """Return a new page with each record transformed by *fn*."""
        return PageResult(
            records=tuple(fn(record) for record in self.records),
            total=self.total,
            page=self.page,
            per_page=self.per_page,
        )

    def to_meta(self) -> dict[str, Any]:
        """Pagination metadata in the shape list endpoints return."""
        return {
            "current_page": self.page,
            "per_page": self.per_page,
            "total": self.total,
            "last_page": self.last_page,
            "from": self.first_item,
            "to": self.last_item,
        }
