"""
QueryFilterEngine — criteria + pagination over an abstract query handle.

The engine owns no persistence. It threads a
:class:`~taskflow_query.ports.QueryHandle` through the criteria, counts
the filtered rows, narrows to the requested page and executes once.

Failures from criteria or from the handle propagate unchanged: the
engine neither retries nor wraps them.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .page import PageResult

if TYPE_CHECKING:
    from .criteria.base import CriteriaSet
    from .pagination import PaginationSpec
    from .ports import QueryHandle

logger = logging.getLogger("taskflow_query.engine")


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine configuration.

    Attributes:
        include_total: Run the count query unless ``fetch_page`` is told
            otherwise.
    """

    include_total: bool = True


class QueryFilterEngine:
    """Produce bounded pages from a base query, criteria and pagination."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def fetch_page(
        self,
        base: QueryHandle,
        criteria: CriteriaSet,
        pagination: PaginationSpec,
        *,
        with_total: bool | None = None,
    ) -> PageResult[Any]:
        """
        Fetch one page.

        Args:
            base: Unfiltered query supplied by the persistence layer.
            criteria: Applied in insertion order before pagination.
            pagination: Page number and size.
            with_total: Override ``EngineConfig.include_total``.

        Returns:
            A :class:`PageResult`. A page past the end holds no records
            but still reports the true ``total``.
        """
        include_total = (
            self._config.include_total if with_total is None else with_total
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Fetching page %d (per_page=%d) with %d criteria: %s",
                pagination.page,
                pagination.per_page,
                len(criteria),
                criteria.to_list(),
            )
        start = time.perf_counter()

        filtered = criteria.apply_all(base)
        total = filtered.count() if include_total else None
        paged = filtered.limit(pagination.limit).offset(pagination.offset)
        records = tuple(paged.execute())

        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(
            "Fetched %d record(s) of %s in %.2fms",
            len(records),
            total if total is not None else "?",
            elapsed,
        )
        return PageResult(
            records=records,
            total=total,
            page=pagination.page,
            per_page=pagination.per_page,
        )
