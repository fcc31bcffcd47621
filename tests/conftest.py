"""Shared fixtures for taskflow-query tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any

import pytest

from taskflow_query.engine import QueryFilterEngine

BASE_DUE = datetime(2025, 1, 1)
BASE_CREATED = datetime(2024, 12, 1)
STATUSES = ["pending", "in_progress", "completed"]
PRIORITIES = ["low", "medium", "high"]


def make_task(i: int) -> dict[str, Any]:
    """Deterministic task row; ``i`` runs from 1 to 15.

    - status cycles pending / in_progress / completed
    - priority is low for 1-5, medium for 6-10, high for 11-15
    - project 1 holds tasks 1-8, project 2 holds 9-15
    - every fifth task is unassigned, the rest go to users 10, 11, 12
    - odd tasks are created by user 10, even ones by user 20
    """
    return {
        "id": i,
        "title": f"Task {i}",
        "status": STATUSES[(i - 1) % 3],
        "priority": PRIORITIES[(i - 1) // 5],
        "project_id": 1 if i <= 8 else 2,
        "assigned_to": None if i % 5 == 0 else (i % 3) + 10,
        "created_by": 10 if i % 2 else 20,
        "due_date": BASE_DUE + timedelta(days=i),
        "created_at": BASE_CREATED + timedelta(hours=i),
    }


@pytest.fixture
def tasks() -> list[dict[str, Any]]:
    return [make_task(i) for i in range(1, 16)]


@pytest.fixture
def projects() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "name": "Website Redesign",
            "description": "New landing page",
            "status": "active",
            "created_by": 10,
            "created_at": BASE_CREATED,
        },
        {
            "id": 2,
            "name": "Mobile App",
            "description": "iOS and Android redesign",
            "status": "completed",
            "created_by": 20,
            "created_at": BASE_CREATED + timedelta(days=1),
        },
        {
            "id": 3,
            "name": "100% uptime",
            "description": None,
            "status": "archived",
            "created_by": 10,
            "created_at": BASE_CREATED + timedelta(days=2),
        },
    ]


@dataclass(frozen=True)
class RecordingQuery:
    """QueryHandle fake that records every call.

    ``calls`` holds the refinements of this handle only and takes part
    in equality; ``log`` is shared by every derived handle and also
    records ``count`` and ``execute``.
    """

    calls: tuple[tuple[Any, ...], ...] = ()
    rows: tuple[Any, ...] = ()
    total: int = 0
    error: Exception | None = field(default=None, compare=False)
    fail_on: str | None = field(default=None, compare=False)
    log: list[tuple[Any, ...]] = field(default_factory=list, compare=False)

    def _record(self, *call: Any) -> RecordingQuery:
        self.log.append(call)
        return replace(self, calls=(*self.calls, call))

    def _maybe_fail(self, name: str) -> None:
        if self.fail_on == name and self.error is not None:
            raise self.error

    def filter_by_field(self, name: str, operator: Any, value: Any) -> RecordingQuery:
        return self._record("filter_by_field", name, operator, value)

    def filter_any(self, conditions: Any) -> RecordingQuery:
        return self._record("filter_any", tuple(conditions))

    def order_by(self, name: str, direction: Any) -> RecordingQuery:
        return self._record("order_by", name, direction)

    def limit(self, n: int) -> RecordingQuery:
        return self._record("limit", n)

    def offset(self, n: int) -> RecordingQuery:
        return self._record("offset", n)

    def count(self) -> int:
        self.log.append(("count",))
        self._maybe_fail("count")
        return self.total

    def execute(self) -> list[Any]:
        self.log.append(("execute",))
        self._maybe_fail("execute")
        return list(self.rows)


@pytest.fixture
def recording_query() -> RecordingQuery:
    return RecordingQuery()


@pytest.fixture
def make_recording_query():
    """Factory for RecordingQuery with custom rows/failures."""
    return RecordingQuery


@pytest.fixture
def engine() -> QueryFilterEngine:
    return QueryFilterEngine()
