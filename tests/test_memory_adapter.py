from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

import pytest

from taskflow_query.adapters.memory import (
    InMemoryQuery,
    build_default_registry,
    like_pattern_to_regex,
)
from taskflow_query.enums import SortDirection
from taskflow_query.exceptions import FieldNotFoundError
from taskflow_query.operators import FilterOperator, OperatorRegistry
from taskflow_query.ports import FieldCondition, QueryHandle


@dataclass
class Task:
    id: int
    title: str
    assigned_to: int | None


def ids(query: InMemoryQuery) -> list[int]:
    return [row["id"] for row in query.execute()]


def test_is_a_query_handle(tasks) -> None:
    assert isinstance(InMemoryQuery(tasks), QueryHandle)


def test_registry_covers_every_operator() -> None:
    registry = build_default_registry()
    for operator in FilterOperator:
        assert callable(registry.resolve(operator))


@pytest.mark.parametrize(
    ("operator", "value", "expected"),
    [
        (FilterOperator.EQ, 2, list(range(9, 16))),
        (FilterOperator.NE, 2, list(range(1, 9))),
        (FilterOperator.GT, 1, list(range(9, 16))),
        (FilterOperator.GE, 2, list(range(9, 16))),
        (FilterOperator.LT, 2, list(range(1, 9))),
        (FilterOperator.LE, 1, list(range(1, 9))),
        (FilterOperator.IN, (1, 3), list(range(1, 9))),
        (FilterOperator.NOT_IN, (1,), list(range(9, 16))),
    ],
)
def test_comparison_operators(tasks, operator, value, expected) -> None:
    query = InMemoryQuery(tasks).filter_by_field("project_id", operator, value)
    assert ids(query) == expected


def test_between_is_inclusive(tasks) -> None:
    low, high = datetime(2025, 1, 4), datetime(2025, 1, 6)
    query = InMemoryQuery(tasks).filter_by_field(
        "due_date", FilterOperator.BETWEEN, (low, high)
    )
    assert ids(query) == [3, 4, 5]


def test_null_operators(tasks) -> None:
    base = InMemoryQuery(tasks)
    assert ids(base.filter_by_field("assigned_to", FilterOperator.IS_NULL, None)) == [
        5,
        10,
        15,
    ]
    assert base.filter_by_field(
        "assigned_to", FilterOperator.IS_NOT_NULL, None
    ).count() == 12


def test_comparisons_never_match_null(tasks) -> None:
    base = InMemoryQuery(tasks)
    assert base.filter_by_field("assigned_to", FilterOperator.GE, 0).count() == 12
    assert base.filter_by_field("assigned_to", FilterOperator.NOT_IN, (99,)).count() == 12


def test_like_and_ilike(tasks) -> None:
    base = InMemoryQuery(tasks)
    assert ids(base.filter_by_field("title", FilterOperator.LIKE, "Task 1_")) == [
        10, 11, 12, 13, 14, 15,
    ]
    assert base.filter_by_field("title", FilterOperator.LIKE, "task%").count() == 0
    assert base.filter_by_field("title", FilterOperator.ILIKE, "task%").count() == 15


@pytest.mark.parametrize(
    ("pattern", "text", "matches"),
    [
        ("%", "anything", True),
        ("a_c", "abc", True),
        ("a_c", "abbc", False),
        ("50\\%", "50%", True),
        ("50\\%", "500", False),
        ("a\\_b", "a_b", True),
        ("a\\_b", "axb", False),
        ("1+1", "1+1", True),
    ],
)
def test_like_pattern_to_regex(pattern: str, text: str, matches: bool) -> None:
    assert bool(re.fullmatch(like_pattern_to_regex(pattern), text)) is matches


def test_filter_any_is_or_and_groups_are_and(tasks) -> None:
    query = (
        InMemoryQuery(tasks)
        .filter_any(
            [
                FieldCondition("created_by", FilterOperator.EQ, 10),
                FieldCondition("assigned_to", FilterOperator.EQ, 10),
            ]
        )
        .filter_by_field("project_id", FilterOperator.EQ, 1)
    )
    assert ids(query) == [1, 3, 5, 6, 7]


def test_filter_any_requires_conditions(tasks) -> None:
    with pytest.raises(ValueError, match="at least one condition"):
        InMemoryQuery(tasks).filter_any([])


def test_refinements_do_not_mutate(tasks) -> None:
    base = InMemoryQuery(tasks)
    filtered = base.filter_by_field("status", FilterOperator.EQ, "pending")
    limited = filtered.limit(2)
    assert base.count() == 15
    assert filtered.count() == 5
    assert limited.count() == 2
    assert base == InMemoryQuery(tasks)
    assert filtered != base


def test_order_by_multiple_fields(tasks) -> None:
    query = (
        InMemoryQuery(tasks)
        .order_by("project_id", SortDirection.DESC)
        .order_by("created_at", SortDirection.ASC)
    )
    assert ids(query) == [*range(9, 16), *range(1, 9)]


def test_nulls_sort_first_ascending_last_descending(tasks) -> None:
    ascending = ids(InMemoryQuery(tasks).order_by("assigned_to", "asc"))
    descending = ids(InMemoryQuery(tasks).order_by("assigned_to", "desc"))
    assert ascending[:3] == [5, 10, 15]
    assert descending[-3:] == [5, 10, 15]


def test_limit_and_offset(tasks) -> None:
    query = InMemoryQuery(tasks).order_by("id", "asc").offset(3).limit(4)
    assert ids(query) == [4, 5, 6, 7]
    assert ids(InMemoryQuery(tasks).offset(20)) == []


@pytest.mark.parametrize("method", ["limit", "offset"])
def test_negative_bounds_rejected(tasks, method: str) -> None:
    with pytest.raises(ValueError, match="non-negative"):
        getattr(InMemoryQuery(tasks), method)(-1)


def test_object_records() -> None:
    records = [Task(1, "Write docs", None), Task(2, "Ship", 4)]
    query = InMemoryQuery(records).filter_by_field(
        "assigned_to", FilterOperator.IS_NOT_NULL, None
    )
    assert [t.id for t in query.execute()] == [2]


def test_unknown_field_on_mapping(tasks) -> None:
    query = InMemoryQuery(tasks).filter_by_field("stauts", FilterOperator.EQ, "x")
    with pytest.raises(FieldNotFoundError) as exc_info:
        query.execute()
    assert exc_info.value.suggestions == ["status"]
    assert exc_info.value.to_dict()["error"] == "FIELD_NOT_FOUND"


def test_unknown_field_on_object() -> None:
    query = InMemoryQuery([Task(1, "x", None)]).order_by("titel", "asc")
    with pytest.raises(FieldNotFoundError, match="Did you mean: title"):
        query.execute()


def test_custom_registry_limits_operators(tasks) -> None:
    registry = OperatorRegistry("in-memory evaluation")
    with pytest.raises(ValueError, match="Unsupported operator"):
        InMemoryQuery(tasks, registry=registry).filter_by_field(
            "id", FilterOperator.EQ, 1
        )


def test_custom_registry_extends_defaults(tasks) -> None:
    registry = build_default_registry()

    @registry.register(FilterOperator.EQ)
    def _eq_ignoring_case(field_value, value):
        return str(field_value).lower() == str(value).lower()

    query = InMemoryQuery(tasks, registry=registry).filter_by_field(
        "title", FilterOperator.EQ, "TASK 3"
    )
    assert ids(query) == [3]
    assert ids(
        InMemoryQuery(tasks).filter_by_field("title", FilterOperator.EQ, "TASK 3")
    ) == []
