from __future__ import annotations

import pytest

from taskflow_query.adapters.memory import InMemoryQuery
from taskflow_query.criteria import (
    OwnerCriterion,
    ProjectStatusCriterion,
    SearchCriterion,
)
from taskflow_query.enums import ProjectStatus
from taskflow_query.exceptions import InvalidCriterionError
from taskflow_query.operators import FilterOperator
from taskflow_query.ports import FieldCondition


def ids(query: InMemoryQuery) -> list[int]:
    return [row["id"] for row in query.execute()]


def test_project_status(projects) -> None:
    query = ProjectStatusCriterion([ProjectStatus.ACTIVE, "archived"]).apply(
        InMemoryQuery(projects)
    )
    assert ids(query) == [1, 3]


def test_project_status_rejects_task_status() -> None:
    with pytest.raises(InvalidCriterionError, match="not a valid ProjectStatus"):
        ProjectStatusCriterion("pending")


def test_owner(projects) -> None:
    assert ids(OwnerCriterion(10).apply(InMemoryQuery(projects))) == [1, 3]


def test_search_matches_name_or_description(projects) -> None:
    query = SearchCriterion("REDESIGN").apply(InMemoryQuery(projects))
    assert ids(query) == [1, 2]


def test_search_escapes_wildcards(projects) -> None:
    query = SearchCriterion("100%").apply(InMemoryQuery(projects))
    assert ids(query) == [3]


def test_search_builds_or_group(recording_query) -> None:
    result = SearchCriterion("  a_b  ").apply(recording_query)
    assert result.calls == (
        (
            "filter_any",
            (
                FieldCondition("name", FilterOperator.ILIKE, "%a\\_b%"),
                FieldCondition("description", FilterOperator.ILIKE, "%a\\_b%"),
            ),
        ),
    )


def test_search_custom_fields(recording_query) -> None:
    criterion = SearchCriterion("x", fields="name")
    assert criterion.fields == ("name",)


@pytest.mark.parametrize("term", ["", "   ", None])
def test_search_rejects_blank_term(term: object) -> None:
    with pytest.raises(InvalidCriterionError, match="non-empty string"):
        SearchCriterion(term)  # type: ignore[arg-type]


def test_search_requires_fields() -> None:
    with pytest.raises(InvalidCriterionError, match="at least one field"):
        SearchCriterion("x", fields=())
