"""
SQLAlchemyQuery — QueryHandle over a SQLAlchemy ``Select`` statement.

Each refinement returns a new handle wrapping a new ``Select``;
``count()`` and ``execute()`` run against the bound synchronous
``Session``. ``SQLAlchemyError`` is surfaced as
:class:`~taskflow_query.exceptions.QueryExecutionError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import asc, desc, func, inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import QueryableAttribute

from ...enums import SortDirection
from ...exceptions import FieldNotFoundError, QueryExecutionError
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.orm import Session

    from ...operators import FilterOperator, OperatorRegistry
    from ...ports import FieldCondition
    from .operators import ClauseBuilder

logger = logging.getLogger("taskflow_query.adapters.sqlalchemy")


class SQLAlchemyQuery:
    """
    Immutable query handle for one mapped model.

    Usage::

        with Session(engine) as session:
            base = SQLAlchemyQuery(session, TaskModel)
            page = QueryFilterEngine().fetch_page(base, criteria, pagination)
    """

    __slots__ = ("_session", "_model", "_stmt", "_registry")

    def __init__(
        self,
        session: Session,
        model: type[Any],
        stmt: Select[Any] | None = None,
        *,
        registry: OperatorRegistry[ClauseBuilder] | None = None,
    ) -> None:
        self._session = session
        self._model = model
        self._stmt = stmt if stmt is not None else select(model)
        self._registry = DEFAULT_SQLA_REGISTRY if registry is None else registry

    @property
    def statement(self) -> Select[Any]:
        return self._stmt

    # -- refinement ----------------------------------------------------------

    def filter_by_field(
        self, name: str, operator: FilterOperator, value: Any
    ) -> SQLAlchemyQuery:
        clause = self._compile(name, operator, value)
        return self._with_statement(self._stmt.where(clause))

    def filter_any(self, conditions: Sequence[FieldCondition]) -> SQLAlchemyQuery:
        if not conditions:
            raise ValueError("filter_any requires at least one condition")
        clauses = [self._compile(c.field, c.operator, c.value) for c in conditions]
        return self._with_statement(self._stmt.where(or_(*clauses)))

    def order_by(self, name: str, direction: SortDirection) -> SQLAlchemyQuery:
        column = self._column(name)
        if SortDirection(direction) == SortDirection.DESC:
            ordering = desc(column)
        else:
            ordering = asc(column)
        return self._with_statement(self._stmt.order_by(ordering))

    def limit(self, n: int) -> SQLAlchemyQuery:
        return self._with_statement(self._stmt.limit(n))

    def offset(self, n: int) -> SQLAlchemyQuery:
        return self._with_statement(self._stmt.offset(n))

    # -- execution -----------------------------------------------------------

    def count(self) -> int:
        count_stmt = select(func.count()).select_from(
            self._stmt.order_by(None).subquery()
        )
        logger.debug("Counting %s: %s", self._model.__name__, count_stmt)
        try:
            result = self._session.scalar(count_stmt)
        except SQLAlchemyError as exc:
            raise QueryExecutionError(
                f"Count query on {self._model.__name__} failed: {exc}"
            ) from exc
        return int(result or 0)

    def execute(self) -> list[Any]:
        logger.debug("Executing %s: %s", self._model.__name__, self._stmt)
        try:
            return list(self._session.scalars(self._stmt).all())
        except SQLAlchemyError as exc:
            raise QueryExecutionError(
                f"Query on {self._model.__name__} failed: {exc}"
            ) from exc

    # -- internals -----------------------------------------------------------

    def _column(self, name: str) -> Any:
        attr = getattr(self._model, name, None)
        if not isinstance(attr, QueryableAttribute):
            available = list(inspect(self._model).all_orm_descriptors.keys())
            raise FieldNotFoundError(name, self._model.__name__, available)
        return attr

    def _compile(
        self, name: str, operator: FilterOperator, value: Any
    ) -> ColumnElement[bool]:
        build = self._registry.resolve(operator)
        return build(self._column(name), value)

    def _with_statement(self, stmt: Select[Any]) -> SQLAlchemyQuery:
        return SQLAlchemyQuery(
            self._session, self._model, stmt, registry=self._registry
        )
