"""SQLAlchemy QueryHandle implementation."""

from __future__ import annotations

from .operators import DEFAULT_SQLA_REGISTRY, ClauseBuilder, build_default_sqla_registry
from .query import SQLAlchemyQuery

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "ClauseBuilder",
    "SQLAlchemyQuery",
    "build_default_sqla_registry",
]
