"""In-memory QueryHandle implementation."""

from __future__ import annotations

from .operators import Predicate, build_default_registry, like_pattern_to_regex
from .query import InMemoryQuery

__all__ = [
    "InMemoryQuery",
    "Predicate",
    "build_default_registry",
    "like_pattern_to_regex",
]
