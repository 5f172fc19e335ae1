"""Jsonnet evaluation: import resolution and single-use sessions."""

from __future__ import annotations

from .importer import INTERNAL_PREFIXES, InternalResourceNotFound, Resolved, ResolutionError, Resolver
from .session import EvaluationError, Session, new_session

__all__ = [
    "INTERNAL_PREFIXES",
    "EvaluationError",
    "InternalResourceNotFound",
    "Resolved",
    "ResolutionError",
    "Resolver",
    "Session",
    "new_session",
]
