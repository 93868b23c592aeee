"""Handlers for prompt shell requests."""

from .session import Session, SessionManager, SessionNotFoundError, TargetNotFoundError

__all__ = ["Session", "SessionManager", "SessionNotFoundError", "TargetNotFoundError"]
