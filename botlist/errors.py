"""
botlist.errors — Domain Error Taxonomy
========================================

Services raise these for authorization, validation and lookup failures.
The API layer renders every :class:`DirectoryError` as
``{"error": message}`` with the class's ``status_code``; nothing else in
the stack needs to know about HTTP.
"""

from __future__ import annotations

from typing import Any


class DirectoryError(Exception):
    """Base class for all botlist domain errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class UnauthenticatedError(DirectoryError):
    """No caller identity was presented (or it failed verification)."""

    status_code = 401


class ForbiddenError(DirectoryError):
    """Caller is known but lacks the role or ownership required."""

    status_code = 403


class ValidationError(DirectoryError):
    """Required input is missing or blank."""

    status_code = 400


class NotFoundError(DirectoryError):
    """The requested entity does not exist."""

    status_code = 404


class ConflictError(DirectoryError):
    """A unique key (e.g. a bot's client id) already exists."""

    status_code = 409


class UpstreamError(DirectoryError):
    """A third-party call (enrichment, notification webhook) failed.

    Raised only inside those client boundaries, where it is logged and
    downgraded to a best-effort result.
    """

    status_code = 502
