"""Error types raised by the content core and the stores.

Every error carries the HTTP status code the API layer answers with, so the
exception handlers in :mod:`cms.api.app` never need a lookup table.
"""

from __future__ import annotations

from typing import Any, Iterable


class CMSError(Exception):
    """Base class for all expected application errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{"error": {...}}`` response body for this error."""
        return {"error": {"message": self.message}}


class NotFoundError(CMSError):
    """A collection or entry does not exist (or lives in another collection)."""

    status_code = 404

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message)


class ValidationError(CMSError):
    """Input failed validation.

    ``details`` is an ordered list of ``{"field": ..., "message": ...}``
    dicts for field-level failures and empty for global ones.
    """

    status_code = 400

    def __init__(self, message: str, details: Iterable[dict[str, str]] = ()) -> None:
        super().__init__(message)
        self.details = list(details)

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.details:
            body["error"]["details"] = self.details
        return body


class ConflictError(ValidationError):
    """A collection name or slug is already taken."""

    status_code = 409


class ErrorCollector:
    """Accumulates field-level problems so a validator can report all of them."""

    def __init__(self) -> None:
        self.details: list[dict[str, str]] = []

    def add(self, field: str, message: str) -> None:
        self.details.append({"field": field, "message": message})

    def __bool__(self) -> bool:
        return bool(self.details)

    def __len__(self) -> int:
        return len(self.details)

    def raise_if_any(self, message: str) -> None:
        """Raise a single :class:`ValidationError` carrying every detail."""
        if self.details:
            raise ValidationError(message, self.details)
