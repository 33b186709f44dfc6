"""
Domain errors shared by services and the API layer.

Every error carries a stable `code` and the HTTP status the API maps it to.
Validation, lookup and authorization errors are raised before any state changes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CollabError(Exception):
    code = "UNKNOWN"
    status_code = 500

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(CollabError):
    code = "VALIDATION_ERROR"
    status_code = 400


class AuthenticationError(CollabError):
    code = "AUTHENTICATION_ERROR"
    status_code = 401


class ForbiddenError(CollabError):
    code = "FORBIDDEN"
    status_code = 403


class UnknownAuthorError(CollabError):
    code = "UNKNOWN_AUTHOR"
    status_code = 404


class UnknownProjectError(CollabError):
    code = "UNKNOWN_PROJECT"
    status_code = 404


class UnknownApplicationError(CollabError):
    code = "UNKNOWN_APPLICATION"
    status_code = 404


class UnknownUserError(CollabError):
    code = "UNKNOWN_USER"
    status_code = 404


class StorageError(CollabError):
    """Durable local write or read failed."""
    code = "STORAGE_ERROR"
    status_code = 503


class RemoteError(CollabError):
    """Remote document store unreachable or rejected the operation."""
    code = "REMOTE_ERROR"
    status_code = 503


def require_text(value: Optional[str], field: str) -> str:
    """Return the trimmed value or raise ValidationError when it is blank."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required", context={"field": field})
    return cleaned
