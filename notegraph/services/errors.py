"""Domain errors raised by the note repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class NoteServiceError(Exception):
    """Base error carrying the HTTP contract for a failed note operation."""

    error = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or None


class InvalidInput(NoteServiceError):
    """Malformed request data or an unusable file name."""

    error = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidPath(NoteServiceError):
    """Path escapes the notes root or has an illegal shape."""

    error = "invalid_path"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(NoteServiceError):
    error = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class AlreadyExists(NoteServiceError):
    error = "already_exists"
    status_code = status.HTTP_409_CONFLICT


class ProtectedResource(NoteServiceError):
    error = "protected_resource"
    status_code = status.HTTP_403_FORBIDDEN


class IOFailure(NoteServiceError):
    """Unexpected filesystem failure (permissions, disk errors)."""

    error = "io_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "NoteServiceError",
    "InvalidInput",
    "InvalidPath",
    "NotFound",
    "AlreadyExists",
    "ProtectedResource",
    "IOFailure",
]
