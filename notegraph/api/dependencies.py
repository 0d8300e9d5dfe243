"""Request-scoped dependencies."""

from __future__ import annotations

from ..services.config import get_config
from ..services.vault import NoteRepository


def get_repository() -> NoteRepository:
    """Return a repository bound to the configured notes root."""
    return NoteRepository(get_config())


__all__ = ["get_repository"]
