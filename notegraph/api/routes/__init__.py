"""HTTP API route handlers."""

from . import graph, notes

__all__ = ["notes", "graph"]
