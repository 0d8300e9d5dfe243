"""Pydantic models for data validation and serialization."""

from .graph import GraphData, GraphEdge, GraphNode
from .note import (
    MessageResponse,
    MoveResponse,
    NoteContent,
    NoteCreate,
    NoteCreated,
    NoteDelete,
    NoteMove,
    NoteRename,
    NoteUpdate,
    TreeNode,
)

__all__ = [
    "TreeNode",
    "NoteContent",
    "NoteCreate",
    "NoteCreated",
    "NoteUpdate",
    "NoteRename",
    "NoteDelete",
    "NoteMove",
    "MessageResponse",
    "MoveResponse",
    "GraphData",
    "GraphNode",
    "GraphEdge",
]
