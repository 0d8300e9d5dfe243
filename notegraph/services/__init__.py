"""Service layer for note storage and derived views."""

from .config import AppConfig, configure_logging, get_config, reload_config
from .editor import EditorState, TreeView
from .errors import (
    AlreadyExists,
    InvalidInput,
    InvalidPath,
    IOFailure,
    NoteServiceError,
    NotFound,
    ProtectedResource,
)
from .graph import build_graph
from .vault import (
    NoteEvent,
    NoteRepository,
    build_tree,
    load_ordering,
    resolve_relative_path,
    sanitize_filename,
)

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "configure_logging",
    "NoteRepository",
    "NoteEvent",
    "build_tree",
    "load_ordering",
    "resolve_relative_path",
    "sanitize_filename",
    "build_graph",
    "EditorState",
    "TreeView",
    "NoteServiceError",
    "InvalidInput",
    "InvalidPath",
    "NotFound",
    "AlreadyExists",
    "ProtectedResource",
    "IOFailure",
]
