"""Filesystem note repository: path validation, tree listing and mutations."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path, PurePosixPath
import re
import shutil
from typing import Any, Callable, Dict, Iterator, List, Optional

from .config import AppConfig, get_config
from .errors import (
    AlreadyExists,
    InvalidInput,
    InvalidPath,
    IOFailure,
    NoteServiceError,
    NotFound,
    ProtectedResource,
)

logger = logging.getLogger(__name__)

# Separators stay legal in relative paths; file names drop them too.
INVALID_PATH_CHARS = re.compile(r'[*?"<>|]')
INVALID_FILENAME_CHARS = re.compile(r'[/\\:*?"<>|]')

TreeNode = Dict[str, Any]
NoteListener = Callable[["NoteEvent"], None]


@dataclass(frozen=True)
class NoteEvent:
    """Notification emitted after a successful mutation."""

    kind: str
    path: str
    new_path: Optional[str] = None

    def touches(self, path: str) -> bool:
        """True when ``path`` is the event path or lies beneath it."""
        return path == self.path or path.startswith(self.path.rstrip("/") + "/")


def resolve_relative_path(root: Path, relative_path: str) -> Path:
    """
    Resolve a client-supplied path inside ``root``.

    Raises InvalidInput for empty input and InvalidPath when the path
    escapes the root (``..`` segments, absolute paths, symlinks out).
    Only the parent is resolved, so a final symlink names the link itself.
    """
    if not isinstance(relative_path, str) or not relative_path.strip():
        raise InvalidInput("Path is required")
    if "\x00" in relative_path:
        raise InvalidPath("Invalid file path: null byte", detail={"path": relative_path})

    cleaned = INVALID_PATH_CHARS.sub("", relative_path).replace("\\", "/")
    if ".." in PurePosixPath(cleaned).parts:
        raise InvalidPath(
            "Invalid file path component ('..') detected.",
            detail={"path": relative_path},
        )

    base = root.resolve()
    joined = base / cleaned
    try:
        candidate = joined.parent.resolve() / joined.name if joined != base else base
    except (OSError, ValueError) as exc:
        raise InvalidPath(f"Invalid file path: {exc}", detail={"path": relative_path}) from exc
    if candidate != base and not candidate.is_relative_to(base):
        logger.warning(
            "Path traversal attempt detected: relative=%r resolved=%s root=%s",
            relative_path,
            candidate,
            base,
        )
        raise InvalidPath(
            "Invalid file path: Path traversal attempt detected.",
            detail={"path": relative_path},
        )
    return candidate


def sanitize_filename(filename: str, extension: str = ".md") -> str:
    """Strip illegal characters and force the note extension onto ``filename``."""
    if not isinstance(filename, str) or not filename.strip():
        raise InvalidInput("Filename must be a non-empty string")
    sanitized = INVALID_FILENAME_CHARS.sub("", filename)
    sanitized = sanitized.strip().strip(".").strip()
    if not sanitized.endswith(extension):
        sanitized += extension
    if sanitized == extension:
        raise InvalidInput("Invalid or empty filename after sanitization")
    return sanitized


def load_ordering(root: Path, filename: str = ".metadata.json") -> Optional[List[str]]:
    """
    Read the ``order`` array from the sidecar file at the notes root.

    Returns None when the sidecar is absent, unreadable or of the wrong shape.
    """
    sidecar = root / filename
    if not sidecar.is_file():
        return None
    try:
        data = json.loads(sidecar.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("Ignoring unreadable ordering sidecar %s: %s", sidecar, exc)
        return None
    order = data.get("order") if isinstance(data, dict) else None
    if not isinstance(order, list):
        logger.debug("Ignoring ordering sidecar without an 'order' list: %s", sidecar)
        return None
    return [_normalize_order_entry(entry) for entry in order if isinstance(entry, str)]


def _normalize_order_entry(entry: str) -> str:
    normalized = entry.replace("\\", "/").strip()
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.strip("/")


def _default_sort_key(node: TreeNode) -> tuple:
    return (0 if node["type"] == "directory" else 1, node["name"].lower(), node["name"])


def _sort_nodes(nodes: List[TreeNode], ordering: Optional[List[str]]) -> List[TreeNode]:
    if not ordering:
        return sorted(nodes, key=_default_sort_key)
    positions = {path: index for index, path in enumerate(ordering)}

    def key(node: TreeNode) -> tuple:
        index = positions.get(node["path"])
        if index is not None:
            return (0, index)
        return (1, *_default_sort_key(node))

    return sorted(nodes, key=key)


def build_tree(
    root: Path,
    *,
    extension: str = ".md",
    ordering: Optional[List[str]] = None,
    _relative: PurePosixPath = PurePosixPath(),
) -> List[TreeNode]:
    """
    Recursively list directories and note files under ``root``.

    Symlinks are skipped. Any read error raises IOFailure; partial listings
    are never returned.
    """
    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        raise IOFailure(f"Failed to read notes directory: {exc.strerror or exc}") from exc

    nodes: List[TreeNode] = []
    for entry in entries:
        relative = (_relative / entry.name).as_posix()
        if entry.is_symlink():
            continue
        if entry.is_dir():
            nodes.append(
                {
                    "name": entry.name,
                    "path": relative,
                    "type": "directory",
                    "children": build_tree(
                        entry,
                        extension=extension,
                        ordering=ordering,
                        _relative=_relative / entry.name,
                    ),
                }
            )
        elif entry.is_file() and entry.name.endswith(extension):
            nodes.append({"name": entry.name, "path": relative, "type": "file"})
    return _sort_nodes(nodes, ordering)


def iter_files(tree: List[TreeNode]) -> Iterator[TreeNode]:
    """Yield file nodes of a listing in display order."""
    for node in tree:
        if node["type"] == "directory":
            yield from iter_files(node.get("children") or [])
        else:
            yield node


@contextmanager
def _filesystem_errors(action: str, path: str) -> Iterator[None]:
    try:
        yield
    except NoteServiceError:
        raise
    except FileNotFoundError as exc:
        raise NotFound(f"Path not found: {path}") from exc
    except FileExistsError as exc:
        raise AlreadyExists(f"File already exists: {path}") from exc
    except PermissionError as exc:
        raise IOFailure("Permission denied", detail={"path": path}) from exc
    except OSError as exc:
        raise IOFailure(
            f"Failed to {action}: {exc.strerror or exc}", detail={"path": path}
        ) from exc


class NoteRepository:
    """
    Single entry point for reading and mutating notes on disk.

    Every operation validates its paths against the notes root before touching
    the filesystem and notifies subscribers once the mutation has succeeded.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or get_config()
        self.config.notes_root.mkdir(parents=True, exist_ok=True)
        self.root = self.config.notes_root.resolve()
        self.extension = self.config.note_extension
        self.protected_paths = {self.root}
        self._listeners: List[NoteListener] = []

    # ------------------------------------------------------------------ events

    def subscribe(self, listener: NoteListener) -> Callable[[], None]:
        """Register ``listener`` for change events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: str, path: str, new_path: Optional[str] = None) -> None:
        event = NoteEvent(kind=kind, path=path, new_path=new_path)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener failed for %s event on %s", kind, path)

    # ------------------------------------------------------------------- paths

    def resolve(self, relative_path: str) -> Path:
        return resolve_relative_path(self.root, relative_path)

    def relative(self, absolute_path: Path) -> str:
        return absolute_path.relative_to(self.root).as_posix()

    def _resolve_note(self, relative_path: str) -> Path:
        absolute_path = self.resolve(relative_path)
        if not absolute_path.name.endswith(self.extension):
            raise InvalidPath(
                f"Invalid file path: notes must end with {self.extension}",
                detail={"path": relative_path},
            )
        if absolute_path.is_symlink() and not absolute_path.resolve().is_relative_to(self.root):
            raise InvalidPath(
                "Invalid file path: link points outside the notes root",
                detail={"path": relative_path},
            )
        return absolute_path

    # ------------------------------------------------------------------- reads

    def list(self) -> List[TreeNode]:
        """Walk the notes root and return the ordered listing."""
        ordering = load_ordering(self.root, self.config.ordering_file)
        return build_tree(self.root, extension=self.extension, ordering=ordering)

    def get(self, relative_path: str) -> str:
        absolute_path = self._resolve_note(relative_path)
        if not absolute_path.is_file():
            raise NotFound(f"Note not found: {relative_path}")
        with _filesystem_errors("read note", relative_path):
            try:
                return absolute_path.read_text(encoding="utf-8")
            except UnicodeDecodeError as exc:
                raise IOFailure(f"Note is not valid UTF-8: {relative_path}") from exc

    # ---------------------------------------------------------------- mutations

    def create(self, filename: str) -> str:
        """Create an empty note at the root; never truncates an existing file."""
        name = sanitize_filename(filename, self.extension)
        absolute_path = self.resolve(name)
        with _filesystem_errors("create note", name):
            try:
                with open(absolute_path, "x", encoding="utf-8"):
                    pass
            except FileExistsError as exc:
                raise AlreadyExists("File already exists", detail={"filename": name}) from exc
        logger.info("Created note %s", name)
        self._emit("created", name)
        return name

    def put(self, relative_path: str, content: str) -> None:
        """Overwrite a note, creating it when its parent folder already exists."""
        absolute_path = self._resolve_note(relative_path)
        if absolute_path.is_dir():
            raise InvalidPath(f"Path names a folder: {relative_path}")
        if not absolute_path.parent.is_dir():
            raise NotFound("Parent directory not found", detail={"path": relative_path})
        with _filesystem_errors("save note", relative_path):
            absolute_path.write_text(content, encoding="utf-8")
        self._emit("updated", self.relative(absolute_path))

    def append(self, relative_path: str, content: str) -> None:
        """Append a newline and ``content`` to an existing note."""
        absolute_path = self._resolve_note(relative_path)
        if not absolute_path.is_file():
            raise NotFound(f"Note not found: {relative_path}")
        with _filesystem_errors("append to note", relative_path):
            with open(absolute_path, "a", encoding="utf-8") as handle:
                handle.write("\n" + content)
        self._emit("updated", self.relative(absolute_path))

    def rename(self, old_path: str, new_path: str) -> str:
        """Rename a note or folder; returns the new relative path."""
        source = self.resolve(old_path)
        destination = self.resolve(new_path)
        if source in self.protected_paths:
            raise ProtectedResource("Cannot rename protected system folder")
        if not os.path.lexists(source):
            raise NotFound(f"File not found: {old_path}")
        if os.path.lexists(destination):
            raise AlreadyExists(f"File already exists: {new_path}")
        if destination.is_relative_to(source):
            raise InvalidInput("Cannot move a folder inside itself")
        if not destination.parent.is_dir():
            raise NotFound("Destination folder not found", detail={"path": new_path})
        if not source.is_dir() and not (
            source.name.endswith(self.extension) and destination.name.endswith(self.extension)
        ):
            raise InvalidPath(
                f"Invalid file path: notes must end with {self.extension}",
                detail={"old_path": old_path, "new_path": new_path},
            )

        old_relative, new_relative = self.relative(source), self.relative(destination)
        with _filesystem_errors("rename", old_path):
            os.rename(source, destination)
        logger.info("Renamed %s -> %s", old_relative, new_relative)
        self._emit("renamed", old_relative, new_relative)
        return new_relative

    def move(self, source_path: str, target_folder: str) -> str:
        """Move a note into ``target_folder`` keeping its file name."""
        source = self._resolve_note(source_path)
        if not source.is_file():
            raise NotFound(f"Source file not found: {source_path}")
        if isinstance(target_folder, str) and target_folder.strip() in ("", "/"):
            target = self.root
        else:
            target = self.resolve(target_folder)
        if not target.is_dir():
            raise NotFound(f"Target folder not found: {target_folder}")
        if source.parent == target:
            raise InvalidInput("Note is already in the target folder")
        destination = target / source.name
        if os.path.lexists(destination):
            raise AlreadyExists(f"A file named {source.name} already exists in the target folder")

        old_relative, new_relative = self.relative(source), self.relative(destination)
        with _filesystem_errors("move note", source_path):
            os.rename(source, destination)
        logger.info("Moved %s -> %s", old_relative, new_relative)
        self._emit("moved", old_relative, new_relative)
        return new_relative

    def delete(self, relative_path: str) -> str:
        """
        Delete a note or a folder with everything beneath it.

        Returns ``"file"`` or ``"directory"``. There is no rollback: a failure
        halfway through a folder leaves whatever was not yet removed.
        """
        absolute_path = self.resolve(relative_path)
        if absolute_path in self.protected_paths:
            raise ProtectedResource("Cannot delete protected system folder")
        if not os.path.lexists(absolute_path):
            raise NotFound(f"Path not found: {relative_path}")

        relative = self.relative(absolute_path)
        with _filesystem_errors("delete", relative_path):
            if absolute_path.is_dir() and not absolute_path.is_symlink():
                logger.info("Deleting directory: %s", absolute_path)
                shutil.rmtree(absolute_path)
                kind = "directory"
            else:
                logger.info("Deleting file: %s", absolute_path)
                absolute_path.unlink()
                kind = "file"
        self._emit("deleted", relative)
        return kind


__all__ = [
    "NoteRepository",
    "NoteEvent",
    "TreeNode",
    "build_tree",
    "iter_files",
    "load_ordering",
    "resolve_relative_path",
    "sanitize_filename",
]
