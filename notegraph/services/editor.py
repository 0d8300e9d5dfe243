"""Editor buffer and cached tree view kept in sync with the note repository."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .vault import NoteEvent, NoteRepository, TreeNode, iter_files

logger = logging.getLogger(__name__)

DISCARD_PROMPT = "You have unsaved changes. Discard them?"

ConfirmCallback = Callable[[str], bool]


def _decline(message: str) -> bool:
    return False


class EditorState:
    """
    Holds the content of one open note plus a dirty flag.

    ``confirm`` is asked before unsaved changes would be thrown away; the
    default declines, so nothing is discarded without an explicit answer.
    """

    def __init__(
        self,
        repository: NoteRepository,
        confirm: Optional[ConfirmCallback] = None,
    ) -> None:
        self.repository = repository
        self.confirm = confirm or _decline
        self.path: Optional[str] = None
        self.content = ""
        self.dirty = False
        self._unsubscribe = repository.subscribe(self._on_event)

    def close(self) -> None:
        """Stop following repository events."""
        self._unsubscribe()

    def _may_discard(self) -> bool:
        return not self.dirty or self.confirm(DISCARD_PROMPT)

    def open(self, path: str) -> bool:
        """Load ``path`` into the buffer; returns False if the user kept their edits."""
        if not self._may_discard():
            return False
        content = self.repository.get(path)
        # Events carry normalized paths; "./a.md" must match "a.md".
        normalized = self.repository.relative(self.repository.resolve(path))
        self.path, self.content, self.dirty = normalized, content, False
        return True

    def new_note(self, filename: str) -> bool:
        if not self._may_discard():
            return False
        name = self.repository.create(filename)
        self.path, self.content, self.dirty = name, "", False
        return True

    def edit(self, content: str) -> None:
        if self.path is None:
            raise RuntimeError("No note is open")
        self.content = content
        self.dirty = True

    def save(self) -> None:
        """Write the buffer; the dirty flag survives a failed save."""
        if self.path is None:
            raise RuntimeError("No note is open")
        self.repository.put(self.path, self.content)
        self.dirty = False

    def discard(self) -> None:
        if self.path is None:
            return
        self.content = self.repository.get(self.path)
        self.dirty = False

    def _on_event(self, event: NoteEvent) -> None:
        if self.path is None or not event.touches(self.path):
            return
        if event.kind in ("renamed", "moved") and event.new_path:
            self.path = event.new_path + self.path[len(event.path):]
        elif event.kind == "deleted":
            logger.info("Open note %s was deleted; closing editor", self.path)
            self.path, self.content, self.dirty = None, "", False


class TreeView:
    """Display cache of the tree listing, refetched after every change event."""

    def __init__(self, repository: NoteRepository) -> None:
        self.repository = repository
        self.tree: List[TreeNode] = []
        self.refresh()
        self._unsubscribe = repository.subscribe(self._on_event)

    def close(self) -> None:
        self._unsubscribe()

    def refresh(self) -> List[TreeNode]:
        self.tree = self.repository.list()
        return self.tree

    def paths(self) -> List[str]:
        return [node["path"] for node in iter_files(self.tree)]

    def _on_event(self, event: NoteEvent) -> None:
        self.refresh()


__all__ = ["EditorState", "TreeView", "DISCARD_PROMPT"]
