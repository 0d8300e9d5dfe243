"""HTTP API routes for note tree operations."""

from __future__ import annotations

from typing import Annotated, List

from fastapi import APIRouter, Depends, Query

from ...models.note import (
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
from ...services.vault import NoteRepository
from ..dependencies import get_repository

router = APIRouter()

Repository = Annotated[NoteRepository, Depends(get_repository)]


@router.get("/api/notes", response_model=List[TreeNode], response_model_exclude_none=True)
async def list_notes(repository: Repository):
    """Return the full tree listing of the notes root."""
    return repository.list()


@router.get("/api/notes/content", response_model=NoteContent)
async def get_note_content(
    repository: Repository,
    path: str = Query(..., description="Note path relative to the notes root"),
):
    """Return the raw Markdown of a note."""
    return NoteContent(content=repository.get(path))


@router.post("/api/notes/create", response_model=NoteCreated, status_code=201)
async def create_note(create: NoteCreate, repository: Repository):
    """Create an empty note; fails with 409 rather than truncating."""
    filename = repository.create(create.filename)
    return NoteCreated(message="Note created successfully", filename=filename)


@router.post("/api/notes/update", response_model=MessageResponse)
async def update_note(update: NoteUpdate, repository: Repository):
    """Overwrite a note or append a new line of content to it."""
    if update.action == "append":
        repository.append(update.filename, update.content)
        return MessageResponse(message="Content appended successfully")
    repository.put(update.filename, update.content)
    return MessageResponse(message="Note saved successfully")


@router.post("/api/notes/rename", response_model=MessageResponse)
async def rename_note(rename: NoteRename, repository: Repository):
    repository.rename(rename.old_path, rename.new_path)
    return MessageResponse(message="Note renamed successfully")


@router.post("/api/notes/delete", response_model=MessageResponse)
async def delete_note(delete: NoteDelete, repository: Repository):
    """Delete a note, or a folder together with everything under it."""
    kind = repository.delete(delete.path)
    if kind == "directory":
        return MessageResponse(message="Folder deleted successfully")
    return MessageResponse(message="Note deleted successfully")


@router.post("/api/notes/move", response_model=MoveResponse, response_model_exclude_none=True)
async def move_note(move: NoteMove, repository: Repository):
    """Move a note into another folder and return the rebuilt tree."""
    repository.move(move.source_path, move.target_folder)
    return {"message": "Note moved successfully", "tree": repository.list()}


__all__ = ["router"]
