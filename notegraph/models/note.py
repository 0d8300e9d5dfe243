"""Note-related Pydantic models."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class TreeNode(BaseModel):
    """One entry of the tree listing."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "projects",
                "path": "projects",
                "type": "directory",
                "children": [
                    {"name": "roadmap.md", "path": "projects/roadmap.md", "type": "file"}
                ],
            }
        }
    )

    name: str = Field(..., description="File or folder name")
    path: str = Field(..., description="Path relative to the notes root")
    type: Literal["file", "directory"]
    children: Optional[List["TreeNode"]] = Field(
        None, description="Child entries (directories only)"
    )


class NoteContent(BaseModel):
    content: str


class NoteCreate(BaseModel):
    """Request payload to create an empty note at the notes root."""

    filename: StrictStr = Field(..., max_length=255)


class NoteCreated(BaseModel):
    message: str
    filename: str


class NoteUpdate(BaseModel):
    """Request payload to overwrite or append to a note."""

    filename: StrictStr = Field(..., description="Path relative to the notes root")
    content: StrictStr = Field(..., max_length=1_048_576)
    action: Literal["append", "overwrite"] = "overwrite"


class NoteRename(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_path: StrictStr = Field(..., alias="oldPath")
    new_path: StrictStr = Field(..., alias="newPath")


class NoteDelete(BaseModel):
    path: StrictStr


class NoteMove(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_path: StrictStr = Field(..., alias="sourcePath")
    target_folder: StrictStr = Field(..., alias="targetFolder")


class MessageResponse(BaseModel):
    message: str


class MoveResponse(BaseModel):
    message: str
    tree: List[TreeNode]


TreeNode.model_rebuild()

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
]
