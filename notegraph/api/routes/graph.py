from fastapi import APIRouter, Depends
from typing import Annotated

from ...models.graph import GraphData
from ...services.graph import build_graph
from ...services.vault import NoteRepository
from ..dependencies import get_repository

router = APIRouter()

@router.get("/api/graph", response_model=GraphData)
async def get_graph_data(
    repository: Annotated[NoteRepository, Depends(get_repository)],
) -> GraphData:
    """Retrieve graph visualization data (random placeholder edges)."""
    return GraphData.model_validate(build_graph(repository))
