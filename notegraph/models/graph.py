"""Graph data models."""

from typing import List
from pydantic import BaseModel, Field

class Position(BaseModel):
    x: float
    y: float

class NodeData(BaseModel):
    label: str = Field(..., description="Display title of the note")

class GraphNode(BaseModel):
    """Represents a single note in the graph."""
    id: str = Field(..., description="Unique identifier (Note Path)")
    type: str = Field(default="default", description="Renderer node type")
    position: Position
    data: NodeData

class GraphEdge(BaseModel):
    """Placeholder connection between two notes."""
    id: str
    source: str = Field(..., description="ID of the source note")
    target: str = Field(..., description="ID of the target note")

class GraphData(BaseModel):
    """The top-level payload returned by the API."""
    nodes: List[GraphNode]
    edges: List[GraphEdge]
