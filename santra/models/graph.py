"""Graph data models."""

from typing import List, Optional

from pydantic import BaseModel, Field


class GraphNode(BaseModel):
    """Represents a single idea in the graph."""
    id: str = Field(..., description="Idea identifier")
    title: str = Field(..., description="Display title of the idea")
    connections: List[str] = Field(default_factory=list, description="Raw connection references")
    x: float = Field(default=0.0, description="Horizontal position")
    y: float = Field(default=0.0, description="Vertical position")
    fx: Optional[float] = Field(default=None, description="Pinned x while dragged")
    fy: Optional[float] = Field(default=None, description="Pinned y while dragged")

class GraphLink(BaseModel):
    """Represents a resolved, undirected connection between two ideas."""
    source: str = Field(..., description="ID of the idea holding the reference")
    target: str = Field(..., description="ID of the resolved idea")

class GraphData(BaseModel):
    """The top-level payload returned by the API."""
    nodes: List[GraphNode] = Field(default_factory=list)
    links: List[GraphLink] = Field(default_factory=list)
