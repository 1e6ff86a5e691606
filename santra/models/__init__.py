"""Pydantic models for data validation and serialization."""

from .graph import GraphData, GraphLink, GraphNode
from .idea import (
    Idea,
    IdeaMetadata,
    IdeaPayload,
    IdeaSummary,
    ProcessIdeaRequest,
    ProcessIdeaResponse,
)

__all__ = [
    "Idea",
    "IdeaMetadata",
    "IdeaPayload",
    "IdeaSummary",
    "ProcessIdeaRequest",
    "ProcessIdeaResponse",
    "GraphNode",
    "GraphLink",
    "GraphData",
]
