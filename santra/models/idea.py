"""Idea-related Pydantic models."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_string_list(value: Any) -> List[str]:
    """Coerce a frontmatter or LLM value into a list of non-empty strings."""
    if value is None or value == "":
        return []
    if isinstance(value, (str, int, float)):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    items: List[str] = []
    for item in value:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items


class IdeaMetadata(BaseModel):
    """Frontmatter metadata of an idea file (allows arbitrary keys)."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    tags: List[str] = Field(default_factory=list)
    connections: List[str] = Field(default_factory=list)
    created: Optional[str] = None
    modified: Optional[str] = None
    original: Optional[str] = None
    source: Optional[str] = None

    @field_validator("tags", "connections", mode="before")
    @classmethod
    def _ensure_list(cls, value: Any) -> List[str]:
        return _as_string_list(value)

    @field_validator("created", "modified", mode="before")
    @classmethod
    def _timestamp_text(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return str(value)


class IdeaPayload(IdeaMetadata):
    """Refinement output that has not been persisted yet."""

    refined: str = ""


class Idea(IdeaMetadata):
    """Persisted idea with its markdown body."""

    content: str = ""


class IdeaSummary(BaseModel):
    """Lightweight representation used for listings and graph building."""

    id: str
    title: str
    tags: List[str] = Field(default_factory=list)
    connections: List[str] = Field(default_factory=list)
    created: Optional[str] = None


class ProcessIdeaRequest(BaseModel):
    """Request payload for submitting a raw idea."""

    idea: str = Field(..., description="Raw idea text")


class ProcessIdeaResponse(BaseModel):
    """Response when a submission produced more than one idea."""

    ideas: List[IdeaPayload]
    count: int


__all__ = [
    "IdeaMetadata",
    "IdeaPayload",
    "Idea",
    "IdeaSummary",
    "ProcessIdeaRequest",
    "ProcessIdeaResponse",
]
