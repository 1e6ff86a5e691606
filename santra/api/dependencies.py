"""Request-scoped service factories (overridable in tests)."""

from __future__ import annotations

from ..services.idea_service import IdeaService
from ..services.idea_store import IdeaStore


def get_idea_store() -> IdeaStore:
    return IdeaStore()


def get_idea_service() -> IdeaService:
    return IdeaService()


__all__ = ["get_idea_store", "get_idea_service"]
