"""HTTP API routes for idea submission and retrieval."""

from __future__ import annotations

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from ...logging_config import SUCCESS
from ...models.idea import IdeaSummary, ProcessIdeaRequest, ProcessIdeaResponse
from ...services.idea_service import IdeaService
from ...services.idea_store import IdeaStore
from ..dependencies import get_idea_service, get_idea_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/process-idea", response_model=None)
async def process_idea(
    request: ProcessIdeaRequest,
    service: Annotated[IdeaService, Depends(get_idea_service)],
):
    """Refine a raw idea and store the result(s)."""
    idea = request.idea
    if not idea.strip():
        logger.warning("No idea provided in request")
        raise HTTPException(status_code=400, detail="Idea text required")

    logger.info("Processing idea: %s...", idea[:50])
    saved = await service.process(idea, source="api")
    logger.log(SUCCESS, "Idea processed successfully")

    if len(saved) == 1:
        return saved[0].model_dump(exclude_none=True)
    return ProcessIdeaResponse(ideas=saved, count=len(saved)).model_dump(exclude_none=True)


@router.get("/list-ideas", response_model=List[IdeaSummary])
async def list_ideas(store: Annotated[IdeaStore, Depends(get_idea_store)]) -> List[IdeaSummary]:
    """List all stored ideas, newest first."""
    return store.list_all()


@router.get("/idea/{idea_id}", response_class=PlainTextResponse)
async def get_idea(idea_id: str, store: Annotated[IdeaStore, Depends(get_idea_store)]):
    """Return the raw markdown of an idea."""
    return PlainTextResponse(store.read_raw(idea_id), media_type="text/markdown; charset=utf-8")
