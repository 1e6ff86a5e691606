"""Graph endpoints: resolved links with laid-out positions, JSON or SVG."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from ...models.graph import GraphData
from ...services.idea_service import IdeaService
from ..dependencies import get_idea_service

router = APIRouter()


@router.get("/graph", response_model=GraphData)
async def get_graph_data(
    service: Annotated[IdeaService, Depends(get_idea_service)],
) -> GraphData:
    """Nodes at their settled positions plus deduplicated links."""
    return service.render_graph().positioned_graph()


@router.get("/graph.svg")
async def get_graph_svg(
    service: Annotated[IdeaService, Depends(get_idea_service)],
    highlight: Optional[str] = Query(None, description="Idea id to highlight"),
) -> Response:
    context = service.render_graph()
    if highlight:
        context.highlight_node(highlight)
    node_count, link_count = context.summary()
    return Response(
        content=context.to_svg(),
        media_type="image/svg+xml",
        headers={"X-Node-Count": node_count, "X-Link-Count": link_count},
    )
