"""Submission pipeline: refine raw text, then persist each resulting idea."""

from __future__ import annotations

import logging
from typing import List

from ..logging_config import SUCCESS
from ..models.graph import GraphData
from ..models.idea import IdeaPayload
from .connections import resolve
from .errors import IdeaValidationError, StorageError
from .graph_renderer import RenderContext
from .idea_store import IdeaStore
from .refiner import IdeaRefiner

logger = logging.getLogger(__name__)


class IdeaService:
    """Glue between the refinement client, the store and the graph builder."""

    def __init__(self, store: IdeaStore | None = None, refiner: IdeaRefiner | None = None) -> None:
        self.store = store or IdeaStore()
        self.refiner = refiner or IdeaRefiner(config=self.store.config)

    async def process(self, raw_text: str, source: str = "api") -> List[IdeaPayload]:
        """
        Refine raw text and save every resulting idea independently.

        A failed save is logged and skipped; StorageError is raised only when
        no idea could be saved.
        """
        context = self.store.load_all_full()
        payloads = await self.refiner.refine(raw_text, context, source=source)

        saved: List[IdeaPayload] = []
        for payload in payloads:
            try:
                self.store.save(payload)
            except (IdeaValidationError, StorageError) as exc:
                logger.error("Failed to save idea %s: %s", payload.id, exc)
                continue
            except Exception:
                logger.exception("Unexpected error saving idea %s", payload.id)
                continue
            saved.append(payload)

        if not saved:
            raise StorageError(f"None of the {len(payloads)} refined idea(s) could be saved")
        logger.log(SUCCESS, "Saved %d of %d refined idea(s)", len(saved), len(payloads))
        return saved

    def build_graph(self) -> GraphData:
        """Resolve connections between all stored ideas (seed positions only)."""
        return resolve(self.store.list_all())

    def render_graph(self, context: RenderContext | None = None) -> RenderContext:
        """Resolve and lay out the current collection into a render context."""
        context = context or RenderContext()
        context.render(self.build_graph())
        return context


__all__ = ["IdeaService"]
