"""Client for the LLM refinement service."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional
import uuid

import httpx
from pydantic import ValidationError

from ..models.idea import IdeaPayload
from .config import AppConfig, get_config
from .errors import IdeaValidationError, ServiceError
from .prompt_loader import PromptLoader, PromptLoaderError

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = "refine_idea.md"
CONTEXT_EXCERPT_CHARS = 200
MAX_TITLE_LENGTH = 60
CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)
RESERVED_KEYS = {"id", "title", "refined", "tags", "connections", "created", "modified", "original", "source"}
EXTRA_KEY_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")


def truncate_text(text: str, max_length: int = MAX_TITLE_LENGTH) -> str:
    """Collapse whitespace and cut to max_length, marking the cut with '...'."""
    flat = " ".join(text.split())
    if len(flat) <= max_length:
        return flat
    return flat[: max_length - 3].rstrip() + "..."


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def context_entry(record: Any) -> Dict[str, Any]:
    """Reduce a stored idea to the short form embedded in the prompt."""
    body = _field(record, "content") or _field(record, "refined") or ""
    flat = " ".join(str(body).split())
    return {
        "title": _field(record, "title", ""),
        "tags": list(_field(record, "tags") or []),
        "excerpt": flat[:CONTEXT_EXCERPT_CHARS],
    }


def _strip_code_fence(content: str) -> str:
    match = CODE_FENCE_PATTERN.match(content.strip())
    return match.group(1) if match else content


def _reply_items(parsed: Any) -> List[Any]:
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        ideas = parsed.get("ideas")
        if isinstance(ideas, list) and "refined" not in parsed:
            return ideas
        return [parsed]
    raise ServiceError("Refinement reply is neither an object nor an array")


class IdeaRefiner:
    """Send raw ideas to an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        config: AppConfig | None = None,
        prompt_loader: PromptLoader | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            config: Application config; defaults to the cached environment config.
            prompt_loader: Loader for the refinement prompt template.
            transport: Optional httpx transport (tests pass an httpx.MockTransport).
        """
        self.config = config or get_config()
        self.prompt_loader = prompt_loader or PromptLoader()
        self._transport = transport

    def build_prompt(self, raw_text: str, context_records: Iterable[Any] = ()) -> str:
        """Combine the instruction, the existing-idea context and the raw text."""
        try:
            return self.prompt_loader.load(
                PROMPT_TEMPLATE,
                {
                    "raw_idea": raw_text.strip(),
                    "context_ideas": [context_entry(record) for record in context_records],
                },
            )
        except PromptLoaderError as exc:
            raise ServiceError(f"Refinement prompt unavailable: {exc}") from exc

    async def refine(
        self,
        raw_text: str,
        context_records: Iterable[Any] = (),
        source: str = "api",
    ) -> List[IdeaPayload]:
        """
        Refine raw text into one or more unsaved idea payloads.

        Raises:
            IdeaValidationError: raw_text is blank or no API key is configured.
            ServiceError: the request failed or the reply could not be parsed.
        """
        if not isinstance(raw_text, str) or not raw_text.strip():
            raise IdeaValidationError("Idea text required")
        if not self.config.llm_api_key:
            raise IdeaValidationError("LLM_API_KEY is not configured")

        prompt = self.build_prompt(raw_text, context_records)
        request_body = {
            "model": self.config.llm_model,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": {"type": "json_object"},
        }
        headers = {"Authorization": f"Bearer {self.config.llm_api_key}"}
        url = f"{self.config.llm_api_base}/chat/completions"

        logger.debug("Requesting refinement from %s (model=%s)", url, self.config.llm_model)
        try:
            async with httpx.AsyncClient(
                timeout=self.config.llm_timeout_seconds, transport=self._transport
            ) as client:
                response = await client.post(url, headers=headers, json=request_body)
        except httpx.HTTPError as exc:
            logger.error("Refinement request to %s failed: %s", url, exc)
            raise ServiceError("Refinement service request failed") from exc

        if not response.is_success:
            logger.error(
                "Refinement service returned HTTP %s: %s",
                response.status_code,
                response.text[:500],
            )
            raise ServiceError(f"Refinement service returned HTTP {response.status_code}")

        try:
            envelope = response.json()
        except ValueError as exc:
            logger.error("Refinement envelope is not JSON: %s", response.text[:500])
            raise ServiceError("Refinement service returned a malformed envelope") from exc

        return self.parse_reply(envelope, raw_text, source)

    def parse_reply(self, envelope: Any, raw_text: str, source: str = "api") -> List[IdeaPayload]:
        """Turn a chat completions envelope into normalized payloads."""
        try:
            content = envelope["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            logger.error("Refinement envelope has no message content: %s", envelope)
            raise ServiceError("Refinement reply has no message content") from exc
        if not isinstance(content, str):
            raise ServiceError("Refinement reply content is not text")

        try:
            parsed = json.loads(_strip_code_fence(content))
        except ValueError as exc:
            logger.error("Refinement reply is not valid JSON: %s", content[:500])
            raise ServiceError("Refinement reply is not valid JSON") from exc

        items = _reply_items(parsed)
        if not items:
            raise ServiceError("Refinement reply contained no ideas")
        return [self._normalize_item(item, raw_text, source) for item in items]

    def _normalize_item(self, item: Any, raw_text: str, source: str) -> IdeaPayload:
        if not isinstance(item, dict):
            raise ServiceError("Refinement reply item is not an object")
        refined = item.get("refined")
        if not isinstance(refined, str) or not refined.strip():
            logger.error("Refinement reply item lacks 'refined': %s", item)
            raise ServiceError("Refinement reply item is missing 'refined'")

        title = item.get("title")
        if not isinstance(title, str) or not title.strip():
            title = truncate_text(refined)

        # Ids are always minted here so a reply can never name an existing idea.
        data = {
            key: value
            for key, value in item.items()
            if key not in RESERVED_KEYS and EXTRA_KEY_PATTERN.fullmatch(key)
        }
        data.update(
            id=str(uuid.uuid4()),
            title=title.strip(),
            refined=refined.strip(),
            tags=item.get("tags"),
            connections=item.get("connections"),
            created=item.get("created") or datetime.now(timezone.utc).isoformat(timespec="seconds"),
            original=item.get("original") or raw_text,
            source=item.get("source") or source,
        )
        try:
            return IdeaPayload.model_validate(data)
        except ValidationError as exc:
            raise ServiceError(f"Refinement reply item is malformed: {exc}") from exc


__all__ = ["IdeaRefiner", "truncate_text", "context_entry", "CONTEXT_EXCERPT_CHARS"]
