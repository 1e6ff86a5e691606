"""Frontmatter codec for idea files.

Idea files carry a flat ``key: value`` header between two ``---`` lines. Values
are deliberately simple so the header stays readable and diff-friendly:

- strings are double-quoted (JSON escaping keeps quotes and newlines on one line),
- lists are JSON arrays,
- anything else is written bare.

The format is implemented as a python-frontmatter handler so posts are still
serialized through ``frontmatter.dumps``; decoding goes through the handler's
``detect``/``split``/``load`` so a missing header is reported as ``None`` instead
of silently becoming empty metadata.
"""

from __future__ import annotations

from datetime import date, datetime
import json
import re
from typing import Any, Dict, Mapping, NamedTuple, Optional

import frontmatter
from frontmatter.default_handlers import BaseHandler

DELIMITER = "---"
FM_BOUNDARY = re.compile(r"^---[ \t]*$", re.MULTILINE)
KEY_SEPARATOR = ": "


class DecodedIdea(NamedTuple):
    metadata: Dict[str, Any]
    body: str


def format_value(value: Any) -> str:
    """Render a single metadata value for the header."""
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), ensure_ascii=False, default=str)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def parse_value(raw: str) -> Any:
    """Interpret a raw header value; never raises."""
    value = raw.strip()
    if len(value) >= 2 and value.startswith("[") and value.endswith("]"):
        try:
            parsed = json.loads(value)
        except ValueError:
            return []
        return parsed if isinstance(parsed, list) else []
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        try:
            parsed = json.loads(value)
        except ValueError:
            return value[1:-1]
        return parsed if isinstance(parsed, str) else value[1:-1]
    return value


class IdeaFrontmatterHandler(BaseHandler):
    """python-frontmatter handler for the flat idea header."""

    FM_BOUNDARY = FM_BOUNDARY
    START_DELIMITER = DELIMITER
    END_DELIMITER = DELIMITER

    def split(self, text: str) -> tuple[str, str]:
        parts = self.FM_BOUNDARY.split(text, maxsplit=2)
        if len(parts) < 3:
            raise ValueError("Frontmatter is missing its closing delimiter")
        return parts[1], parts[2]

    def load(self, fm: str, **kwargs: Any) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {}
        # Values may hold U+2028, U+2029 or U+0085; only "\n" ends a header line.
        for line in fm.split("\n"):
            key, sep, raw = line.partition(KEY_SEPARATOR)
            key = key.strip()
            if not sep or not key:
                continue
            metadata[key] = parse_value(raw)
        return metadata

    def export(self, metadata: Mapping[str, Any], **kwargs: Any) -> str:
        return "\n".join(
            f"{key}{KEY_SEPARATOR}{format_value(value)}"
            for key, value in metadata.items()
            if value is not None
        )


HANDLER = IdeaFrontmatterHandler()


def encode(metadata: Mapping[str, Any], body: str) -> str:
    """Serialize metadata and body into the text stored on disk."""
    post = frontmatter.Post(body or "", handler=HANDLER)
    post.metadata.update(metadata)
    return frontmatter.dumps(post, handler=HANDLER) + "\n"


def decode(text: str) -> Optional[DecodedIdea]:
    """Parse stored text; returns None when there is no complete header."""
    if not text or not HANDLER.detect(text):
        return None
    try:
        fm, content = HANDLER.split(text)
    except ValueError:
        return None
    return DecodedIdea(metadata=HANDLER.load(fm), body=content.strip())


__all__ = [
    "DecodedIdea",
    "IdeaFrontmatterHandler",
    "HANDLER",
    "encode",
    "decode",
    "format_value",
    "parse_value",
]
