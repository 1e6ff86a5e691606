"""Filesystem idea store: one markdown file per idea."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import os
from pathlib import Path
import re
import tempfile
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from ..models.idea import Idea, IdeaMetadata, IdeaPayload, IdeaSummary
from . import frontmatter_codec
from .config import AppConfig, get_config
from .errors import IdeaNotFoundError, IdeaValidationError, StorageError

logger = logging.getLogger(__name__)

IDEA_SUFFIX = ".md"
ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,127}$")
H1_PATTERN = re.compile(r"^\s*#\s+(.+)$", re.MULTILINE)
RELATED_HEADING = "## Related Ideas"
METADATA_ORDER = ("id", "title", "tags", "connections", "created", "modified", "original", "source")


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def validate_idea_id(idea_id: str) -> str:
    """
    Validate an idea identifier used as a file stem.

    Raises IdeaValidationError for ids that could escape the idea directory.
    """
    if not isinstance(idea_id, str) or not ID_PATTERN.match(idea_id) or ".." in idea_id:
        raise IdeaValidationError(f"Invalid idea id: {idea_id!r}")
    return idea_id


def _derive_title(idea_id: str, metadata: Mapping[str, Any], body: str) -> str:
    title = metadata.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    match = H1_PATTERN.search(body or "")
    if match:
        return match.group(1).strip()
    return idea_id.replace("-", " ").replace("_", " ").strip() or idea_id


def with_related_section(body: str, connections: List[str]) -> str:
    """Append a Related Ideas section of [[back-references]] if one is missing."""
    if not connections or RELATED_HEADING in body:
        return body
    lines = [f"- [[{connection}]]" for connection in connections]
    return f"{body.rstrip()}\n\n{RELATED_HEADING}\n\n" + "\n".join(lines)


def _ordered_metadata(metadata: Dict[str, Any]) -> Dict[str, Any]:
    ordered = {key: metadata[key] for key in METADATA_ORDER if key in metadata}
    ordered.update({key: value for key, value in metadata.items() if key not in ordered})
    return ordered


class IdeaStore:
    """Read and write idea records under a single directory."""

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or get_config()
        self.ideas_dir = self.config.ideas_path

    def path_for(self, idea_id: str) -> Path:
        return self.ideas_dir / f"{validate_idea_id(idea_id)}{IDEA_SUFFIX}"

    def _idea_files(self) -> List[Path]:
        if not self.ideas_dir.is_dir():
            return []
        try:
            return sorted(p for p in self.ideas_dir.glob(f"*{IDEA_SUFFIX}") if p.is_file())
        except OSError as exc:
            raise StorageError(f"Cannot list ideas in {self.ideas_dir}: {exc}") from exc

    def _parse_file(self, file_path: Path) -> Optional[Idea]:
        """Decode one file for bulk reads; None means skip it."""
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable idea file %s: %s", file_path.name, exc)
            return None
        decoded = frontmatter_codec.decode(text)
        if decoded is None:
            logger.warning("Skipping idea file without frontmatter: %s", file_path.name)
            return None
        try:
            return self._build_idea(file_path.stem, decoded.metadata, decoded.body)
        except ValidationError as exc:
            logger.warning("Skipping idea file with invalid metadata %s: %s", file_path.name, exc)
            return None

    def _build_idea(self, stem: str, metadata: Dict[str, Any], body: str) -> Idea:
        data = dict(metadata)
        if data.get("id") not in (None, stem):
            logger.warning("Idea file %s declares id %r; using the file name", stem, data["id"])
        data["id"] = stem
        data["title"] = _derive_title(stem, data, body)
        data["content"] = body
        return Idea.model_validate(data)

    def list_all(self) -> List[IdeaSummary]:
        """List idea summaries, newest first, skipping files that fail to decode."""
        summaries = [
            IdeaSummary(
                id=idea.id,
                title=idea.title,
                tags=idea.tags,
                connections=idea.connections,
                created=idea.created,
            )
            for idea in self.load_all_full()
        ]
        return summaries

    def load_all_full(self) -> List[Idea]:
        """Load every decodable idea with its body, newest first."""
        ideas = [idea for idea in map(self._parse_file, self._idea_files()) if idea is not None]
        ideas.sort(key=lambda idea: idea.id)
        ideas.sort(key=lambda idea: idea.created or "", reverse=True)
        return ideas

    def read_raw(self, idea_id: str) -> str:
        """Return the stored markdown text of an idea."""
        try:
            file_path = self.path_for(idea_id)
        except IdeaValidationError as exc:
            raise IdeaNotFoundError(f"Idea not found: {idea_id}") from exc
        if not file_path.exists():
            raise IdeaNotFoundError(f"Idea not found: {idea_id}")
        try:
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Cannot read idea {idea_id}: {exc}") from exc

    def load_one(self, idea_id: str) -> Idea:
        """Load a full idea record; files without frontmatter load as plain bodies."""
        text = self.read_raw(idea_id)
        decoded = frontmatter_codec.decode(text)
        if decoded is None:
            return self._build_idea(idea_id, {}, text.strip())
        try:
            return self._build_idea(idea_id, decoded.metadata, decoded.body)
        except ValidationError as exc:
            raise StorageError(f"Stored metadata for {idea_id} is invalid: {exc}") from exc

    def save(self, payload: Union[IdeaPayload, Mapping[str, Any]]) -> str:
        """
        Persist a refined idea and return its storage key (the file name).

        Raises IdeaValidationError before touching the disk when id, title or
        body is missing, and StorageError when the write fails.
        """
        data = payload.model_dump() if isinstance(payload, IdeaPayload) else dict(payload)
        body = data.pop("refined", None) or data.pop("content", None) or ""
        data.pop("content", None)

        missing = [
            name
            for name, value in (("id", data.get("id")), ("title", data.get("title")), ("refined", body))
            if not isinstance(value, str) or not value.strip()
        ]
        if missing:
            raise IdeaValidationError(f"Idea is missing required fields: {', '.join(missing)}")

        file_path = self.path_for(data["id"])
        try:
            metadata = IdeaMetadata.model_validate(data).model_dump()
        except ValidationError as exc:
            raise IdeaValidationError(f"Invalid idea metadata: {exc}") from exc

        existing_created = self._existing_created(file_path)
        now_iso = _utcnow_iso()
        if existing_created:
            metadata["created"] = existing_created
            metadata["modified"] = now_iso
        else:
            metadata["created"] = metadata.get("created") or now_iso

        text = frontmatter_codec.encode(
            _ordered_metadata(metadata),
            with_related_section(body.strip(), metadata["connections"]),
        )
        self._atomic_write(file_path, text)
        logger.info("Saved idea %s (%s)", metadata["id"], metadata["title"])
        return file_path.name

    def _existing_created(self, file_path: Path) -> Optional[str]:
        if not file_path.exists():
            return None
        try:
            decoded = frontmatter_codec.decode(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError):
            return None
        if decoded is None:
            return None
        created = decoded.metadata.get("created")
        return created if isinstance(created, str) and created else None

    def _atomic_write(self, file_path: Path, text: str) -> None:
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=file_path.parent, prefix=".idea-", suffix=".tmp")
        except OSError as exc:
            raise StorageError(f"Cannot write idea {file_path.name}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_path, file_path)
        except OSError as exc:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Cannot write idea {file_path.name}: {exc}") from exc


__all__ = ["IdeaStore", "validate_idea_id", "with_related_section", "RELATED_HEADING"]
