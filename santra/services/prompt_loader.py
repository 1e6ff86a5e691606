"""Jinja2-based prompt template loader for the refinement client.

Templates live in ``santra/prompts/`` and are rendered with context variables.
Templates are reloaded on every call so prompts can be edited without
restarting the server. A minimal inline prompt is kept for installs where the
prompts directory is missing.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import jinja2

logger = logging.getLogger(__name__)

# santra/services/prompt_loader.py -> santra/prompts/
DEFAULT_PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"

INLINE_PROMPTS: Dict[str, str] = {
    "refine_idea.md": """Refine the raw idea below into JSON of the shape
{"ideas": [{"title": "...", "refined": "...", "tags": ["..."], "connections": ["..."]}]}.

Existing ideas:
{% for idea in context_ideas %}- {{ idea.title }}: {{ idea.excerpt }}
{% else %}No existing ideas yet.
{% endfor %}
Raw idea:
{{ raw_idea }}
""",
}


class PromptLoaderError(Exception):
    """Raised when a prompt cannot be loaded."""

    pass


class PromptLoader:
    """Load and render Jinja2 prompt templates.

    Example:
        >>> loader = PromptLoader()
        >>> prompt = loader.load("refine_idea.md", {"raw_idea": "...", "context_ideas": []})
    """

    def __init__(self, prompts_dir: Optional[Path] = None) -> None:
        self.prompts_dir = prompts_dir or DEFAULT_PROMPTS_DIR

        if self.prompts_dir.is_dir():
            self.env = jinja2.Environment(
                loader=jinja2.FileSystemLoader(str(self.prompts_dir)),
                autoescape=False,  # Prompts are markdown, not HTML
                auto_reload=True,
                keep_trailing_newline=True,
            )
        else:
            self.env = None
            logger.warning("Prompts directory not found, using inline fallbacks: %s", self.prompts_dir)

    def load(self, path: str, context: Optional[Dict[str, Any]] = None) -> str:
        """Load and render a prompt template.

        Raises:
            PromptLoaderError: If the template cannot be found or rendered.
        """
        context = context or {}

        if self.env is not None:
            try:
                return self.env.get_template(path).render(**context)
            except jinja2.TemplateNotFound:
                logger.debug("Template %s not found on disk, trying inline fallback", path)
            except jinja2.TemplateError as e:
                logger.error("Failed to render template %s: %s", path, e)
                raise PromptLoaderError(f"Failed to render template {path}: {e}") from e

        template_str = INLINE_PROMPTS.get(path)
        if template_str is None:
            raise PromptLoaderError(
                f"Prompt not found: {path}. Available inline prompts: {list(INLINE_PROMPTS)}"
            )
        try:
            return jinja2.Template(template_str).render(**context)
        except jinja2.TemplateError as e:
            raise PromptLoaderError(f"Failed to render inline template {path}: {e}") from e


__all__ = ["PromptLoader", "PromptLoaderError", "DEFAULT_PROMPTS_DIR"]
