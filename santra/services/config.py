"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_IDEAS_PATH = PROJECT_ROOT / "ideas"
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class AppConfig(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    llm_api_key: Optional[str] = Field(
        default=None,
        description="Credential for the refinement service (checked at refinement time)",
    )
    llm_api_base: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the OpenAI-compatible chat completions API",
    )
    llm_model: str = Field(default="gpt-4o-mini", description="Model identifier sent with each request")
    llm_timeout_seconds: float = Field(default=60.0, gt=0, description="Upstream request timeout")
    ideas_path: Path = Field(..., description="Directory holding one markdown file per idea")
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = Field(default="INFO")

    @field_validator("ideas_path", mode="before")
    @classmethod
    def _normalize_ideas_path(cls, value: str | Path | None) -> Path:
        if value is None or value == "":
            raise ValueError("IDEAS_PATH is required")
        path = value if isinstance(value, Path) else Path(value)
        return path.expanduser().resolve()

    @field_validator("llm_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("llm_api_base", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return (value or "").strip().rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return (value or "INFO").strip().upper()


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration."""
    api_key = _read_env("LLM_API_KEY") or _read_env("OPENAI_API_KEY")

    return AppConfig(
        llm_api_key=api_key,
        llm_api_base=_read_env("LLM_API_BASE", "https://api.openai.com/v1"),
        llm_model=_read_env("LLM_MODEL", "gpt-4o-mini"),
        llm_timeout_seconds=float(_read_env("LLM_TIMEOUT_SECONDS", "60")),
        ideas_path=_read_env("IDEAS_PATH", str(DEFAULT_IDEAS_PATH)),
        port=int(_read_env("PORT", "3000")),
        cors_origins=_split_origins(_read_env("CORS_ORIGINS")),
        log_level=_read_env("LOG_LEVEL", "INFO"),
    )


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = ["AppConfig", "get_config", "reload_config", "PROJECT_ROOT", "DEFAULT_IDEAS_PATH"]
