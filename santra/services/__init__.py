"""Service layer for business logic and external integrations."""

from .config import AppConfig, get_config, reload_config
from .connections import MATCHERS, resolve, resolve_reference
from .errors import (
    IdeaNotFoundError,
    IdeaValidationError,
    SantraError,
    ServiceError,
    StorageError,
)
from .graph_layout import ForceSimulation, LayoutSettings
from .graph_renderer import RenderContext
from .idea_service import IdeaService
from .idea_store import IdeaStore, validate_idea_id
from .prompt_loader import PromptLoader, PromptLoaderError
from .refiner import IdeaRefiner

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "MATCHERS",
    "resolve",
    "resolve_reference",
    "SantraError",
    "IdeaValidationError",
    "ServiceError",
    "IdeaNotFoundError",
    "StorageError",
    "ForceSimulation",
    "LayoutSettings",
    "RenderContext",
    "IdeaService",
    "IdeaStore",
    "validate_idea_id",
    "PromptLoader",
    "PromptLoaderError",
    "IdeaRefiner",
]
