"""FastAPI application main entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

load_dotenv()

from .middleware import register_error_handlers  # noqa: E402
from .routes import graph, ideas, system  # noqa: E402
from ..services.config import get_config  # noqa: E402

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parents[1] / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log where ideas are read from; the directory is created on first save."""
    config = get_config()
    logger.info("Idea store: %s", config.ideas_path)
    if not config.llm_api_key:
        logger.warning("LLM_API_KEY is not set; idea submission will be rejected")
    yield


app = FastAPI(
    title="Santra AI Server",
    description="Capture, refine and connect ideas",
    version="0.1.0",
    lifespan=lifespan,
)

config = get_config()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(system.router, tags=["system"])
app.include_router(ideas.router, tags=["ideas"])
app.include_router(graph.router, tags=["graph"])

if STATIC_DIR.is_dir():
    app.mount("/app", StaticFiles(directory=str(STATIC_DIR), html=True), name="app")
else:
    logger.warning("Frontend not found at: %s", STATIC_DIR)


__all__ = ["app"]
