"""Service banner and health check."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Santra AI Server"


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
