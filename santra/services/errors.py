"""Exception taxonomy shared by the idea services and the HTTP layer."""

from __future__ import annotations


class SantraError(Exception):
    """Base class for errors raised by the idea services."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


class IdeaValidationError(SantraError, ValueError):
    """Required input is missing or malformed; the caller can correct it."""


class ServiceError(SantraError):
    """The refinement service failed or replied with an unusable structure."""


class IdeaNotFoundError(SantraError, LookupError):
    """No persisted record exists for the requested idea id."""


class StorageError(SantraError, OSError):
    """The idea directory could not be read or written."""


__all__ = [
    "SantraError",
    "IdeaValidationError",
    "ServiceError",
    "IdeaNotFoundError",
    "StorageError",
]
