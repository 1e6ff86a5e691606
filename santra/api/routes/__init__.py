"""API route modules."""

from . import graph, ideas, system

__all__ = ["graph", "ideas", "system"]
