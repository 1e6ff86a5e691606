"""Santra: capture raw ideas, refine them with an LLM and browse their connections."""

__version__ = "0.1.0"
