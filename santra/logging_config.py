"""Console logging setup with a SUCCESS level between INFO and WARNING."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


def configure_logging(level: str | int = "INFO") -> None:
    """Route the root logger through a colored rich handler."""
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[
            RichHandler(
                rich_tracebacks=True,
                show_path=False,
                log_time_format="[%Y-%m-%dT%H:%M:%S]",
            )
        ],
        force=True,
    )


__all__ = ["SUCCESS", "configure_logging"]
