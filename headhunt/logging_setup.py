# headhunt/logging_setup.py
from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO", console: Optional[Console] = None) -> logging.Logger:
    """
    Route the ``headhunt`` logger to stderr through rich.

    stdout is reserved for the summary and the JSON document. Calling this
    again only changes the level.
    """
    logger = logging.getLogger("headhunt")
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
