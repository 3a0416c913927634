"""Logging configuration for WebJar Extractor."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> None:
    """Configure the root logger with a Rich console handler.

    Args:
        level: Logging level name
        console: Console to log to (default: stderr console)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    logging.getLogger(__name__).debug("Logging configured at %s", level)
