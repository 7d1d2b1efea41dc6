"""Logging setup."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "monorun"

_configured = False


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the monorun namespace.

    Args:
        name: Dotted module name, usually ``__name__``.

    Returns:
        Logger instance.
    """
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Attach a rich handler to the monorun logger.

    ``MONORUN_LOG_LEVEL`` overrides the level chosen by ``verbose``.
    Calling this more than once only adjusts the level.

    Args:
        verbose: Log debug messages.
        console: Console to render to (stderr by default).
    """
    global _configured

    default = "DEBUG" if verbose else "INFO"
    level_name = os.getenv("MONORUN_LOG_LEVEL", default).upper()
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if _configured:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    _configured = True
