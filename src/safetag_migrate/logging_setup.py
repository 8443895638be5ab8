"""Logging for safetag-migrate: a single rich handler on the root logger."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["LOG_LEVEL_ENV", "configure_logging", "console"]

LOG_LEVEL_ENV = "SAFETAG_LOG_LEVEL"

console = Console()


class _RootHandler(RichHandler):
    """Installed once by :func:`configure_logging`; later calls only adjust the level."""


def _resolve_level(name: str | None) -> int:
    level = logging.getLevelName((name or os.getenv(LOG_LEVEL_ENV) or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> None:
    """Send log records to ``console``.

    ``level`` wins over ``$SAFETAG_LOG_LEVEL``; unknown names mean INFO.
    """
    root = logging.getLogger()
    if not any(isinstance(handler, _RootHandler) for handler in root.handlers):
        root.handlers.clear()
        root.addHandler(_RootHandler(console=console, show_path=False, markup=False, rich_tracebacks=True))
    root.setLevel(_resolve_level(level))
    logging.captureWarnings(True)
