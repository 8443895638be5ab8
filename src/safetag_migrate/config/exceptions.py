"""Custom exceptions for configuration handling."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from safetag_migrate.exceptions import SafetagError


class ConfigError(SafetagError):
    """Base exception for all configuration-related errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file does not exist."""

    def __init__(self, search_path: Path) -> None:
        self.search_path = search_path
        super().__init__(f"Could not find configuration file at {search_path}")


class ConfigValidationError(ConfigError):
    """Raised when the configuration fails to parse or validate."""

    def __init__(self, errors: Sequence[dict[str, Any]] | None = None, *, source: Path | None = None) -> None:
        self.errors = list(errors or [])
        self.source = source
        where = f" in {source}" if source else ""
        details = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ())) or '<root>'}: {error.get('msg', '')}"
            for error in self.errors
        )
        message = f"Configuration validation failed{where} with {len(self.errors)} error(s)."
        super().__init__(f"{message} {details}".strip())
