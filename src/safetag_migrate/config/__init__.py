"""Configuration facade: ``from safetag_migrate.config import MigrationSettings``."""

from safetag_migrate.config.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError
from safetag_migrate.config.loader import find_settings_file, load_settings, save_settings
from safetag_migrate.config.settings import CONTENT_FLAGS, MigrationSettings

__all__ = [
    "CONTENT_FLAGS",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "MigrationSettings",
    "find_settings_file",
    "load_settings",
    "save_settings",
]
