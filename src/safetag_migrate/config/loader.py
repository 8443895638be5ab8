"""Configuration loader for .safetag/config.yml.

Strategy:
- Look for ``.safetag/config.yml`` under the corpus root (or an explicit file)
- Explicit overrides (CLI flags) win over file values, which win over env
- Invalid YAML or values are errors, never silently replaced by defaults
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from safetag_migrate.config.exceptions import ConfigNotFoundError, ConfigValidationError
from safetag_migrate.config.settings import MigrationSettings

logger = logging.getLogger(__name__)

CONFIG_DIR = ".safetag"
CONFIG_FILE = "config.yml"


def find_settings_file(start_dir: Path) -> Path | None:
    """Search upward for .safetag/config.yml.

    Args:
        start_dir: Starting directory for upward search

    Returns:
        Path to .safetag/config.yml if found, else None
    """
    current = start_dir.expanduser().resolve()
    for candidate in (current, *current.parents):
        config_path = candidate / CONFIG_DIR / CONFIG_FILE
        if config_path.exists():
            return config_path
    return None


def _read_settings_file(config_path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError([{"loc": (), "msg": f"invalid YAML: {e}"}], source=config_path) from e
    if not isinstance(data, dict):
        raise ConfigValidationError(
            [{"loc": (), "msg": f"expected a mapping, got {type(data).__name__}"}],
            source=config_path,
        )
    return data


def load_settings(
    site_root: Path | None = None,
    *,
    config_path: Path | None = None,
    **overrides: Any,
) -> MigrationSettings:
    """Load migration settings.

    Args:
        site_root: Corpus root searched for ``.safetag/config.yml``
        config_path: Explicit configuration file; must exist when given
        **overrides: Values that take precedence over the file. ``None``
            values are ignored so unset CLI options do not mask the file.

    Returns:
        Validated MigrationSettings instance

    Raises:
        ConfigNotFoundError: If ``config_path`` was given but does not exist
        ConfigValidationError: If the file or the merged values are invalid
    """
    if config_path is not None and not config_path.exists():
        raise ConfigNotFoundError(config_path)

    if config_path is None and site_root is not None:
        config_path = find_settings_file(site_root)

    data: dict[str, Any] = {}
    if config_path is not None:
        logger.info("Loading settings from %s", config_path)
        data = _read_settings_file(config_path)

    data.update({name: value for name, value in overrides.items() if value is not None})

    try:
        return MigrationSettings(**data)
    except ValidationError as e:
        raise ConfigValidationError(e.errors(), source=config_path) from e


def save_settings(settings: MigrationSettings, site_root: Path) -> Path:
    """Save settings to .safetag/config.yml and return its path."""
    config_dir = site_root / CONFIG_DIR
    config_dir.mkdir(exist_ok=True, parents=True)
    config_path = config_dir / CONFIG_FILE

    yaml_str = yaml.dump(
        settings.model_dump(mode="python"),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    config_path.write_text(yaml_str, encoding="utf-8")
    logger.debug("Saved settings to %s", config_path)
    return config_path


__all__ = [
    "find_settings_file",
    "load_settings",
    "save_settings",
]
