"""Helpers for reading and writing YAML front matter in Markdown documents."""

from __future__ import annotations

import logging
from typing import Any

import frontmatter
import yaml

logger = logging.getLogger(__name__)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML front matter using python-frontmatter.

    Args:
        content: Markdown content that may include front matter.

    Returns:
        Tuple of (metadata dict, body string). If parsing fails or metadata is not a
        mapping, metadata will be an empty dict and the original content is returned.

    """
    try:
        parsed = frontmatter.loads(content)
    except (yaml.YAMLError, ValueError) as exc:
        logger.warning("Failed to parse front matter content: %s", exc)
        return {}, content

    raw_metadata = parsed.metadata or {}
    if not isinstance(raw_metadata, dict):
        logger.warning("Front matter metadata is not a mapping: %s", type(raw_metadata).__name__)
        return {}, content

    body = parsed.content if isinstance(parsed.content, str) else str(parsed.content)
    return dict(raw_metadata), body


def render_frontmatter(metadata: dict[str, Any], body: str) -> str:
    """Return ``body`` preceded by ``metadata`` as a YAML front matter block."""
    if not metadata:
        return body
    yaml_front = yaml.dump(metadata, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{yaml_front}---\n\n{body}"
