"""Heuristic metadata extraction from raw markdown text."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from safetag_migrate.utils.text import trim_newlines

ELLIPSIS = "..."

LINE_BREAKS = re.compile(r"(?:\r\n|\r|\n)+")
IMAGE_MARKUP = re.compile(r"!\[[^\]\n]*\]\([^)\n]*\)")
DROPPED_CHARACTERS = str.maketrans("", "", '"*')

# Front matter attribute -> output field name.
STRUCTURED_FIELDS: dict[str, str] = {
    "Authors": "authors",
    "Approach": "approach_category",
    "Org_size_under": "org_size_under",
    "Remote_options": "remote_options",
    "Skills_required": "skills_required",
    "Time_required_minutes": "time_required_minutes",
}


@lru_cache(maxsize=8)
def _title_pattern(level: int) -> re.Pattern[str]:
    return re.compile(rf"^{'#' * level}\s(.*)$", re.MULTILINE)


@lru_cache(maxsize=8)
def _heading_line(level: int) -> re.Pattern[str]:
    # Matches deeper headings too, so a level-2 strip can remove a "####" line.
    return re.compile(rf"^{'#' * level}(.*)$", re.MULTILINE)


def extract_title(text: str | None, level: int) -> str | None:
    """Return the text of the first heading written with exactly ``level`` hashes."""
    if not text:
        return None
    match = _title_pattern(level).search(text)
    return match.group(1) if match else None


@dataclass(frozen=True, slots=True)
class DescriptionRule:
    """Character budget and heading levels stripped for one content class."""

    budget: int
    strip_headings: tuple[int, ...]


ACTIVITY_DESCRIPTION = DescriptionRule(budget=120, strip_headings=(2,))
METHOD_DESCRIPTION = DescriptionRule(budget=240, strip_headings=(3,))
DEFAULT_DESCRIPTION = DescriptionRule(budget=240, strip_headings=(3, 2))


def extract_description(source: str | None, rule: DescriptionRule, *, fallback: str | None = None) -> str:
    """Build a short plain-text description from ``source``.

    The text is cut to ``rule.budget`` characters first and cleaned up
    afterwards: the first heading line of each stripped level goes, then
    image markup, quotes and emphasis markers, and line breaks collapse to
    single spaces. The last word is dropped because the cut may have split
    it, and an ellipsis is appended.

    Falls back to ``fallback`` (usually the title) or ``""`` when there is
    no source text or nothing survives the cleanup.
    """
    if not source or not source.strip():
        return fallback or ""

    text = trim_newlines(source)[: rule.budget]
    for level in rule.strip_headings:
        text = _heading_line(level).sub("", text, count=1)
    text = LINE_BREAKS.sub(" ", text)
    text = IMAGE_MARKUP.sub("", text)
    text = text.translate(DROPPED_CHARACTERS)

    body = " ".join(text.split()[:-1])
    if not body:
        return fallback or ""
    return body + ELLIPSIS


def extract_structured_fields(front_matter: Mapping[str, Any]) -> dict[str, Any]:
    """Copy allow-listed front matter attributes under their output names.

    Absent or empty attributes are omitted rather than defaulted.
    """
    return {
        name: front_matter[attribute]
        for attribute, name in STRUCTURED_FIELDS.items()
        if front_matter.get(attribute) not in (None, "", [])
    }
