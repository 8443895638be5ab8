"""Segment-aware glob matching for corpus keys.

``fnmatch`` alone lets ``*`` cross ``/`` boundaries, which would make
``exercises/*/index.md`` match nested directories. Patterns are therefore
matched one path segment at a time:

- ``*`` and ``?`` never match ``/``;
- a segment that is exactly ``**`` matches zero or more whole segments;
- ``**`` inside a longer segment (``**.md``) behaves like ``*``;
- wildcards do not match a leading ``.`` unless the pattern spells it out.

Examples:
    >>> matches("exercises/check_vulns/index.md", "exercises/*/index.md")
    True
    >>> matches("exercises/check_vulns/extra/index.md", "exercises/*/index.md")
    False
    >>> matches("document_matter/intro.md", "document_matter/**/*.md")
    True

"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable, Sequence
from functools import lru_cache

GLOBSTAR = "**"


@lru_cache(maxsize=256)
def _split(pattern: str) -> tuple[str, ...]:
    return tuple(pattern.split("/"))


def _match_segment(name: str, pattern: str) -> bool:
    if name.startswith(".") and not pattern.startswith("."):
        return False
    return fnmatch.fnmatchcase(name, pattern.replace(GLOBSTAR, "*"))


def _match_segments(parts: Sequence[str], patterns: Sequence[str]) -> bool:
    if not patterns:
        return not parts

    head, rest = patterns[0], patterns[1:]
    if head == GLOBSTAR:
        for consumed in range(len(parts) + 1):
            if consumed and parts[consumed - 1].startswith("."):
                break
            if _match_segments(parts[consumed:], rest):
                return True
        return False

    if not parts:
        return False
    return _match_segment(parts[0], head) and _match_segments(parts[1:], rest)


def matches(key: str, pattern: str) -> bool:
    """Return whether ``key`` matches the glob ``pattern``."""
    return _match_segments(tuple(key.split("/")), _split(pattern))


def matches_any(key: str, patterns: Iterable[str]) -> bool:
    return any(matches(key, pattern) for pattern in patterns)
