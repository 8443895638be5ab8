"""Transclusion directives: find them, rewrite them, and check their targets.

Source documents include one another with a line-anchored marker::

    !INCLUDE "approach.md"

The output corpus uses the link-style directive understood by the
downstream renderer::

    :[](approach.md)

Rewriting and validation are separate steps. Rewriting is pure text
processing; validation probes the filesystem and only produces
:class:`~safetag_migrate.diagnostics.Diagnostic` values, so one stale
reference never fails a build.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from safetag_migrate.diagnostics import Diagnostic

logger = logging.getLogger(__name__)

LINK_PATTERN = re.compile(r":\[\]\((?P<target>[^)\n]*)\)")


@dataclass(frozen=True, slots=True)
class Directive:
    """One directive occurrence: the referenced path and where it was found."""

    target: str
    span: tuple[int, int]


@dataclass(frozen=True, slots=True)
class DirectiveSyntax:
    """An include-marker dialect and how its links are emitted.

    ``pattern`` must expose a ``target`` group. Emitted links carry
    ``link_prefix + target + link_suffix``, which lets a dialect that drops
    the ``.md`` extension in its capture put it back.
    """

    pattern: re.Pattern[str]
    link_prefix: str = ""
    link_suffix: str = ""

    def find(self, text: str) -> list[Directive]:
        return [Directive(match["target"], match.span()) for match in self.pattern.finditer(text)]

    def rewrite(self, text: str) -> str:
        return self.pattern.sub(lambda match: link(f"{self.link_prefix}{match['target']}{self.link_suffix}"), text)


@dataclass(frozen=True, slots=True)
class Substitution:
    """An unconditional textual rewrite applied after directive rewriting."""

    pattern: re.Pattern[str]
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


# Exercise indexes include role files without repeating the extension.
EXERCISE_INCLUDE = DirectiveSyntax(re.compile(r'^!INCLUDE\s"(?P<target>.*)\.md"', re.MULTILINE), link_suffix=".md")
PAGE_INCLUDE = DirectiveSyntax(re.compile(r'^!INCLUDE "(?P<target>.*)"\W?$', re.MULTILINE))
GUIDE_INCLUDE = DirectiveSyntax(PAGE_INCLUDE.pattern, link_prefix="./")

ACTIVITY_SEGMENT = Substitution(re.compile(r"/exercises/"), "/activities/")
ACTIVITIES_HEADING = re.compile(r"^### Activities.?$", re.MULTILINE)

ACTIVITY_REFERENCE_MARKER = "/activities/"


def link(target: str) -> str:
    return f":[]({target})"


def find_links(text: str) -> list[Directive]:
    return [Directive(match["target"], match.span()) for match in LINK_PATTERN.finditer(text)]


def strip_lines(text: str, pattern: re.Pattern[str]) -> str:
    """Blank out every line matching ``pattern``; idempotent."""
    return pattern.sub("", text)


def rewrite(
    text: str,
    syntax: DirectiveSyntax,
    substitutions: Iterable[Substitution] = (),
    strip: Iterable[re.Pattern[str]] = (),
) -> str:
    """Rewrite include markers into links, then apply substitutions and strips.

    Already-rewritten text contains no markers, so running this on its own
    output leaves the text unchanged.
    """
    rewritten = syntax.rewrite(text)
    for substitution in substitutions:
        rewritten = substitution.apply(rewritten)
    for pattern in strip:
        rewritten = strip_lines(rewritten, pattern)
    return rewritten


class FileProbe(Protocol):
    def open_for_read(self, path: Path) -> bool: ...


class LocalFileProbe:
    """Probe targets by actually opening them; any OSError counts as missing."""

    def open_for_read(self, path: Path) -> bool:
        try:
            with path.open("rb"):
                return True
        except OSError as exc:
            logger.debug("Cannot open %s: %s", path, exc)
            return False


def validate_targets(
    text: str,
    base_dir: Path,
    key: str,
    *,
    probe: FileProbe,
    exempt_marker: str | None = None,
) -> list[Diagnostic]:
    """Check every link in ``text`` against ``base_dir``.

    Args:
        text: Already-rewritten document text
        base_dir: Directory link targets are relative to
        key: Source key, named in every diagnostic
        probe: Filesystem probe used to open targets
        exempt_marker: Targets containing this substring are not checked;
            they are resolved by the activity taxonomy, not by file existence

    Returns:
        One diagnostic per unreadable target, in document order.

    """
    diagnostics: list[Diagnostic] = []
    for directive in find_links(text):
        if exempt_marker and exempt_marker in directive.target:
            continue
        resolved = base_dir / directive.target
        if not probe.open_for_read(resolved):
            diagnostics.append(Diagnostic.missing_target(key, resolved))
    return diagnostics
