"""Non-fatal integrity diagnostics raised while migrating a corpus.

A diagnostic never changes the output mapping. It is logged on this module's
logger the moment it is reported, so an operator sees stale references
before publication, and it is kept on the :class:`DiagnosticLog` handed back
to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Integrity problems the pipeline knows how to report."""

    UNEXPECTED_TRANSCLUSION = "unexpected-transclusion"
    MISSING_TARGET = "missing-target"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single integrity warning.

    Attributes:
        kind: What went wrong
        key: Source key of the document that raised it
        message: Human-readable message
        target: Offending include target or resolved filesystem path

    """

    kind: DiagnosticKind
    key: str
    message: str
    target: str | None = None

    @classmethod
    def missing_target(cls, key: str, resolved: Path) -> Diagnostic:
        return cls(
            kind=DiagnosticKind.MISSING_TARGET,
            key=key,
            message=f"Missing transclusion destination in {key}: {resolved}",
            target=str(resolved),
        )

    @classmethod
    def unexpected_transclusion(cls, key: str, role: str) -> Diagnostic:
        return cls(
            kind=DiagnosticKind.UNEXPECTED_TRANSCLUSION,
            key=key,
            message=f"Unexpected transclusion {role} in activity index file {key}",
            target=role,
        )


class DiagnosticLog:
    """Ordered collection of reported diagnostics."""

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        logger.warning("%s", diagnostic.message)
        self._diagnostics.append(diagnostic)

    def report_all(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.report(diagnostic)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [diagnostic for diagnostic in self._diagnostics if diagnostic.kind is kind]

    def for_key(self, key: str) -> list[Diagnostic]:
        return [diagnostic for diagnostic in self._diagnostics if diagnostic.key == key]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)
