"""Centralized exceptions for safetag-migrate.

Integrity problems that must not stop a build (stale transclusion targets,
unexpected includes) are reported as :class:`~safetag_migrate.diagnostics.Diagnostic`
values instead. Everything raised from here aborts the invocation.
"""

from __future__ import annotations

from pathlib import Path


class SafetagError(Exception):
    """Base exception for all safetag-migrate errors."""


class MigrationError(SafetagError):
    """Base exception for failures while migrating a corpus."""


class MissingDocumentError(MigrationError):
    """Raised when a structurally required document is absent from the corpus."""

    def __init__(self, key: str, expected_by: str) -> None:
        self.key = key
        self.expected_by = expected_by
        super().__init__(f"Required document '{key}' (needed by '{expected_by}') is missing from the corpus")


class SourceTreeError(SafetagError):
    """Raised when the source corpus cannot be loaded."""

    def __init__(self, root: Path, reason: str) -> None:
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot load source tree at '{root}': {reason}")


class OutputWriteError(SafetagError):
    """Raised when an output document cannot be written."""

    def __init__(self, path: str, original_exception: Exception) -> None:
        self.path = path
        self.original_exception = original_exception
        super().__init__(f"Failed to write output document '{path}': {original_exception}")


class PathTraversalError(SafetagError):
    """Raised when a path would escape its intended directory."""
