"""Pipeline driver: run both passes and swap the host's mapping in one step."""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from pathlib import Path

from safetag_migrate.config.settings import MigrationSettings
from safetag_migrate.data_primitives.document import Document
from safetag_migrate.diagnostics import DiagnosticLog
from safetag_migrate.host import SourceTree
from safetag_migrate.pipeline.aggregate import aggregate
from safetag_migrate.pipeline.enrich import enrich
from safetag_migrate.transclusion import FileProbe

logger = logging.getLogger(__name__)


def run_migration(
    files: MutableMapping[str, Document],
    source_root: Path,
    settings: MigrationSettings,
    *,
    probe: FileProbe | None = None,
) -> DiagnosticLog:
    """Migrate ``files`` in place.

    Both passes work on snapshots; ``files`` is only cleared and refilled
    once enrichment has succeeded, so a fatal error leaves it untouched.

    Returns:
        Diagnostics reported during the run.

    Raises:
        MissingDocumentError: If a structurally required document is absent.

    """
    diagnostics = DiagnosticLog()
    sources = dict(files)

    logger.info("Migrating %d source documents (enabled: %s)", len(sources), ", ".join(settings.enabled_flags()) or "none")
    intermediate = aggregate(sources, settings, source_root, probe=probe, diagnostics=diagnostics)
    results = enrich(intermediate, settings, sources=sources)

    files.clear()
    files.update(results)

    logger.info("Produced %d output documents with %d diagnostic(s)", len(results), len(diagnostics))
    return diagnostics


def migrate(tree: SourceTree, settings: MigrationSettings, *, probe: FileProbe | None = None) -> DiagnosticLog:
    """Migrate a loaded :class:`SourceTree` in place."""
    return run_migration(tree.files, tree.source(), settings, probe=probe)
