"""Second pass: per-record enrichment with read access to every record.

Runs once per intermediate key and attaches the fields downstream
renderers rely on: the final description, the shared ``origin``
annotation, the footnotes payload, and normalised pagination markers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from safetag_migrate.config.settings import MigrationSettings
from safetag_migrate.data_primitives.document import Document, DocumentMap
from safetag_migrate.exceptions import MissingDocumentError
from safetag_migrate.metadata.extract import (
    ACTIVITY_DESCRIPTION,
    DEFAULT_DESCRIPTION,
    METHOD_DESCRIPTION,
    extract_description,
)
from safetag_migrate.pipeline.overrides import ACTIVITY_OVERRIDES, RecordOverride
from safetag_migrate.utils.globbing import matches

logger = logging.getLogger(__name__)

FOOTNOTES_PAYLOAD = ":[](../references/footnotes.md)"
PAGE_BREAK = "\\newpage"
HORIZONTAL_RULE = "\n---"

ACTIVITY_OUTPUT = "activities/**/*.md"
METHOD_OUTPUT = "methods/*.md"
IMAGE_OUTPUT = "images/**/*.*"


def normalize_pagination(text: str) -> str:
    """Turn print-only page breaks into horizontal rules."""
    return text.replace(PAGE_BREAK, HORIZONTAL_RULE)


def _method_summary_key(key: str) -> str:
    return f"{key.removesuffix('.md')}/summary.md"


def _enrich_activity(document: Document, settings: MigrationSettings) -> Document:
    fields: dict[str, Any] = {**document.fields, **document.get("metadata", {})}
    description = extract_description(fields.get("summary"), ACTIVITY_DESCRIPTION, fallback=fields.get("title"))
    logger.debug("description %s: %s", document.key, description)
    fields.update(description=description, origin=settings.origin, footnotes=FOOTNOTES_PAYLOAD)
    return Document.from_text(document.key, normalize_pagination(document.text), fields)


def _enrich_method(document: Document, records: Mapping[str, Document], settings: MigrationSettings) -> Document:
    summary = records.get(_method_summary_key(document.key))
    description = extract_description(
        summary.text if summary is not None else None,
        METHOD_DESCRIPTION,
        fallback=document.get("title"),
    )
    logger.debug("description %s: %s", document.key, description)

    fields = {**document.fields, "description": description, "origin": settings.origin, "footnotes": FOOTNOTES_PAYLOAD}
    return Document.from_text(document.key, normalize_pagination(document.text), fields)


def _enrich_generic(document: Document, settings: MigrationSettings) -> Document:
    description = extract_description(document.text, DEFAULT_DESCRIPTION, fallback=document.get("title"))
    logger.debug("description %s: %s", document.key, description)
    fields = {**document.fields, "description": description, "origin": settings.origin}
    return Document.from_text(document.key, normalize_pagination(document.text), fields)


def _apply_override(
    document: Document,
    override: RecordOverride,
    sources: Mapping[str, Document],
    settings: MigrationSettings,
) -> Document:
    source = sources.get(override.contents_from)
    if source is None:
        raise MissingDocumentError(override.contents_from, expected_by=document.key)

    fields = {
        **document.fields,
        **document.get("metadata", {}),
        "title": override.title,
        "description": override.description,
        "origin": settings.origin,
        "footnotes": FOOTNOTES_PAYLOAD,
    }
    return Document.from_text(document.key, normalize_pagination(source.text), fields)


def enrich_record(
    document: Document,
    records: Mapping[str, Document],
    settings: MigrationSettings,
    *,
    sources: Mapping[str, Document],
    overrides: Mapping[str, RecordOverride] = ACTIVITY_OVERRIDES,
) -> Document:
    """Enrich one intermediate record.

    Raises:
        MissingDocumentError: If an override needs a source document that
            is not in the corpus.

    """
    key = document.key
    if settings.activities and key in overrides:
        return _apply_override(document, overrides[key], sources, settings)
    if settings.activities and matches(key, ACTIVITY_OUTPUT):
        return _enrich_activity(document, settings)
    if settings.methods and matches(key, METHOD_OUTPUT):
        return _enrich_method(document, records, settings)
    if settings.images and matches(key, IMAGE_OUTPUT):
        # Binary assets carry no text to describe.
        return document.with_fields(origin=settings.origin)
    return _enrich_generic(document, settings)


def enrich(
    records: Mapping[str, Document],
    settings: MigrationSettings,
    *,
    sources: Mapping[str, Document] | None = None,
    overrides: Mapping[str, RecordOverride] = ACTIVITY_OVERRIDES,
) -> DocumentMap:
    """Map every intermediate record to its final form.

    Args:
        records: Output of :func:`~safetag_migrate.pipeline.aggregate.aggregate`
        settings: Migration settings
        sources: Original source mapping, consulted by overrides whose
            contents come from a document the fold does not emit;
            defaults to ``records``
        overrides: Keyed one-off replacements for the generic rules

    Returns:
        A new mapping with the same keys as ``records``.

    """
    lookup = records if sources is None else sources
    return {
        key: enrich_record(document, records, settings, sources=lookup, overrides=overrides)
        for key, document in records.items()
    }
