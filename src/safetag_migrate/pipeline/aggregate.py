"""First pass: route every source document and group exercises into activities.

The fold visits each (key, document) pair once. Keys no enabled content
class claims are dropped. Every sub-document of ``exercises/<dir>/`` folds
into the single record ``activities/<id>.md``, each contributing its own
field, so the merged record does not depend on visit order.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from safetag_migrate.config.settings import MigrationSettings
from safetag_migrate.data_primitives.document import Document, DocumentMap
from safetag_migrate.diagnostics import Diagnostic, DiagnosticLog
from safetag_migrate.metadata.extract import extract_structured_fields, extract_title
from safetag_migrate.routing import ContentClass, classify
from safetag_migrate.transclusion import (
    ACTIVITIES_HEADING,
    ACTIVITY_REFERENCE_MARKER,
    ACTIVITY_SEGMENT,
    EXERCISE_INCLUDE,
    GUIDE_INCLUDE,
    PAGE_INCLUDE,
    FileProbe,
    LocalFileProbe,
    link,
    rewrite,
    strip_lines,
    validate_targets,
)
from safetag_migrate.utils.globbing import matches
from safetag_migrate.utils.text import trim_newlines

logger = logging.getLogger(__name__)

EXERCISES_DIR = "exercises"
METHODS_DIR = "methods"
EXERCISE_INDEX = "exercises/*/index.md"

# Exercise sub-document stem -> activity field.
ACTIVITY_ROLES: dict[str, str] = {
    "summary": "summary",
    "approach": "approach",
    "materials_needed": "materials",
    "operational_security": "opsec",
    "instructions": "instructions",
    "recommendations": "recommendations",
    "output": "output",
}

# Heading levels used for titles, per content class.
ACTIVITY_TITLE_LEVEL = 4
METHOD_TITLE_LEVEL = 2
DOCUMENT_MATTER_TITLE_LEVEL = 2
REFERENCE_TITLE_LEVEL = 4

METHOD_LAYOUT = "method.md"
PAGE_LAYOUT = "page.md"
REFERENCE_LAYOUT = "reference.md"
GUIDE_LAYOUT = "guide.md"

GUIDE_SUFFIX = ".guide.md"
GUIDE_KEY = "index.guide.md"
FOOTNOTES_KEY = "references/footnotes.md"
FOOTNOTES_TITLE = "footnotes"

FOOTNOTE_LABEL = re.compile(r"(\[[^\]\n]*\]:)")
GUIDE_INTRO_INCLUDE = '\n!INCLUDE "methods/intro.md"'
GUIDE_EXERCISE_LINK = re.compile(r":\[\]\(\./exercises/(?P<slug>.*)/index\.md\)")


@dataclass
class FoldContext:
    settings: MigrationSettings
    source_root: Path
    probe: FileProbe = field(default_factory=LocalFileProbe)
    diagnostics: DiagnosticLog = field(default_factory=DiagnosticLog)
    source_keys: frozenset[str] = frozenset()

    def origin_path(self, key: str) -> str:
        return self.settings.origin_path_prefix + key


def activity_id(exercise_dir: str) -> str:
    return exercise_dir.replace("_", "-")


def activity_key(identifier: str) -> str:
    return f"activities/{identifier}.md"


def _exercise_dir(key: str) -> str:
    return key.split(f"{EXERCISES_DIR}/", 1)[1].split("/", 1)[0]


def _role_field(key: str) -> str | None:
    stem = key.rsplit("/", 1)[-1].removesuffix(".md")
    return ACTIVITY_ROLES.get(stem)


def _present(**values: Any) -> dict[str, Any]:
    return {name: value for name, value in values.items() if value is not None}


def merge_fields(existing: Document | None, incoming: Document) -> Document:
    """Field-wise union of two partial records for the same key."""
    if existing is None:
        return incoming
    return Document(key=incoming.key, contents=incoming.contents, fields={**existing.fields, **incoming.fields})


def _fold_exercise(key: str, document: Document, context: FoldContext) -> list[Document]:
    exercise_dir = _exercise_dir(key)
    identifier = activity_id(exercise_dir)
    text = document.text
    resolved = trim_newlines(EXERCISE_INCLUDE.rewrite(text))

    context.diagnostics.report_all(
        validate_targets(resolved, context.source_root / EXERCISES_DIR / exercise_dir, key, probe=context.probe)
    )

    fields: dict[str, Any] = {
        "id": identifier,
        "origin_path": context.origin_path(f"{EXERCISES_DIR}/{exercise_dir}/index.md"),
    }
    if matches(key, EXERCISE_INDEX):
        for directive in EXERCISE_INCLUDE.find(text):
            if directive.target not in ACTIVITY_ROLES:
                context.diagnostics.report(Diagnostic.unexpected_transclusion(key, directive.target))
        fields.update(_present(title=extract_title(text, ACTIVITY_TITLE_LEVEL)))
        fields["metadata"] = extract_structured_fields(document.fields)
    else:
        role = _role_field(key)
        if role is not None:
            fields[role] = resolved

    return [Document(key=activity_key(identifier), contents=b"", fields=fields)]


def _fold_method(key: str, document: Document, context: FoldContext) -> list[Document]:
    contents = rewrite(document.text, PAGE_INCLUDE, substitutions=(ACTIVITY_SEGMENT,))

    # Activity links are resolved through the taxonomy, not the filesystem.
    context.diagnostics.report_all(
        validate_targets(
            contents,
            context.source_root / METHODS_DIR,
            key,
            probe=context.probe,
            exempt_marker=ACTIVITY_REFERENCE_MARKER,
        )
    )

    shared = {
        **document.fields,
        **_present(title=extract_title(contents, METHOD_TITLE_LEVEL)),
        "layout": METHOD_LAYOUT,
        "origin_path": context.origin_path(key),
    }
    emitted = []
    toolkit_key = key.removesuffix(GUIDE_SUFFIX) + ".md" if key.endswith(GUIDE_SUFFIX) else None
    # Toolkit copy without the activity listing heading; the guide copy keeps it.
    # A real source document at the toolkit key always wins.
    if toolkit_key is not None and toolkit_key not in context.source_keys:
        emitted.append(
            Document.from_text(toolkit_key, strip_lines(contents, ACTIVITIES_HEADING), {**shared, "id": toolkit_key})
        )
    emitted.append(Document.from_text(key, contents, {**shared, "id": key}))
    return emitted


def _fold_document_matter(key: str, document: Document, context: FoldContext) -> list[Document]:
    contents = rewrite(document.text, PAGE_INCLUDE)
    fields = {
        **document.fields,
        "id": key,
        **_present(title=extract_title(contents, DOCUMENT_MATTER_TITLE_LEVEL)),
        "layout": PAGE_LAYOUT,
        "origin_path": context.origin_path(key),
    }
    return [Document.from_text(key, contents, fields)]


def _fold_reference(key: str, document: Document, context: FoldContext) -> list[Document]:
    if key == FOOTNOTES_KEY:
        # "[label]: " must not read as the start of a ":[](...)" link.
        contents = FOOTNOTE_LABEL.sub(r"\1 ", document.text)
        title: str | None = FOOTNOTES_TITLE
    else:
        contents = document.text
        title = extract_title(contents, REFERENCE_TITLE_LEVEL)

    fields = {
        **document.fields,
        "id": key,
        **_present(title=title),
        "description": "",
        "layout": REFERENCE_LAYOUT,
        "origin_path": context.origin_path(key),
    }
    return [Document.from_text(key, contents, fields)]


def _fold_image(key: str, document: Document, context: FoldContext) -> list[Document]:
    return [Document(key=key, contents=document.contents, fields=dict(document.fields))]


def _exercise_link_to_activity(match: re.Match[str]) -> str:
    return link(f"./{activity_key(activity_id(match['slug']))}")


def _fold_guide_index(key: str, document: Document, context: FoldContext) -> list[Document]:
    contents = document.text.replace(GUIDE_INTRO_INCLUDE, "", 1)
    contents = GUIDE_INCLUDE.rewrite(contents)
    contents = GUIDE_EXERCISE_LINK.sub(_exercise_link_to_activity, contents)
    contents += "\n" + link(FOOTNOTES_KEY)

    fields = {
        **document.fields,
        "layout": GUIDE_LAYOUT,
        "origin_path": context.origin_path(key),
    }
    return [Document.from_text(GUIDE_KEY, contents, fields)]


ClassRule = Callable[[str, Document, FoldContext], list[Document]]

CLASS_RULES: dict[ContentClass, ClassRule] = {
    ContentClass.ACTIVITY_EXERCISE: _fold_exercise,
    ContentClass.METHOD: _fold_method,
    ContentClass.DOCUMENT_MATTER: _fold_document_matter,
    ContentClass.REFERENCE: _fold_reference,
    ContentClass.IMAGE: _fold_image,
    ContentClass.GUIDE_INDEX: _fold_guide_index,
}

# Classes whose records are assembled from several visits.
MERGED_CLASSES = frozenset({ContentClass.ACTIVITY_EXERCISE})


def aggregate(
    files: Mapping[str, Document],
    settings: MigrationSettings,
    source_root: Path,
    *,
    probe: FileProbe | None = None,
    diagnostics: DiagnosticLog | None = None,
) -> DocumentMap:
    """Fold the source mapping into the intermediate mapping.

    Args:
        files: Source documents by key; not modified
        settings: Enabled content classes and origin options
        source_root: Corpus root used to resolve transclusion targets
        probe: Filesystem probe for target validation
        diagnostics: Log receiving diagnostics as they are raised

    Returns:
        A new mapping of intermediate records.

    """
    context = FoldContext(
        settings=settings,
        source_root=source_root,
        probe=probe or LocalFileProbe(),
        diagnostics=diagnostics if diagnostics is not None else DiagnosticLog(),
        source_keys=frozenset(files),
    )

    accumulator: DocumentMap = {}
    for key, document in files.items():
        content_class = classify(key, settings)
        if content_class is None:
            continue
        for emitted in CLASS_RULES[content_class](key, document, context):
            if content_class in MERGED_CLASSES:
                accumulator[emitted.key] = merge_fields(accumulator.get(emitted.key), emitted)
            else:
                accumulator[emitted.key] = emitted

    logger.debug("Aggregated %d source documents into %d records", len(files), len(accumulator))
    return accumulator
