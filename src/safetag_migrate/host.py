"""Filesystem-backed build host.

Loads a corpus directory into a key -> :class:`Document` mapping the way a
static-site build would (front matter parsed into fields, body kept as
contents), and writes a migrated mapping back out.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from safetag_migrate.data_primitives.document import TEXT_ENCODING, Document, DocumentMap
from safetag_migrate.exceptions import OutputWriteError, SourceTreeError
from safetag_migrate.markdown.frontmatter import parse_frontmatter, render_frontmatter
from safetag_migrate.utils.paths import safe_path_join

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"
FRONT_MATTER_DELIMITER = "---"


@dataclass
class SourceTree:
    """A corpus snapshot and the directory it was read from."""

    root: Path
    files: DocumentMap = field(default_factory=dict)

    def source(self) -> Path:
        return self.root


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def _load_document(path: Path, key: str) -> Document:
    raw = path.read_bytes()
    if path.suffix != MARKDOWN_SUFFIX:
        return Document(key=key, contents=raw)
    text = raw.decode(TEXT_ENCODING, errors="replace")
    if not text.startswith(FRONT_MATTER_DELIMITER):
        # Bodies without front matter are kept byte for byte.
        return Document(key=key, contents=raw)
    metadata, body = parse_frontmatter(text)
    return Document.from_text(key, body, metadata)


def load_source_tree(root: Path) -> SourceTree:
    """Read every non-hidden file under ``root``.

    Raises:
        SourceTreeError: If ``root`` is not a readable directory.

    """
    if not root.is_dir():
        raise SourceTreeError(root, "not a directory")

    files: DocumentMap = {}
    try:
        for path in sorted(root.rglob("*")):
            relative = path.relative_to(root)
            if not path.is_file() or _is_hidden(relative):
                continue
            key = relative.as_posix()
            files[key] = _load_document(path, key)
    except OSError as e:
        raise SourceTreeError(root, str(e)) from e

    logger.info("Loaded %d documents from %s", len(files), root)
    return SourceTree(root=root, files=files)


def _render(document: Document) -> bytes:
    if not document.key.endswith(MARKDOWN_SUFFIX):
        return document.contents
    metadata = {name: value for name, value in document.fields.items() if value is not None}
    return render_frontmatter(metadata, document.text).encode(TEXT_ENCODING)


def write_output_tree(files: Mapping[str, Document], destination: Path) -> list[Path]:
    """Write every document beneath ``destination`` at its key.

    Raises:
        PathTraversalError: If a key would escape ``destination``.
        OutputWriteError: If a file cannot be written.

    """
    written: list[Path] = []
    destination.mkdir(parents=True, exist_ok=True)
    for key, document in files.items():
        target = safe_path_join(destination, *key.split("/"))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(_render(document))
        except OSError as e:
            raise OutputWriteError(str(target), e) from e
        written.append(target)

    logger.info("Wrote %d documents to %s", len(written), destination)
    return written
