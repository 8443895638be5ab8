from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from safetag_migrate.config import MigrationSettings
from safetag_migrate.data_primitives import Document, DocumentMap


class RecordingProbe:
    """In-memory filesystem probe: only ``existing`` paths can be opened."""

    def __init__(self, existing: set[Path] | None = None) -> None:
        self.existing = set(existing or ())
        self.probed: list[Path] = []

    def open_for_read(self, path: Path) -> bool:
        self.probed.append(path)
        return path in self.existing


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SAFETAG_ACTIVITIES",
        "SAFETAG_METHODS",
        "SAFETAG_REFERENCES",
        "SAFETAG_IMAGES",
        "SAFETAG_DOCUMENT_MATTER",
        "SAFETAG_GUIDES",
        "SAFETAG_ORIGIN",
        "SAFETAG_ORIGIN_PATH_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings() -> Callable[..., MigrationSettings]:
    def _make(**values: Any) -> MigrationSettings:
        return MigrationSettings(**values)

    return _make


@pytest.fixture
def probe() -> RecordingProbe:
    return RecordingProbe()


@pytest.fixture
def docs() -> Callable[..., DocumentMap]:
    """Build a source mapping from ``key -> text`` (or ``key -> (text, fields)``)."""

    def _build(entries: dict[str, str | tuple[str, dict[str, Any]]]) -> DocumentMap:
        mapping: DocumentMap = {}
        for key, value in entries.items():
            text, fields = value if isinstance(value, tuple) else (value, {})
            mapping[key] = Document.from_text(key, text, fields)
        return mapping

    return _build


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str | bytes]], Path]:
    """Materialise ``relative path -> contents`` under a fresh source root."""

    def _write(entries: dict[str, str | bytes]) -> Path:
        root = tmp_path / "source"
        for relative, contents in entries.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(contents, bytes):
                path.write_bytes(contents)
            else:
                path.write_text(contents, encoding="utf-8")
        root.mkdir(exist_ok=True)
        return root

    return _write


@pytest.fixture
def make_probe() -> Callable[..., RecordingProbe]:
    def _make(*existing: Path) -> RecordingProbe:
        return RecordingProbe(set(existing))

    return _make
