"""Document primitive shared by the build host and both pipeline passes."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

TEXT_ENCODING = "utf-8"


@dataclass
class Document:
    """A keyed corpus node: raw contents plus an open mapping of fields.

    ``key`` is the slash-delimited path identifying the document inside one
    mapping. ``contents`` may be empty, which is how aggregate records that
    only carry metadata are represented.
    """

    key: str
    contents: bytes = b""
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_text(cls, key: str, text: str, fields: dict[str, Any] | None = None) -> Document:
        return cls(key=key, contents=text.encode(TEXT_ENCODING), fields=dict(fields or {}))

    @property
    def text(self) -> str:
        return self.contents.decode(TEXT_ENCODING, errors="replace")

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def with_fields(self, **fields: Any) -> Document:
        return replace(self, fields={**self.fields, **fields})


DocumentMap = dict[str, Document]
