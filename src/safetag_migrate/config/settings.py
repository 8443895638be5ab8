"""Runtime settings for one migration invocation.

Each content class is switched on by its own flag and everything is off by
default, so an empty configuration produces an empty output corpus.

Supports environment variable overrides with the pattern ``SAFETAG_<FIELD>``
(e.g. ``SAFETAG_ACTIVITIES=true``). The camelCase spellings used by existing
build configurations (``documentMatter``, ``originPathPrefix``) are accepted
as well.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CAMEL_CASE_ALIASES = {
    "documentMatter": "document_matter",
    "originPathPrefix": "origin_path_prefix",
}

CONTENT_FLAGS = ("activities", "methods", "references", "images", "document_matter", "guides")


class MigrationSettings(BaseSettings):
    """Options for the aggregation fold and enrichment map."""

    activities: bool = Field(default=False, description="Group exercise sub-documents into activities")
    methods: bool = Field(default=False, description="Migrate method documents")
    references: bool = Field(default=False, description="Migrate reference documents and footnotes")
    images: bool = Field(default=False, description="Pass raster assets through")
    document_matter: bool = Field(default=False, description="Migrate front and back matter pages")
    guides: bool = Field(default=False, description="Migrate the top-level guide index")
    origin: Any = Field(default=None, description="Upstream edit location attached to every record")
    origin_path_prefix: str = Field(default="", description="Prefix prepended to source keys in originPath")

    model_config = SettingsConfigDict(
        extra="forbid",
        validate_assignment=True,
        env_prefix="SAFETAG_",
    )

    @model_validator(mode="before")
    @classmethod
    def _accept_camel_case(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalized = dict(data)
        for camel, snake in CAMEL_CASE_ALIASES.items():
            if camel in normalized:
                value = normalized.pop(camel)
                normalized.setdefault(snake, value)
        return normalized

    @classmethod
    def all_enabled(cls, **overrides: Any) -> MigrationSettings:
        """Return settings with every content class switched on."""
        return cls(**{flag: True for flag in CONTENT_FLAGS}, **overrides)

    def enabled_flags(self) -> list[str]:
        return [flag for flag in CONTENT_FLAGS if getattr(self, flag)]
