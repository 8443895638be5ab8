"""Keyed one-off overrides applied by the enrichment map.

An override replaces the generic enrichment rule for exactly one output
key. New exceptional cases are added as entries, never as conditionals in
the generic path.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RecordOverride:
    """Replacement values for one output record.

    Attributes:
        title: Title to set instead of the extracted one
        description: Description to set instead of the computed one
        contents_from: Source key whose contents become the record body;
            the document must exist or the invocation aborts

    """

    title: str
    description: str
    contents_from: str


ACTIVITY_OVERRIDES: Mapping[str, RecordOverride] = {
    "activities/check-user-browser-vulns.md": RecordOverride(
        title="Check user browser vulnerabilities",
        description="Outdated Java browser plugins",
        contents_from="exercises/check_user_browser_vulns/browser_java_plugin.md",
    ),
}
