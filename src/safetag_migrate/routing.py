"""Path router: decide which content class, if any, owns a source key."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from safetag_migrate.config.settings import MigrationSettings
from safetag_migrate.utils.globbing import matches_any

logger = logging.getLogger(__name__)


class ContentClass(str, Enum):
    ACTIVITY_EXERCISE = "activity-exercise"
    METHOD = "method"
    DOCUMENT_MATTER = "document-matter"
    REFERENCE = "reference"
    IMAGE = "image"
    GUIDE_INDEX = "guide-index"


@dataclass(frozen=True, slots=True)
class Route:
    content_class: ContentClass
    flag: str
    patterns: tuple[str, ...]


# Priority order: the first enabled route whose pattern matches wins.
ROUTES: tuple[Route, ...] = (
    Route(ContentClass.ACTIVITY_EXERCISE, "activities", ("exercises/*/**.md",)),
    Route(ContentClass.METHOD, "methods", ("methods/*.md", "methods/*/*.md")),
    Route(ContentClass.DOCUMENT_MATTER, "document_matter", ("document_matter/**/*.md",)),
    Route(ContentClass.REFERENCE, "references", ("references/*.md",)),
    Route(ContentClass.IMAGE, "images", ("images/**/*.*",)),
    Route(ContentClass.GUIDE_INDEX, "guides", ("index.guide.md",)),
)


def classify(key: str, settings: MigrationSettings) -> ContentClass | None:
    """Return the first enabled content class whose patterns match ``key``."""
    for route in ROUTES:
        if getattr(settings, route.flag) and matches_any(key, route.patterns):
            return route.content_class
    logger.debug("No enabled content class for %s", key)
    return None
