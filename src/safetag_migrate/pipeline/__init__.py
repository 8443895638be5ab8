"""Two-pass migration pipeline.

- :func:`aggregate` routes and groups source documents (first pass)
- :func:`enrich` finalises every grouped record (second pass)
- :func:`run_migration` runs both and replaces the host mapping
- :func:`migrate` does the same for a loaded source tree
"""

from safetag_migrate.pipeline.aggregate import ACTIVITY_ROLES, activity_key, aggregate
from safetag_migrate.pipeline.driver import migrate, run_migration
from safetag_migrate.pipeline.enrich import FOOTNOTES_PAYLOAD, enrich
from safetag_migrate.pipeline.overrides import ACTIVITY_OVERRIDES, RecordOverride

__all__ = [
    "ACTIVITY_OVERRIDES",
    "ACTIVITY_ROLES",
    "FOOTNOTES_PAYLOAD",
    "RecordOverride",
    "activity_key",
    "aggregate",
    "enrich",
    "migrate",
    "run_migration",
]
