from safetag_migrate.metadata.extract import (
    ACTIVITY_DESCRIPTION,
    DEFAULT_DESCRIPTION,
    METHOD_DESCRIPTION,
    STRUCTURED_FIELDS,
    DescriptionRule,
    extract_description,
    extract_structured_fields,
    extract_title,
)

__all__ = [
    "ACTIVITY_DESCRIPTION",
    "DEFAULT_DESCRIPTION",
    "METHOD_DESCRIPTION",
    "STRUCTURED_FIELDS",
    "DescriptionRule",
    "extract_description",
    "extract_structured_fields",
    "extract_title",
]
