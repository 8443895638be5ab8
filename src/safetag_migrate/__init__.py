"""Restructure a SAFETAG source corpus into a renderer-ready corpus."""

from safetag_migrate.config import MigrationSettings, load_settings
from safetag_migrate.data_primitives import Document, DocumentMap
from safetag_migrate.diagnostics import Diagnostic, DiagnosticKind, DiagnosticLog
from safetag_migrate.exceptions import MissingDocumentError, SafetagError
from safetag_migrate.host import SourceTree, load_source_tree, write_output_tree
from safetag_migrate.pipeline import aggregate, enrich, run_migration
from safetag_migrate.routing import ContentClass, classify

__all__ = [
    "ContentClass",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticLog",
    "Document",
    "DocumentMap",
    "MigrationSettings",
    "MissingDocumentError",
    "SafetagError",
    "SourceTree",
    "aggregate",
    "classify",
    "enrich",
    "load_settings",
    "load_source_tree",
    "run_migration",
    "write_output_tree",
]
