from safetag_migrate.data_primitives.document import Document, DocumentMap

__all__ = ["Document", "DocumentMap"]
