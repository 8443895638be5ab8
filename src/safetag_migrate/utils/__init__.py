from safetag_migrate.utils.globbing import matches, matches_any
from safetag_migrate.utils.paths import safe_path_join
from safetag_migrate.utils.text import trim_newlines

__all__ = ["matches", "matches_any", "safe_path_join", "trim_newlines"]
