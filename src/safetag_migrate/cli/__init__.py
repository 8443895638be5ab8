from safetag_migrate.cli.main import app

__all__ = ["app"]
