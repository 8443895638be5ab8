"""CLI error handling utilities."""

from collections.abc import Generator
from contextlib import contextmanager

import typer

from safetag_migrate.config.exceptions import ConfigError
from safetag_migrate.exceptions import MissingDocumentError, SafetagError, SourceTreeError
from safetag_migrate.logging_setup import console


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Generator[None, None, None]:
    """Turn safetag-migrate errors into a readable message and exit code 1.

    Args:
        debug: If True, re-raise so the full traceback is shown.

    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit):
        raise
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except SourceTreeError as e:
        if debug:
            raise
        console.print(f"[bold red]Source tree error:[/bold red] {e}")
        raise typer.Exit(1) from e
    except MissingDocumentError as e:
        if debug:
            raise
        console.print(f"[bold red]Corpus cannot be published:[/bold red] {e}")
        raise typer.Exit(1) from e
    except SafetagError as e:
        if debug:
            raise
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1) from e
