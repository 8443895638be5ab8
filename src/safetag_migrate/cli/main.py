"""Main Typer application for safetag-migrate."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.table import Table

from safetag_migrate.cli.errorhandler import handle_cli_errors
from safetag_migrate.config import MigrationSettings, load_settings
from safetag_migrate.config.settings import CONTENT_FLAGS
from safetag_migrate.diagnostics import DiagnosticLog
from safetag_migrate.host import SourceTree, load_source_tree, write_output_tree
from safetag_migrate.logging_setup import configure_logging, console
from safetag_migrate.pipeline import migrate

logger = logging.getLogger(__name__)

STRICT_EXIT_CODE = 2

app = typer.Typer(
    name="safetag-migrate",
    help="Restructure a SAFETAG source corpus into a renderer-ready corpus",
    add_completion=False,
)


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Logging level (default: $SAFETAG_LOG_LEVEL or INFO)")
    ] = None,
) -> None:
    """Configure logging for every command."""
    configure_logging(log_level)


SourceArg = Annotated[Path, typer.Argument(help="Corpus source root", exists=True, file_okay=False)]
ActivitiesOpt = Annotated[bool | None, typer.Option("--activities/--no-activities", help="Group exercises into activities")]
MethodsOpt = Annotated[bool | None, typer.Option("--methods/--no-methods", help="Migrate methods")]
ReferencesOpt = Annotated[bool | None, typer.Option("--references/--no-references", help="Migrate references")]
ImagesOpt = Annotated[bool | None, typer.Option("--images/--no-images", help="Pass images through")]
DocumentMatterOpt = Annotated[
    bool | None, typer.Option("--document-matter/--no-document-matter", help="Migrate document matter")
]
GuidesOpt = Annotated[bool | None, typer.Option("--guides/--no-guides", help="Migrate the guide index")]
AllOpt = Annotated[bool, typer.Option("--all", help="Enable every content class")]
OriginOpt = Annotated[str | None, typer.Option("--origin", help="Upstream edit location for every record")]
PrefixOpt = Annotated[str | None, typer.Option("--origin-path-prefix", help="Prefix for originPath fields")]
ConfigOpt = Annotated[Path | None, typer.Option("--config", help="Settings file (default: .safetag/config.yml)")]
DebugOpt = Annotated[bool, typer.Option("--debug", help="Show full tracebacks")]


def _resolve_settings(source: Path, config: Path | None, *, enable_all: bool, **flags: Any) -> MigrationSettings:
    if enable_all:
        flags.update({flag: True for flag in CONTENT_FLAGS if flags.get(flag) is None})
    return load_settings(source, config_path=config, **flags)


def _migrate(source: Path, settings: MigrationSettings) -> tuple[SourceTree, int, DiagnosticLog]:
    tree = load_source_tree(source)
    loaded = len(tree.files)
    diagnostics = migrate(tree, settings)
    return tree, loaded, diagnostics


def _print_diagnostics(diagnostics: DiagnosticLog) -> None:
    if not len(diagnostics):
        console.print("[green]No diagnostics.[/green]")
        return
    table = Table(title="Diagnostics")
    table.add_column("Kind", style="yellow", no_wrap=True)
    table.add_column("Document", style="cyan", no_wrap=True)
    table.add_column("Target")
    for diagnostic in diagnostics:
        table.add_row(diagnostic.kind.value, diagnostic.key, diagnostic.target or "")
    console.print(table)


@app.command()
def build(
    source: SourceArg,
    destination: Annotated[Path, typer.Argument(help="Output directory", file_okay=False)],
    activities: ActivitiesOpt = None,
    methods: MethodsOpt = None,
    references: ReferencesOpt = None,
    images: ImagesOpt = None,
    document_matter: DocumentMatterOpt = None,
    guides: GuidesOpt = None,
    enable_all: AllOpt = False,
    origin: OriginOpt = None,
    origin_path_prefix: PrefixOpt = None,
    config: ConfigOpt = None,
    strict: Annotated[bool, typer.Option("--strict", help="Exit with code 2 when diagnostics were raised")] = False,
    debug: DebugOpt = False,
) -> None:
    """Migrate SOURCE and write the result to DESTINATION."""
    with handle_cli_errors(debug=debug):
        settings = _resolve_settings(
            source,
            config,
            enable_all=enable_all,
            activities=activities,
            methods=methods,
            references=references,
            images=images,
            document_matter=document_matter,
            guides=guides,
            origin=origin,
            origin_path_prefix=origin_path_prefix,
        )
        tree, loaded, diagnostics = _migrate(source, settings)
        written = write_output_tree(tree.files, destination)

    summary = Table(title="Migration summary", show_header=False)
    summary.add_row("Source documents", str(loaded))
    summary.add_row("Output documents", str(len(written)))
    summary.add_row("Diagnostics", str(len(diagnostics)))
    console.print(summary)
    _print_diagnostics(diagnostics)

    if strict and len(diagnostics):
        raise typer.Exit(STRICT_EXIT_CODE)


@app.command()
def check(
    source: SourceArg,
    activities: ActivitiesOpt = None,
    methods: MethodsOpt = None,
    references: ReferencesOpt = None,
    images: ImagesOpt = None,
    document_matter: DocumentMatterOpt = None,
    guides: GuidesOpt = None,
    enable_all: AllOpt = False,
    config: ConfigOpt = None,
    debug: DebugOpt = False,
) -> None:
    """Run the migration on SOURCE without writing anything and list diagnostics."""
    with handle_cli_errors(debug=debug):
        settings = _resolve_settings(
            source,
            config,
            enable_all=enable_all,
            activities=activities,
            methods=methods,
            references=references,
            images=images,
            document_matter=document_matter,
            guides=guides,
        )
        _, _, diagnostics = _migrate(source, settings)

    _print_diagnostics(diagnostics)
    if len(diagnostics):
        raise typer.Exit(STRICT_EXIT_CODE)
