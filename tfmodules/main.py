"""tfmodules CLI - inspect how a Terraform project's modules resolve."""

import logging
import sys
from pathlib import Path

import click
from rich.table import Table

from .console import console
from .logging_setup import init_console_logging
from .logging_setup import init_json_logging
from .module_resolution import ModuleMetadataError
from .module_resolution import load_project
from .module_resolution import resolve_key
from .parser import ParseError
from .settings import SettingsError
from .settings import load_settings
from .telemetry import LoggingTelemetry
from .utils.error_format import escape_markup
from .utils.error_format import format_error_message

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.version_option(package_name="tfmodules")
@click.pass_context
def cli(ctx: click.Context):
    """tfmodules - resolve and inspect Terraform module trees."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path), default=".")
@click.option(
    "--stop-on-parse-error/--continue-on-parse-error",
    default=None,
    help="Fail a module when any of its files is invalid (default: continue)",
)
@click.option("--no-metadata", is_flag=True, help="Ignore .terraform/modules/modules.json")
@click.option("--max-depth", type=click.IntRange(min=0), default=None, help="Deepest module nesting level to load")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Console log level",
)
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Also write JSONL logs here")
@click.option("--stats", is_flag=True, help="Show load counters")
def scan(
    path: Path,
    stop_on_parse_error: bool | None,
    no_metadata: bool,
    max_depth: int | None,
    log_level: str | None,
    log_file: Path | None,
    stats: bool,
):
    """Resolve every module reachable from PATH and show where each one loaded from."""
    try:
        settings = load_settings(path).with_overrides(
            stop_on_parse_error=stop_on_parse_error,
            use_module_metadata=False if no_metadata else None,
            max_depth=max_depth,
            log_level=log_level,
        )
    except SettingsError as e:
        console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}")
        sys.exit(1)

    init_console_logging(settings.log_level)
    init_json_logging(log_file)

    telemetry = LoggingTelemetry()
    try:
        project = load_project(path, settings, telemetry)
    except (OSError, ParseError, ModuleMetadataError) as e:
        logger.debug("Scan failed", exc_info=True)
        console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e))}")
        sys.exit(1)

    table = Table(
        title=f"Modules under {escape_markup(project.root.context.path)}", show_header=True, header_style="bold cyan"
    )
    table.add_column("Key", style="green")
    table.add_column("Source", style="magenta")
    table.add_column("Path")
    table.add_column("Blocks", justify="right")
    table.add_column("Ignores", justify="right")

    for node in project.modules():
        indent = "  " * node.depth
        table.add_row(
            escape_markup(f"{indent}{node.key}"),
            escape_markup(node.source or "-"),
            escape_markup(_display_path(node.module.module_path, project.root.context.path)),
            str(len(node.module.blocks)),
            str(len(node.module.ignores)),
        )
    console.print(table)

    if project.unresolved:
        console.print("\n[yellow]Unresolved modules[/yellow] [dim](run 'terraform init' to fetch remote sources)[/dim]")
        for error in project.unresolved:
            console.print(f"  - {escape_markup(error.source)}: [dim]{escape_markup(error.cause)}[/dim]")

    if stats:
        console.print()
        for name, value in sorted(telemetry.snapshot().items()):
            console.print(f"[bold]{name}:[/bold] {value}")


@cli.command()
@click.argument("context")
@click.argument("label")
def key(context: str, label: str):
    """Print the metadata key for module LABEL declared in CONTEXT.

    CONTEXT is 'root' or a chain such as 'module.a:module.b[0]'.
    """
    click.echo(resolve_key(context, label))


def _display_path(module_path: Path, root: Path) -> str:
    try:
        relative = module_path.relative_to(root)
    except ValueError:
        return str(module_path)
    return str(relative)


def main():
    cli()


if __name__ == "__main__":
    main()
