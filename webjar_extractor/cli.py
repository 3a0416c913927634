"""Command line interface for WebJar Extractor."""

import click
import duckdb
import json
from pathlib import Path
from typing import Optional, Tuple

from rich.console import Console
from rich.table import Table

from .cache import DuckDBCache, FileCache, get_cache
from .config import ConfigManager
from .models.resource import ExtractionResult
from .services.extractor import WebJarExtractor
from .utils.error_handling import ErrorHandler, WebJarExtractorError
from .utils.logging import setup_logging
from .utils.resource_locator import SearchPathLocator
from . import __version__

HANDLED_ERRORS = (WebJarExtractorError, OSError, ValueError, duckdb.Error)


def json_serializer(obj):
    """Custom JSON serializer for special types."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    elif hasattr(obj, "isoformat"):
        return obj.isoformat()
    else:
        return str(obj)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", type=click.Path(exists=True), help="Path to configuration file"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "--root",
    "-r",
    "roots",
    multiple=True,
    type=click.Path(),
    help="Jar/zip archive or directory to search (repeatable; overrides config)",
)
@click.option(
    "--cache-backend",
    type=click.Choice(["memory", "file", "duckdb", "none"]),
    default=None,
    help="Cache backend: memory, file, duckdb, or none (always extract)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    verbose: bool,
    roots: Tuple[str, ...],
    cache_backend: Optional[str],
):
    """WebJar Extractor - unpack WebJar resources as static files.

    Finds front-end libraries packaged under META-INF/resources/webjars in
    jar/zip archives and extracts them, only rewriting files whose source
    changed since the last run.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["console"] = Console()
    ctx.obj["error_handler"] = ErrorHandler(verbose=verbose)

    try:
        config_manager = ConfigManager(config)
        cfg = config_manager.config
    except ValueError as e:
        ctx.exit(ctx.obj["error_handler"].handle(e, "loading configuration"))

    if roots:
        cfg.paths.search_roots = list(roots)
    if cache_backend:
        cfg.cache.backend = cache_backend

    setup_logging("DEBUG" if verbose else cfg.logging.level)
    ctx.obj["config"] = cfg


def _build_extractor(ctx: click.Context) -> WebJarExtractor:
    config = ctx.obj["config"]
    return WebJarExtractor(
        SearchPathLocator(config.paths.search_roots),
        cache=get_cache(config.cache),
    )


def _print_result(
    ctx: click.Context, result: ExtractionResult, output_format: str
) -> None:
    console = ctx.obj["console"]

    if output_format == "json":
        click.echo(json.dumps(result, indent=2, default=json_serializer))
        return

    console.print(
        f"[bold green]Extracted {len(result.written):,} files[/bold green] "
        f"to {result.destination} "
        f"[dim]({len(result.skipped):,} already up to date)[/dim]"
    )
    if ctx.obj["verbose"] and result.written:
        table = Table(show_header=True, header_style="bold blue")
        table.add_column("Written", style="cyan")
        for key in result.written:
            table.add_row(key)
        console.print(table)


def _run_extraction(ctx: click.Context, action: str, extract, output_format: str):
    extractor = _build_extractor(ctx)
    try:
        with extractor.cached_run():
            result = extract(extractor)
    except HANDLED_ERRORS as e:
        ctx.exit(ctx.obj["error_handler"].handle(e, action))
    finally:
        extractor.cache.close()

    _print_result(ctx, result, output_format)


format_option = click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)


@cli.command()
@click.argument("package")
@click.argument("destination", type=click.Path(file_okay=False), required=False)
@click.option("--subpath", type=str, help="Only extract files under this path")
@format_option
@click.pass_context
def extract(
    ctx: click.Context,
    package: str,
    destination: Optional[str],
    subpath: Optional[str],
    output_format: str,
):
    """Extract a single WebJar.

    PACKAGE: WebJar name, e.g. jquery

    DESTINATION: Directory to extract into (defaults to configured destination)
    """
    target = Path(destination or ctx.obj["config"].paths.destination)
    _run_extraction(
        ctx,
        f"extracting {package}",
        lambda extractor: extractor.extract_webjar_to(package, target, subpath),
        output_format,
    )


@cli.command("extract-all")
@click.argument("destination", type=click.Path(file_okay=False), required=False)
@format_option
@click.pass_context
def extract_all(ctx: click.Context, destination: Optional[str], output_format: str):
    """Extract every WebJar found in the search roots.

    DESTINATION: Directory to extract into (defaults to configured destination)
    """
    target = Path(destination or ctx.obj["config"].paths.destination)
    _run_extraction(
        ctx,
        "extracting WebJars",
        lambda extractor: extractor.extract_all_webjars_to(target),
        output_format,
    )


@cli.command("extract-node-modules")
@click.argument("destination", type=click.Path(file_okay=False), required=False)
@format_option
@click.pass_context
def extract_node_modules(
    ctx: click.Context, destination: Optional[str], output_format: str
):
    """Extract only the WebJars laid out as node modules.

    DESTINATION: Directory to extract into (defaults to configured destination)
    """
    target = Path(destination or ctx.obj["config"].paths.destination)
    _run_extraction(
        ctx,
        "extracting node modules",
        lambda extractor: extractor.extract_all_node_modules_to(target),
        output_format,
    )


@cli.command("list")
@format_option
@click.pass_context
def list_webjars(ctx: click.Context, output_format: str):
    """List the WebJars found in the search roots."""
    console = ctx.obj["console"]
    extractor = _build_extractor(ctx)

    try:
        names = extractor.list_webjars()
        node_modules = set(extractor.list_node_modules())
    except HANDLED_ERRORS as e:
        ctx.exit(ctx.obj["error_handler"].handle(e, "listing WebJars"))

    if output_format == "json":
        click.echo(
            json.dumps(
                [{"name": n, "node_module": n in node_modules} for n in names], indent=2
            )
        )
        return

    if not names:
        console.print("[yellow]No WebJars found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold blue")
    table.add_column("WebJar", style="cyan")
    table.add_column("Node module", justify="center")
    for name in names:
        table.add_row(name, "yes" if name in node_modules else "")
    console.print(table)


@cli.group()
def cache():
    """Cache management commands.

    Inspect or reset the fingerprints used to skip unchanged files.
    """
    pass


@cache.command("status")
@click.pass_context
def cache_status(ctx: click.Context):
    """Show cache status and statistics."""
    console = ctx.obj["console"]
    config = ctx.obj["config"]
    backend = config.cache.backend

    console.print("[bold cyan]Cache Status[/bold cyan]")
    console.print()
    console.print(f"[dim]Backend:[/dim] {backend}")

    if backend in ("memory", "none"):
        console.print("[dim]Not persisted between runs.[/dim]")
        return

    table = Table(show_header=True, header_style="bold blue")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    try:
        if backend == "duckdb":
            with DuckDBCache(config.cache.db_path) as db_cache:
                stats = db_cache.get_stats()
            console.print(f"[dim]Database:[/dim] {stats['db_path']}")
            table.add_row("Files tracked", f"{stats['files']:,}")
            table.add_row("Packages", f"{len(stats['packages']):,}")
            table.add_row("Total size", f"{stats['total_bytes'] / 1024:.1f} KB")
            if stats["last_update"]:
                table.add_row("Last update", str(stats["last_update"]))
        else:
            file_cache = FileCache(config.cache.file_path)
            file_cache.load()
            console.print(f"[dim]File:[/dim] {file_cache.file_path}")
            table.add_row("Files tracked", f"{len(file_cache):,}")
    except HANDLED_ERRORS as e:
        ctx.exit(ctx.obj["error_handler"].handle(e, "getting cache status"))

    console.print(table)


@cache.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def cache_clear(ctx: click.Context, yes: bool):
    """Clear all cached fingerprints.

    The next extraction rewrites every file.
    """
    config = ctx.obj["config"]
    backend = config.cache.backend

    if backend in ("memory", "none"):
        click.echo("Nothing to clear: cache is not persisted.")
        return

    if not yes:
        if not click.confirm("This will delete all cached data. Continue?"):
            click.echo("Cancelled.")
            return

    try:
        if backend == "duckdb":
            with DuckDBCache(config.cache.db_path) as db_cache:
                db_cache.clear()
        else:
            Path(config.cache.file_path).unlink(missing_ok=True)
    except HANDLED_ERRORS as e:
        ctx.exit(ctx.obj["error_handler"].handle(e, "clearing cache"))

    click.echo("Cache cleared successfully.")


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
