# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/cli/main.py

"""
CLI dispatcher for zabstract.

Options are turned into a validated query here; the command handlers in
zabstract.cli.commands do the work.
"""

# Standard library imports
from importlib.metadata import version, PackageNotFoundError
from typing import Callable, Optional

# Third-party imports
import typer
from rich.console import Console

# Local imports
from zabstract.cli import utils as cli_utils
from zabstract.cli.commands import abstractions as abstraction_commands
from zabstract.cli.utils import CLIState, handle_operation_error
from zabstract.config.manager import load_config
from zabstract.core.query import ListZFSHoldsAndBookmarksQuery
from zabstract.system.cancellation import CancelToken, background
from zabstract.system.exceptions import ConfigError, ValidationError
from zabstract.system.logging_setup import setup_logging

# Initialize Typer app
app = typer.Typer(
    help="""zabstract - replication holds and bookmarks on ZFS

[bold green]Inspect:[/bold green] list
[bold red]Cleanup:[/bold red] release-stale, release-all
""",
    rich_markup_mode="rich"
)

console = Console()

TYPE_HELP = ("Abstraction type to match (repeatable): step-bookmark, step-hold, last-received-hold, "
             "replication-cursor-bookmark-v1, replication-cursor-bookmark-v2. Default: all")
FILTER_HELP = "Filesystem filter pattern (repeatable), e.g. 'pool<' or '!pool/tmp<'"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        try:
            pkg_version = version("zabstract")
        except PackageNotFoundError as e:
            handle_operation_error(console, "retrieving version", e)
        console.print(f"zabstract version {pkg_version}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0.0, help="Cancel all zfs operations after this many seconds"
    ),
) -> None:
    """zabstract - bookkeeping of replication holds and bookmarks."""
    try:
        config = load_config()
    except ConfigError as e:
        handle_operation_error(console, "loading configuration", e)
    setup_logging(debug=debug, config=config)
    cancel = CancelToken.with_timeout(timeout) if timeout is not None else background()
    ctx.obj = CLIState(config=config, driver=cli_utils.create_driver(config), cancel=cancel, debug=debug)


def _query_or_exit(state: CLIState, fs, filters, types, job, since, since_exclusive,
                   until, until_exclusive, concurrency) -> ListZFSHoldsAndBookmarksQuery:
    try:
        return cli_utils.build_query(
            fs=fs, filters=filters, types=types, job=job,
            since=since, since_exclusive=since_exclusive,
            until=until, until_exclusive=until_exclusive,
            concurrency=concurrency if concurrency is not None else state.config.concurrency,
        )
    except ValidationError as e:
        handle_operation_error(console, "building query", e)


def _run(state: CLIState, handler: Callable[[], None]) -> None:
    try:
        handler()
    except KeyboardInterrupt:
        state.cancel.cancel("interrupted")
        console.print("[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)


# =============================================================================
# INSPECT COMMANDS
# =============================================================================

@app.command(name="list")
def list_command(
    ctx: typer.Context,
    fs: Optional[str] = typer.Option(None, "--fs", help="Exactly this filesystem"),
    filters: Optional[list[str]] = typer.Option(None, "--filter", help=FILTER_HELP),
    types: Optional[list[str]] = typer.Option(None, "--type", "-t", help=TYPE_HELP),
    job: Optional[str] = typer.Option(None, "--job", help="Only abstractions of this job (or without job)"),
    since: Optional[int] = typer.Option(None, "--since", help="Lower createtxg bound"),
    since_exclusive: bool = typer.Option(False, "--since-exclusive", help="Exclude the --since value itself"),
    until: Optional[int] = typer.Option(None, "--until", help="Upper createtxg bound"),
    until_exclusive: bool = typer.Option(False, "--until-exclusive", help="Exclude the --until value itself"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", "-c", help="Filesystems scanned in parallel"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show guid and creation time"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON")
) -> None:
    """[bold green]Inspect[/bold green]: List step holds/bookmarks, last-received holds and replication cursors."""
    state: CLIState = ctx.obj
    query = _query_or_exit(state, fs, filters, types, job, since, since_exclusive, until, until_exclusive, concurrency)
    _run(state, lambda: abstraction_commands.list_command(
        console, state, query, to_json=to_json, verbose=verbose, quiet=quiet
    ))


# =============================================================================
# CLEANUP COMMANDS
# =============================================================================

@app.command(name="release-stale")
def release_stale_command(
    ctx: typer.Context,
    fs: Optional[str] = typer.Option(None, "--fs", help="Exactly this filesystem"),
    filters: Optional[list[str]] = typer.Option(None, "--filter", help=FILTER_HELP),
    types: Optional[list[str]] = typer.Option(None, "--type", "-t", help=TYPE_HELP),
    job: Optional[str] = typer.Option(None, "--job", help="Only abstractions of this job (or without job)"),
    since: Optional[int] = typer.Option(None, "--since", help="Lower createtxg bound"),
    since_exclusive: bool = typer.Option(False, "--since-exclusive", help="Exclude the --since value itself"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", "-c", help="Filesystems scanned in parallel"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be released without making changes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show guid and creation time"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON")
) -> None:
    """[bold red]Cleanup[/bold red]: Release holds and destroy bookmarks that newer ones have made stale."""
    state: CLIState = ctx.obj
    query = _query_or_exit(state, fs, filters, types, job, since, since_exclusive, None, False, concurrency)
    _run(state, lambda: abstraction_commands.release_stale_command(
        console, state, query, dry_run=dry_run, to_json=to_json, verbose=verbose, quiet=quiet
    ))


@app.command(name="release-all")
def release_all_command(
    ctx: typer.Context,
    fs: Optional[str] = typer.Option(None, "--fs", help="Exactly this filesystem"),
    filters: Optional[list[str]] = typer.Option(None, "--filter", help=FILTER_HELP),
    types: Optional[list[str]] = typer.Option(None, "--type", "-t", help=TYPE_HELP),
    job: Optional[str] = typer.Option(None, "--job", help="Only abstractions of this job (or without job)"),
    since: Optional[int] = typer.Option(None, "--since", help="Lower createtxg bound"),
    since_exclusive: bool = typer.Option(False, "--since-exclusive", help="Exclude the --since value itself"),
    until: Optional[int] = typer.Option(None, "--until", help="Upper createtxg bound"),
    until_exclusive: bool = typer.Option(False, "--until-exclusive", help="Exclude the --until value itself"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", "-c", help="Filesystems scanned in parallel"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be released without making changes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show guid and creation time"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON")
) -> None:
    """[bold red]Cleanup[/bold red]: Release every matching hold and destroy every matching bookmark."""
    state: CLIState = ctx.obj
    query = _query_or_exit(state, fs, filters, types, job, since, since_exclusive, until, until_exclusive, concurrency)
    _run(state, lambda: abstraction_commands.release_all_command(
        console, state, query, dry_run=dry_run, to_json=to_json, verbose=verbose, quiet=quiet
    ))


# =============================================================================
# ENTRY POINT
# =============================================================================

def cli_main() -> None:  # pragma: no cover - entry point
    """Entry point for the zabstract CLI application."""
    app()


if __name__ == "__main__":  # pragma: no cover
    cli_main()
