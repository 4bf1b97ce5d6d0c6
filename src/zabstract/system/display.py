# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/system/display.py

# Standard library imports
from datetime import datetime, UTC
from typing import Optional

# Third-party imports
import humanize
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Local imports
from zabstract.core.abstraction import Abstraction
from zabstract.core.destroy import BatchDestroyResult
from zabstract.system.exceptions import ListAbstractionsError


def abstractions_to_table(abstractions: list[Abstraction], title: Optional[str] = None,
                          verbose: bool = False) -> Table:
    """Convert abstractions to a rich Table, sorted by filesystem then createtxg.

    Args:
        abstractions: Abstractions to display
        title: Optional table title
        verbose: Include guid and creation time columns

    Returns:
        Rich Table object ready for display
    """
    table = Table(title=title)
    table.add_column("Type")
    table.add_column("Filesystem")
    table.add_column("Name")
    table.add_column("Job")
    table.add_column("CreateTXG", justify="right")
    table.add_column("Hold Tag")
    if verbose:
        table.add_column("GUID")
        table.add_column("Creation")

    now = datetime.now(UTC)
    for a in sorted(abstractions, key=lambda a: (a.fs, a.createtxg, a.type.value, a.name)):
        row = [
            a.type.value,
            a.fs,
            a.filesystem_version.relative_name,
            str(a.job_id) if a.job_id is not None else "-",
            str(a.createtxg),
            getattr(a, "tag", "-"),
        ]
        if verbose:
            creation = a.filesystem_version.creation
            row.extend([
                f"{a.filesystem_version.guid:016x}",
                f"{creation:%Y-%m-%d %H:%M:%S} ({humanize.naturaltime(now - creation)})",
            ])
        table.add_row(*row)
    return table


def destroy_results_to_table(results: list[BatchDestroyResult]) -> Table:
    table = Table(title="Destroy results")
    table.add_column("Status")
    table.add_column("Abstraction")
    table.add_column("Error")
    for r in results:
        status = "[green]✓[/green]" if r.ok else "[red]✗[/red]"
        table.add_row(status, escape(str(r.abstraction)), "" if r.ok else escape(str(r.destroy_error)))
    return table


def display_list_errors(console: Console, errors: list[ListAbstractionsError]) -> None:
    """Print per-filesystem enumeration errors, one per line."""
    if not errors:
        return
    console.print(f"[red]✗[/red] {len(errors)} filesystem(s) could not be enumerated completely:")
    for e in errors:
        console.print(f"  [red]•[/red] {escape(str(e))}", highlight=False)
