# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/cli/commands/abstractions.py

"""
Abstraction command handlers.

Handles: list, release-stale, release-all
"""

from typing import Optional

import typer
from loguru import logger
from rich.console import Console

from zabstract.cli.utils import CLIState, handle_operation_error, print_json
from zabstract.core.abstraction import Abstraction
from zabstract.core.destroy import batch_destroy
from zabstract.core.listing import list_abstractions
from zabstract.core.query import ListZFSHoldsAndBookmarksQuery
from zabstract.core.staleness import list_stale
from zabstract.system.display import abstractions_to_table, destroy_results_to_table, display_list_errors
from zabstract.system.exceptions import ListAbstractionsError, ListAbstractionsErrors, ZAbstractError


def list_command(console: Console, state: CLIState, query: ListZFSHoldsAndBookmarksQuery,
                 to_json: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """List holds and bookmarks matching `query`. Exits 1 if any filesystem failed."""
    try:
        abstractions, errors = list_abstractions(state.driver, query, state.cancel)
    except ZAbstractError as e:
        handle_operation_error(console, "listing abstractions", e)

    if to_json:
        print_json({
            "abstractions": [a.to_dict() for a in abstractions],
            "errors": [e.to_dict() for e in errors],
        })
    elif not quiet:
        console.print(abstractions_to_table(abstractions, title="Abstractions", verbose=verbose))
        console.print(f"{len(abstractions)} abstraction(s)")

    if errors:
        if not to_json:
            display_list_errors(console, errors)
        raise typer.Exit(1)


def release_stale_command(console: Console, state: CLIState, query: ListZFSHoldsAndBookmarksQuery,
                          dry_run: bool = False, to_json: bool = False, verbose: bool = False,
                          quiet: bool = False) -> None:
    """Destroy every stale abstraction matching `query`.

    Classification is all-or-nothing: if any filesystem cannot be enumerated,
    nothing is destroyed.
    """
    try:
        info = list_stale(state.driver, query, state.cancel)
    except ListAbstractionsErrors as e:
        if to_json:
            print_json({"errors": [err.to_dict() for err in e.errors]})
        else:
            console.print("[red]✗[/red] Refusing to classify staleness: enumeration was incomplete")
            display_list_errors(console, e.errors)
        raise typer.Exit(1)
    except ZAbstractError as e:
        handle_operation_error(console, "listing stale abstractions", e)

    logger.info(f"{len(info.stale)} of {len(info.all)} abstraction(s) are stale")

    if dry_run:
        if to_json:
            print_json({
                "live": [a.to_dict() for a in info.live],
                "stale": [a.to_dict() for a in info.stale],
            })
        elif not quiet:
            console.print(abstractions_to_table(info.stale, title="Stale abstractions (dry run)", verbose=verbose))
            console.print(f"{len(info.stale)} stale, {len(info.live)} live")
        return

    _destroy_and_report(console, state, info.stale, to_json=to_json, quiet=quiet)


def release_all_command(console: Console, state: CLIState, query: ListZFSHoldsAndBookmarksQuery,
                        dry_run: bool = False, to_json: bool = False, verbose: bool = False,
                        quiet: bool = False) -> None:
    """Destroy every abstraction matching `query`, live or not."""
    try:
        abstractions, errors = list_abstractions(state.driver, query, state.cancel)
    except ZAbstractError as e:
        handle_operation_error(console, "listing abstractions", e)

    if errors and not to_json:
        display_list_errors(console, errors)

    if dry_run:
        if to_json:
            print_json({
                "abstractions": [a.to_dict() for a in abstractions],
                "errors": [e.to_dict() for e in errors],
            })
        elif not quiet:
            console.print(abstractions_to_table(abstractions, title="Abstractions (dry run)", verbose=verbose))
        if errors:
            raise typer.Exit(1)
        return

    _destroy_and_report(console, state, abstractions, to_json=to_json, quiet=quiet, list_errors=errors)


def _destroy_and_report(console: Console, state: CLIState, abstractions: list[Abstraction],
                        to_json: bool, quiet: bool,
                        list_errors: Optional[list[ListAbstractionsError]] = None) -> None:
    list_errors = list_errors or []
    results = batch_destroy(state.driver, abstractions, state.cancel).drain()
    failed = [r for r in results if not r.ok]

    if to_json:
        print_json({
            "results": [r.to_dict() for r in results],
            "errors": [e.to_dict() for e in list_errors],
        })
    elif not quiet:
        if results:
            console.print(destroy_results_to_table(results))
        console.print(f"destroyed {len(results) - len(failed)} of {len(results)} abstraction(s)")

    if failed or list_errors:
        raise typer.Exit(1)
