# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/cli/utils.py

"""
CLI utility functions shared by the zabstract commands.

- Building a validated query from command line options
- Creating the store driver from configuration
- Error handling with typer exits
"""

from dataclasses import dataclass
from typing import Any, Optional

import orjson
import typer
from rich.console import Console
from rich.markup import escape

from zabstract.config.manager import ZAbstractConfig
from zabstract.core.createtxg_range import CreateTXGRange, CreateTXGRangeBound
from zabstract.core.jobid import JobID
from zabstract.core.query import FilesystemFilter, ListZFSHoldsAndBookmarksQuery
from zabstract.core.taxonomy import ALL_ABSTRACTION_TYPES, abstraction_type_set_from_strings
from zabstract.system.cancellation import CancelToken
from zabstract.system.exceptions import ValidationError
from zabstract.zfs.driver import ZFSCommandDriver
from zabstract.zfs.filters import DatasetMapFilter


@dataclass
class CLIState:
    """Per-invocation objects created by the app callback."""
    config: ZAbstractConfig
    driver: Any
    cancel: CancelToken
    debug: bool = False


def create_driver(config: ZAbstractConfig) -> ZFSCommandDriver:
    return ZFSCommandDriver.from_config(config)


def build_query(
    fs: Optional[str],
    filters: Optional[list[str]],
    types: Optional[list[str]],
    job: Optional[str],
    since: Optional[int],
    since_exclusive: bool,
    until: Optional[int],
    until_exclusive: bool,
    concurrency: int,
) -> ListZFSHoldsAndBookmarksQuery:
    """Assemble and validate a query from CLI options.

    Raises:
        ValidationError: If any option is malformed
    """
    if fs is not None and filters:
        raise ValidationError("--fs and --filter are mutually exclusive")
    if fs is None and not filters:
        raise ValidationError("one of --fs or --filter is required")

    fs_filter = FilesystemFilter(fs=fs) if fs is not None else FilesystemFilter(filter=DatasetMapFilter(filters))
    what = abstraction_type_set_from_strings(types) if types else ALL_ABSTRACTION_TYPES
    job_id = JobID.make(job) if job is not None else None
    create_txg = CreateTXGRange(
        since=CreateTXGRangeBound(since, inclusive=not since_exclusive) if since is not None else None,
        until=CreateTXGRangeBound(until, inclusive=not until_exclusive) if until is not None else None,
    )

    query = ListZFSHoldsAndBookmarksQuery(
        fs=fs_filter,
        what=what,
        job_id=job_id,
        create_txg=create_txg,
        concurrency=concurrency,
    )
    query.validate()
    return query


def print_json(data: Any) -> None:
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())


def handle_operation_error(console: Console, operation: str, error: Exception) -> None:
    """Handle operation errors with consistent formatting."""
    console.print(f"[red]✗[/red] Error {operation}: {escape(str(error))}", highlight=False)
    raise typer.Exit(1)
