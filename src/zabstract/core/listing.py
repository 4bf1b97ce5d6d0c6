# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/listing.py

"""
Concurrent enumeration of holds and bookmarks.

One worker thread is started per filesystem. A counting semaphore sized to
the query's concurrency bounds how many of them talk to the store at the
same time. Results and per-filesystem errors stream out on two channels that
are closed once every worker has finished. A failure on one filesystem ends
the scan of that filesystem only.
"""

import threading
from typing import Callable, Optional

from loguru import logger

from zabstract.core.abstraction import Abstraction
from zabstract.core.query import ListZFSHoldsAndBookmarksQuery
from zabstract.core.taxonomy import extractors
from zabstract.system.cancellation import CancelToken
from zabstract.system.channels import Channel
from zabstract.system.exceptions import ListAbstractionsError, ValidationError, ZAbstractError
from zabstract.system.semaphore import Semaphore
from zabstract.zfs.versions import DatasetPath, VersionType

EmitAbstraction = Callable[[Abstraction], None]
EmitError = Callable[[BaseException, str, str, str], None]


def list_abstractions(driver, query: ListZFSHoldsAndBookmarksQuery,
                      cancel: Optional[CancelToken] = None) -> tuple[list[Abstraction], list[ListAbstractionsError]]:
    """Blocking form of list_abstractions_streamed.

    Returns every match plus every per-filesystem error. Only raises if the
    enumeration cannot start (invalid query, filesystem resolution failure).
    """
    matches, errors = list_abstractions_streamed(driver, query, cancel)
    out: list[Abstraction] = []
    out_errs: list[ListAbstractionsError] = []

    drain_errors = threading.Thread(target=lambda: out_errs.extend(errors), name="list-abstractions-errors")
    drain_errors.start()
    try:
        out.extend(matches)
    finally:
        drain_errors.join()
    return out, out_errs


def list_abstractions_streamed(driver, query: ListZFSHoldsAndBookmarksQuery,
                               cancel: Optional[CancelToken] = None
                               ) -> tuple[Channel[Abstraction], Channel[ListAbstractionsError]]:
    """Start enumerating Abstractions matching `query`.

    Raises:
        ValidationError: If the query is invalid (no work is started)
        ZAbstractError: If the filesystem set cannot be resolved (no work is started)

    Both returned channels are closed after the last worker finishes.
    """
    try:
        query.validate()
    except ValidationError as e:
        raise ValidationError(f"validate query: {e}") from e

    try:
        fss = query.fs.filesystems(driver, cancel)
    except ZAbstractError as e:
        logger.error(f"list filesystems for query {query}: {e}")
        raise

    out: Channel[Abstraction] = Channel()
    out_errs: Channel[ListAbstractionsError] = Channel()
    # invariant violations inside workers; re-raised to whoever consumes `out`
    fatal: list[BaseException] = []

    def emit_error(err: BaseException, fs: str, snap: str, what: str) -> None:
        logger.warning(f"listing abstractions on {fs}{'@' + snap if snap else ''} failed: {what}: {err}")
        out_errs.put(ListAbstractionsError(err, fs=fs, snap=snap, what=what))

    def emit_abstraction(a: Abstraction) -> None:
        job_matches = query.job_id is None or a.job_id is None or a.job_id == query.job_id
        createtxg_matches = query.create_txg.contains(a.createtxg)
        if job_matches and createtxg_matches:
            out.put(a)

    sem = Semaphore(query.concurrency)

    def worker(fs: str) -> None:
        try:
            guard = sem.acquire(cancel)
        except ZAbstractError as e:
            emit_error(e, fs, "", "acquire concurrency slot")
            return
        with guard:
            try:
                _list_abstractions_fs(driver, fs, query, emit_abstraction, emit_error, cancel)
            except ZAbstractError as e:
                emit_error(e, fs, "", "list abstractions")
            except BaseException as e:
                fatal.append(e)

    def coordinator() -> None:
        workers = [
            threading.Thread(target=worker, args=(fs,), name=f"list-abstractions:{fs}", daemon=True)
            for fs in fss
        ]
        try:
            for w in workers:
                w.start()
            for w in workers:
                w.join()
        finally:
            out.close(fatal[0] if fatal else None)
            out_errs.close()
            logger.debug(f"listed abstractions on {len(fss)} filesystem(s)")

    logger.debug(f"listing abstractions: {query}")
    threading.Thread(target=coordinator, name="list-abstractions", daemon=True).start()
    return out, out_errs


def _list_abstractions_fs(driver, fs: str, query: ListZFSHoldsAndBookmarksQuery,
                          emit_candidate: EmitAbstraction, emit_error: EmitError,
                          cancel: Optional[CancelToken]) -> None:
    fsp = DatasetPath.from_string(fs)

    if not query.what:
        return

    # versions are needed for every abstraction type: list them once
    try:
        versions = driver.list_filesystem_versions(fsp, cancel)
    except ZAbstractError as e:
        emit_error(e, fs, "", "list filesystem versions")
        return
    logger.debug(f"{fs}: {len(versions)} snapshot(s) and bookmark(s)")

    for atype in query.what:
        bookmark_extract, hold_extract = extractors(atype)
        for v in versions:
            if v.type is VersionType.BOOKMARK and bookmark_extract is not None:
                a = bookmark_extract(fsp, v)
                if a is not None:
                    emit_candidate(a)
            elif (v.type is VersionType.SNAPSHOT and hold_extract is not None
                  and query.create_txg.contains(v.createtxg)):
                try:
                    tags = driver.holds(fs, v.name, cancel)
                except ZAbstractError as e:
                    emit_error(e, fs, v.name, "get holds on snapshot")
                    return
                for tag in tags:
                    a = hold_extract(fsp, v, tag)
                    if a is not None:
                        emit_candidate(a)
