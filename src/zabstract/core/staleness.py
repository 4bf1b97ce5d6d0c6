# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/staleness.py

"""
Live/stale classification of replication markers.

Per (filesystem, job, type) the most recent `num_live_per_fs_and_job(type)`
markers by createtxg are live, older ones are stale. Markers without a job
are never stale. Ordering among markers with equal createtxg is unspecified.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from zabstract.core.abstraction import Abstraction, AbstractionType
from zabstract.core.jobid import JobID
from zabstract.core.listing import list_abstractions
from zabstract.core.query import ListZFSHoldsAndBookmarksQuery
from zabstract.core.taxonomy import UNLIMITED, num_live_per_fs_and_job
from zabstract.system.cancellation import CancelToken
from zabstract.system.exceptions import ListAbstractionsErrors, ValidationError


@dataclass
class StalenessInfo:
    constructed_with_query: Optional[ListZFSHoldsAndBookmarksQuery]
    all: list[Abstraction] = field(default_factory=list)
    live: list[Abstraction] = field(default_factory=list)
    stale: list[Abstraction] = field(default_factory=list)


def list_stale(driver, query: ListZFSHoldsAndBookmarksQuery,
               cancel: Optional[CancelToken] = None) -> StalenessInfo:
    """Enumerate `query` and classify the result.

    Raises:
        ValidationError: If the query is invalid or has an upper createtxg bound
        ListAbstractionsErrors: If any filesystem could not be enumerated completely
    """
    try:
        query.create_txg.validate()
    except ValidationError as e:
        raise ValidationError(f"CreateTXGRange: {e}") from e
    if query.create_txg.until is not None:
        # the most recent markers per filesystem must be visible
        raise ValidationError("list_stale cannot have an upper createtxg bound (Until) set on the query")

    abstractions, errors = list_abstractions(driver, query, cancel)
    if errors:
        # any error might hide the most recent marker of a group
        raise ListAbstractionsErrors(errors)

    info = classify_staleness(abstractions)
    info.constructed_with_query = query
    logger.debug(f"staleness for {query}: {len(info.live)} live, {len(info.stale)} stale")
    return info


def classify_staleness(abstractions: list[Abstraction]) -> StalenessInfo:
    """Partition `abstractions` into live and stale.

    The returned StalenessInfo has no constructed_with_query.
    """
    no_job_id: list[Abstraction] = []
    by_group: dict[tuple[str, JobID, AbstractionType], list[Abstraction]] = defaultdict(list)
    for a in abstractions:
        if a.job_id is None:
            no_job_id.append(a)
            continue
        by_group[(a.fs, a.job_id, a.type)].append(a)

    info = StalenessInfo(
        constructed_with_query=None,
        all=list(abstractions),
        live=no_job_id,
        stale=[],
    )

    for (_fs, _job, atype), group in by_group.items():
        group.sort(key=lambda a: a.createtxg, reverse=True)
        cutoff = num_live_per_fs_and_job(atype)
        if cutoff == UNLIMITED or len(group) <= cutoff:
            info.live.extend(group)
        else:
            info.live.extend(group[:cutoff])
            info.stale.extend(group[cutoff:])

    return info
