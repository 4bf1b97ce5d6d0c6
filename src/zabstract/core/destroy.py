# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.09
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/destroy.py

import threading
from dataclasses import dataclass
from typing import Any, Optional

import orjson
from loguru import logger

from zabstract.core.abstraction import Abstraction
from zabstract.system.cancellation import CancelToken
from zabstract.system.channels import Channel
from zabstract.system.exceptions import ZAbstractError


@dataclass(frozen=True)
class BatchDestroyResult:
    abstraction: Abstraction
    destroy_error: Optional[ZAbstractError] = None

    @property
    def ok(self) -> bool:
        return self.destroy_error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "Abstraction": self.abstraction.to_dict(),
            "DestroyErr": "" if self.destroy_error is None else str(self.destroy_error),
        }

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())


def batch_destroy(driver, abstractions: list[Abstraction],
                  cancel: Optional[CancelToken] = None) -> Channel[BatchDestroyResult]:
    """Destroy each abstraction, one store operation each, strictly in order.

    Yields exactly one result per input on the returned channel. A failed
    destroy is recorded and the batch continues; nothing is retried.
    """
    # TODO: release several holds on the same snapshot with a single zfs release call
    results: Channel[BatchDestroyResult] = Channel()
    items = list(abstractions)

    def run() -> None:
        attempted = 0
        failed = 0
        unexpected: Optional[BaseException] = None
        try:
            for a in items:
                attempted += 1
                try:
                    a.destroy(driver, cancel)
                    logger.debug(f"destroyed {a}")
                    results.put(BatchDestroyResult(a))
                except ZAbstractError as e:
                    failed += 1
                    logger.warning(f"cannot destroy {a}: {e}")
                    results.put(BatchDestroyResult(a, e))
        except BaseException as e:
            unexpected = e
            logger.error(f"batch destroy aborted after {attempted} of {len(items)} item(s): {e!r}")
        finally:
            logger.debug(f"batch destroy finished: {attempted} of {len(items)} item(s) attempted, {failed} failed")
            results.close(unexpected)

    threading.Thread(target=run, name="batch-destroy", daemon=True).start()
    return results
