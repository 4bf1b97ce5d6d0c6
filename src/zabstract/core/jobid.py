# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.05
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/jobid.py

from dataclasses import dataclass

from zabstract.core.naming import (
    REPLICATION_CURSOR_BOOKMARK_NAME_PREFIX,
    STEP_BOOKMARK_NAME_PREFIX,
    job_and_guid_bookmark_name,
    last_received_hold_tag_for,
    step_hold_tag_for,
)
from zabstract.system.exceptions import ValidationError
from zabstract.zfs.names import component_namecheck

# Only used to check that a job name fits into a bookmark name
_PROBE_FS = "pool/ds"
_PROBE_GUID = 0xface601d


@dataclass(frozen=True, order=True)
class JobID:
    """Name of the replication job that owns a marker."""
    jid: str

    @classmethod
    def make(cls, s: str) -> "JobID":
        """Validate `s` and wrap it.

        A job name must be a valid dataset path component and must fit into
        every hold tag and bookmark name the markers use. Total name length
        can still overflow for very long filesystem paths; that surfaces when
        the marker is created.
        """
        if not s:
            raise ValidationError("JobID must not be empty string")
        try:
            component_namecheck(s)
        except ValidationError as e:
            raise ValidationError(f"JobID must be usable as a dataset path component: {e}") from e
        checks = (
            ("step bookmark", lambda: job_and_guid_bookmark_name(STEP_BOOKMARK_NAME_PREFIX, _PROBE_FS, _PROBE_GUID, s)),
            ("replication cursor bookmark",
             lambda: job_and_guid_bookmark_name(REPLICATION_CURSOR_BOOKMARK_NAME_PREFIX, _PROBE_FS, _PROBE_GUID, s)),
            ("step hold tag", lambda: step_hold_tag_for(s)),
            ("last-received hold tag", lambda: last_received_hold_tag_for(s)),
        )
        for what, check in checks:
            try:
                check()
            except ValidationError as e:
                raise ValidationError(f"JobID must be usable for a {what}: {e}") from e
        return cls(s)

    def validate(self) -> None:
        JobID.make(self.jid)

    def __str__(self) -> str:
        return self.jid
