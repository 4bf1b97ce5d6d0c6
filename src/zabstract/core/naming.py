# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.05
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/zabstract/core/naming.py

"""
Bookmark names and hold tags that encode replication markers.

    step hold               zrepl_STEP_J_<job>
    last-received hold      zrepl_last_received_J_<job>
    step bookmark           zrepl_STEP_G_<guid:016x>_J_<job>
    cursor bookmark (v2)    zrepl_CURSOR_G_<guid:016x>_J_<job>
    cursor bookmark (v1)    zrepl_replication_cursor

These functions work on raw job strings; JobID uses them to check that a
job name is usable in every marker.
"""

import re

from zabstract.system.exceptions import ValidationError
from zabstract.zfs.names import EntityType, decompose_version_string, entity_namecheck, valid_hold_tag

STEP_HOLD_TAG_PREFIX = "zrepl_STEP_J_"
LAST_RECEIVED_HOLD_TAG_PREFIX = "zrepl_last_received_J_"
STEP_BOOKMARK_NAME_PREFIX = "zrepl_STEP"
REPLICATION_CURSOR_BOOKMARK_NAME_PREFIX = "zrepl_CURSOR"
REPLICATION_CURSOR_BOOKMARK_NAME_V1 = "zrepl_replication_cursor"

_STEP_HOLD_TAG_RE = re.compile(r"^zrepl_STEP_J_(.+)$")
_LAST_RECEIVED_HOLD_TAG_RE = re.compile(r"^zrepl_last_received_J_(.+)$")
_JOB_AND_GUID_BOOKMARK_RE = re.compile(r"^(.+)_G_([0-9a-f]{16})_J_(.+)$")


def step_hold_tag_for(job: str) -> str:
    tag = f"{STEP_HOLD_TAG_PREFIX}{job}"
    valid_hold_tag(tag)
    return tag


def last_received_hold_tag_for(job: str) -> str:
    tag = f"{LAST_RECEIVED_HOLD_TAG_PREFIX}{job}"
    valid_hold_tag(tag)
    return tag


def job_and_guid_bookmark_name(prefix: str, fs: str, guid: int, job: str) -> str:
    name = f"{prefix}_G_{guid:016x}_J_{job}"
    entity_namecheck(f"{fs}#{name}", EntityType.BOOKMARK)
    return name


def parse_step_hold_tag(tag: str) -> str:
    """Return the raw job string of a step hold tag."""
    m = _STEP_HOLD_TAG_RE.match(tag)
    if m is None:
        raise ValidationError(f"step hold tag must match {_STEP_HOLD_TAG_RE.pattern!r}")
    return m.group(1)


def parse_last_received_hold_tag(tag: str) -> str:
    """Return the raw job string of a last-received hold tag."""
    m = _LAST_RECEIVED_HOLD_TAG_RE.match(tag)
    if m is None:
        raise ValidationError(f"last-received hold tag must match {_LAST_RECEIVED_HOLD_TAG_RE.pattern!r}")
    return m.group(1)


def parse_job_and_guid_bookmark_name(full_name: str, prefix: str) -> tuple[int, str]:
    """Split a full `fs#<prefix>_G_<guid>_J_<job>` bookmark name into (guid, job).

    Raises:
        ValidationError: If the name is not such a bookmark
    """
    entity_namecheck(full_name, EntityType.BOOKMARK)
    _, _, name = decompose_version_string(full_name)
    m = _JOB_AND_GUID_BOOKMARK_RE.match(name)
    if m is None:
        raise ValidationError(f"bookmark name {name!r} does not match {_JOB_AND_GUID_BOOKMARK_RE.pattern!r}")
    if m.group(1) != prefix:
        raise ValidationError(f"prefix component {m.group(1)!r} does not match {prefix!r}")
    return int(m.group(2), 16), m.group(3)
