# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.11
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_naming_jobid.py

import pytest

from zabstract.core.jobid import JobID
from zabstract.core.naming import (
    REPLICATION_CURSOR_BOOKMARK_NAME_PREFIX,
    STEP_BOOKMARK_NAME_PREFIX,
    job_and_guid_bookmark_name,
    last_received_hold_tag_for,
    parse_job_and_guid_bookmark_name,
    parse_last_received_hold_tag,
    parse_step_hold_tag,
    step_hold_tag_for,
)
from zabstract.system.exceptions import ValidationError
from zabstract.zfs.names import EntityType, decompose_version_string, entity_namecheck


class TestMarkerNames:
    def test_step_hold_tag(self):
        assert step_hold_tag_for("backup") == "zrepl_STEP_J_backup"
        assert parse_step_hold_tag("zrepl_STEP_J_backup") == "backup"

    def test_last_received_hold_tag(self):
        assert last_received_hold_tag_for("backup") == "zrepl_last_received_J_backup"
        assert parse_last_received_hold_tag("zrepl_last_received_J_backup") == "backup"

    def test_hold_tag_parsers_reject_other_tags(self):
        with pytest.raises(ValidationError):
            parse_step_hold_tag("zrepl_last_received_J_backup")
        with pytest.raises(ValidationError):
            parse_last_received_hold_tag("zrepl_STEP_J_backup")
        with pytest.raises(ValidationError):
            parse_step_hold_tag("zrepl_STEP_J_")

    def test_step_bookmark_name_encodes_guid_as_hex(self):
        name = job_and_guid_bookmark_name(STEP_BOOKMARK_NAME_PREFIX, "pool/data", 0xabc, "backup")
        assert name == "zrepl_STEP_G_0000000000000abc_J_backup"

    def test_parse_bookmark_name(self):
        guid, job = parse_job_and_guid_bookmark_name(
            "pool/data#zrepl_CURSOR_G_00000000deadbeef_J_offsite", REPLICATION_CURSOR_BOOKMARK_NAME_PREFIX
        )
        assert guid == 0xDEADBEEF
        assert job == "offsite"

    def test_parse_bookmark_name_wrong_prefix(self):
        with pytest.raises(ValidationError, match="does not match"):
            parse_job_and_guid_bookmark_name(
                "pool/data#zrepl_CURSOR_G_00000000deadbeef_J_offsite", STEP_BOOKMARK_NAME_PREFIX
            )

    def test_parse_bookmark_name_requires_bookmark(self):
        with pytest.raises(ValidationError):
            parse_job_and_guid_bookmark_name(
                "pool/data@zrepl_STEP_G_00000000deadbeef_J_offsite", STEP_BOOKMARK_NAME_PREFIX
            )

    def test_parse_bookmark_name_without_guid(self):
        with pytest.raises(ValidationError):
            parse_job_and_guid_bookmark_name("pool/data#zrepl_STEP_J_offsite", STEP_BOOKMARK_NAME_PREFIX)

    def test_bookmark_name_too_long(self):
        with pytest.raises(ValidationError, match="maximum length"):
            job_and_guid_bookmark_name(STEP_BOOKMARK_NAME_PREFIX, "pool/" + "x" * 200, 1, "j" * 40)


class TestJobID:
    def test_make_valid(self):
        jid = JobID.make("backup-1")
        assert str(jid) == "backup-1"
        assert jid == JobID("backup-1")
        jid.validate()

    def test_jobids_are_ordered_and_hashable(self):
        assert sorted([JobID("b"), JobID("a")]) == [JobID("a"), JobID("b")]
        assert len({JobID("a"), JobID.make("a")}) == 1

    def test_empty(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            JobID.make("")

    @pytest.mark.parametrize("bad", ["with/slash", "at@sign", "hash#sign", "..", "ümlaut"])
    def test_invalid_component(self, bad):
        with pytest.raises(ValidationError, match="dataset path component"):
            JobID.make(bad)

    def test_too_long_for_bookmark_name(self):
        with pytest.raises(ValidationError, match="usable for a step bookmark"):
            JobID.make("j" * 240)

    def test_validate_rechecks_constructed_value(self):
        with pytest.raises(ValidationError):
            JobID("bad/job").validate()


class TestNamecheck:
    def test_valid_names(self):
        entity_namecheck("pool/data", EntityType.FILESYSTEM)
        entity_namecheck("pool/data@snap-1", EntityType.SNAPSHOT)
        entity_namecheck("pool/data#bm_1", EntityType.BOOKMARK)

    @pytest.mark.parametrize("path, etype", [
        ("pool/data@snap", EntityType.FILESYSTEM),
        ("/pool", EntityType.FILESYSTEM),
        ("pool//data", EntityType.FILESYSTEM),
        ("pool/data", EntityType.SNAPSHOT),
        ("pool/data#bm", EntityType.SNAPSHOT),
        ("pool@a#b", EntityType.BOOKMARK),
    ])
    def test_invalid_names(self, path, etype):
        with pytest.raises(ValidationError):
            entity_namecheck(path, etype)

    def test_decompose_version_string(self):
        assert decompose_version_string("pool/a#bm") == ("pool/a", "#", "bm")
        assert decompose_version_string("pool/a@s") == ("pool/a", "@", "s")
        with pytest.raises(ValidationError):
            decompose_version_string("pool/a")
