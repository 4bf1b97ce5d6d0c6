# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.11
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_query.py

import pytest

from zabstract.core.abstraction import AbstractionType
from zabstract.core.createtxg_range import CreateTXGRange, CreateTXGRangeBound
from zabstract.core.jobid import JobID
from zabstract.core.query import FilesystemFilter
from zabstract.system.exceptions import ImplementationError, ValidationError
from zabstract.zfs.filters import DatasetMapFilter

from tests.fixtures.queries import make_query


class TestFilesystemFilter:
    def test_needs_exactly_one_of_fs_and_filter(self):
        with pytest.raises(ValidationError, match="fsIsSet=False and filterIsSet=False"):
            FilesystemFilter().validate()
        with pytest.raises(ValidationError, match="fsIsSet=True and filterIsSet=True"):
            FilesystemFilter(fs="pool", filter=DatasetMapFilter(["pool<"])).validate()

    def test_invalid_fs_name(self):
        with pytest.raises(ValidationError, match="FS invalid"):
            FilesystemFilter(fs="pool@snap").validate()

    def test_literal_fs_resolves_without_store_call(self, driver):
        assert FilesystemFilter(fs="pool/data").filesystems(driver) == ["pool/data"]
        assert driver.calls == []

    def test_filter_resolves_through_store(self, replicated_driver):
        replicated_driver.add_filesystem("tank/other")
        fss = FilesystemFilter(filter=DatasetMapFilter(["pool<"])).filesystems(replicated_driver)
        assert fss == ["pool/data", "pool/home"]

    def test_unvalidated_use_is_implementation_error(self, driver):
        with pytest.raises(ImplementationError):
            FilesystemFilter().filesystems(driver)


class TestQueryValidation:
    def test_valid_query(self):
        q = make_query(job_id=JobID.make("backup"), concurrency=4)
        q.validate()
        assert "job=backup" in str(q)
        assert "concurrency=4" in str(q)

    def test_fs_errors_are_prefixed(self):
        q = make_query(fs_filter=FilesystemFilter())
        with pytest.raises(ValidationError, match="^FS: must set FS or Filter"):
            q.validate()

    def test_invalid_job_is_validation_error(self):
        q = make_query(job_id=JobID("bad/job"))
        with pytest.raises(ValidationError, match="^JobID:"):
            q.validate()

    def test_invalid_range(self):
        q = make_query(create_txg=CreateTXGRange(
            since=CreateTXGRangeBound(20, True), until=CreateTXGRangeBound(10, True)))
        with pytest.raises(ValidationError, match="^CreateTXGRange:"):
            q.validate()

    def test_invalid_type_in_set(self):
        q = make_query(what={AbstractionType.STEP_HOLD, "bogus"})
        with pytest.raises(ValidationError, match="unknown abstraction type"):
            q.validate()

    @pytest.mark.parametrize("concurrency", [0, -3])
    def test_concurrency_must_be_positive(self, concurrency):
        with pytest.raises(ValidationError, match="Concurrency"):
            make_query(concurrency=concurrency).validate()
