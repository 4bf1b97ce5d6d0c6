# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.11
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/conftest.py

"""
Shared test fixtures for the zabstract test suite.
"""

import pytest
from loguru import logger

from zabstract.config.manager import ALLOW_CREATETXG_ZERO_ENV

from tests.fixtures.fake_zfs import FakeZFSDriver


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the developer's config files and env switches out of the tests."""
    monkeypatch.delenv(ALLOW_CREATETXG_ZERO_ENV, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("ZABSTRACT_CONFIG_HOME", str(tmp_path / "zabstract-config"))
    yield
    # CLI runs point loguru at streams that are closed after the run
    logger.remove()


@pytest.fixture
def driver():
    return FakeZFSDriver()


@pytest.fixture
def replicated_driver():
    """Two filesystems with markers of jobs 'backup' and 'offsite'.

    pool/data: step bookmarks at 10, 20, 30 and step holds at 15, 25 (backup),
    one step bookmark at 40 (offsite) and a v1 cursor at 5.
    pool/home: last-received holds at 100, 200 (backup) and a v2 cursor at 150.
    """
    d = FakeZFSDriver()
    d.add_step_bookmark("pool/data", "backup", 10)
    d.add_step_bookmark("pool/data", "backup", 20)
    d.add_step_bookmark("pool/data", "backup", 30)
    d.add_step_hold("pool/data", "snap15", "backup", 15)
    d.add_step_hold("pool/data", "snap25", "backup", 25)
    d.add_step_bookmark("pool/data", "offsite", 40)
    d.add_v1_cursor("pool/data", 5)
    d.add_last_received_hold("pool/home", "r100", "backup", 100)
    d.add_last_received_hold("pool/home", "r200", "backup", 200)
    d.add_cursor_bookmark("pool/home", "backup", 150)
    return d
