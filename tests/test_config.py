# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.07.11
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_config.py

import os
from pathlib import Path

import pytest
import yaml

from zabstract.config.manager import (
    ALLOW_CREATETXG_ZERO_ENV,
    CONFIG_FILE,
    ZAbstractConfig,
    _get_config_search_paths,
    createtxg_zero_allowed,
    load_config,
)
from zabstract.system.exceptions import ConfigError


def write_config(directory: Path, data) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / CONFIG_FILE
    with path.open("w") as f:
        yaml.safe_dump(data, f)
    return path


class TestLoadConfig:
    def test_defaults_without_files(self):
        config = load_config()
        assert config == ZAbstractConfig()
        assert config.zfs_binary == "zfs"
        assert config.use_sudo is False
        assert config.concurrency == 1
        assert config.command_timeout is None
        assert config.local_log is None

    def test_later_paths_win(self, tmp_path):
        low = write_config(tmp_path / "low", {"concurrency": 2, "use_sudo": True})
        high = write_config(tmp_path / "high", {"concurrency": 8})
        config = load_config((low, high))
        assert config.concurrency == 8
        assert config.use_sudo is True

    def test_env_override_directory(self, tmp_path):
        write_config(Path(os.environ["ZABSTRACT_CONFIG_HOME"]), {"zfs_binary": "/usr/sbin/zfs"})
        assert load_config().zfs_binary == "/usr/sbin/zfs"

    def test_search_path_order(self, tmp_path):
        paths = _get_config_search_paths()
        assert paths[0] == Path("/etc/zabstract") / CONFIG_FILE
        assert paths[-1] == Path(os.environ["ZABSTRACT_CONFIG_HOME"]) / CONFIG_FILE

    def test_unknown_key_is_rejected(self, tmp_path):
        path = write_config(tmp_path, {"concurency": 3})
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config((path,))

    def test_invalid_value_is_rejected(self, tmp_path):
        path = write_config(tmp_path, {"concurrency": 0})
        with pytest.raises(ConfigError):
            load_config((path,))

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config((path,))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text("concurrency: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to load config"):
            load_config((path,))

    def test_empty_file_means_defaults(self, tmp_path):
        path = tmp_path / CONFIG_FILE
        path.write_text("")
        assert load_config((path,)) == ZAbstractConfig()


class TestCreateTXGZeroSwitch:
    def test_off_by_default(self):
        assert createtxg_zero_allowed() is False

    @pytest.mark.parametrize("value, expected", [
        ("1", True), ("true", True), ("YES", True), ("on", True),
        ("0", False), ("false", False), ("", False),
    ])
    def test_env_values(self, monkeypatch, value, expected):
        monkeypatch.setenv(ALLOW_CREATETXG_ZERO_ENV, value)
        assert createtxg_zero_allowed() is expected
