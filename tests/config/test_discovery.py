"""Tests for root directory and config file discovery."""

from pathlib import Path

import pytest

from nkt.config.discovery import CONFIG_FILENAME, DEFAULT_ROOT_NAME, default_root, find_config


class TestFindConfig:
    def test_finds_in_root(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[time]\n")
        assert find_config(tmp_path) == config_file

    def test_does_not_walk_up(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("[time]\n")
        child = tmp_path / "inner"
        child.mkdir()
        assert find_config(child) is None

    def test_directory_named_like_config_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).mkdir()
        assert find_config(tmp_path) is None


class TestDefaultRoot:
    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NKT_ROOT_DIR", str(tmp_path))
        assert default_root() == tmp_path

    def test_home_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NKT_ROOT_DIR", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_root() == tmp_path / DEFAULT_ROOT_NAME
