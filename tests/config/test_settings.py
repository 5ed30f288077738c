"""Tests for NktSettings: unified settings with TOML source."""

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from nkt.config.settings import NktSettings
from nkt.domain.types import DirectoryIndexPolicy
from nkt.errors import InvalidTimelike


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (
        "NKT_ROOT_DIR",
        "NKT_TIME__TIMEZONE",
        "NKT_SELECTION__DIRECTORY_INDEX",
        "NKT_JSON_OUTPUT",
        "NKT_QUIET",
        "NKT_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = NktSettings.from_cli(root_dir=tmp_path)
        assert settings.root_dir == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.time.timezone is None
        assert settings.selection.directory_index is DirectoryIndexPolicy.REJECT

    def test_frozen(self, tmp_path: Path) -> None:
        settings = NktSettings.from_cli(root_dir=tmp_path)
        with pytest.raises(ValidationError):
            settings.quiet = True  # type: ignore[misc]

    def test_root_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NKT_ROOT_DIR", str(tmp_path))
        assert NktSettings.from_cli().root_dir == tmp_path


class TestSources:
    def test_toml_in_root(self, tmp_path: Path) -> None:
        (tmp_path / "nkt.toml").write_text('[time]\ntimezone = "UTC"\n\n[selection]\ndirectory_index = "date"\n')
        settings = NktSettings.from_cli(root_dir=tmp_path)
        assert settings.config_path == tmp_path / "nkt.toml"
        assert settings.time.timezone == "UTC"
        assert settings.selection.directory_index is DirectoryIndexPolicy.DATE

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        config = tmp_path / "other.toml"
        config.write_text('[time]\ntimezone = "Europe/Berlin"\n')
        settings = NktSettings.from_cli(root_dir=tmp_path, config_path=str(config))
        assert settings.time.timezone == "Europe/Berlin"

    def test_missing_explicit_config_is_ignored(self, tmp_path: Path) -> None:
        settings = NktSettings.from_cli(root_dir=tmp_path, config_path=str(tmp_path / "nope.toml"))
        assert settings.config_path is None

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "nkt.toml").write_text('[selection]\ndirectory_index = "date"\n')
        monkeypatch.setenv("NKT_SELECTION__DIRECTORY_INDEX", "reject")
        settings = NktSettings.from_cli(root_dir=tmp_path)
        assert settings.selection.directory_index is DirectoryIndexPolicy.REJECT

    def test_cli_flag_beats_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NKT_QUIET", "false")
        assert NktSettings.from_cli(root_dir=tmp_path, quiet=True).quiet is True

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "nkt.toml").write_text("[time\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            NktSettings.from_cli(root_dir=tmp_path)


class TestTimezone:
    def test_utc(self, tmp_path: Path) -> None:
        (tmp_path / "nkt.toml").write_text('[time]\ntimezone = "utc"\n')
        assert NktSettings.from_cli(root_dir=tmp_path).timezone().name == "UTC"

    def test_unknown(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NKT_TIME__TIMEZONE", "Not/AZone")
        with pytest.raises(InvalidTimelike):
            NktSettings.from_cli(root_dir=tmp_path).timezone()
