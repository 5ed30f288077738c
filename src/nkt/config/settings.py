"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``NKT_*`` prefix
  3. TOML file: ``nkt.toml`` in the root directory
  4. Code defaults: baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from nkt.config.discovery import default_root, find_config
from nkt.config.models import SelectionConfig, TimeConfig
from nkt.domain.time import TimeZone


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``nkt.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


_tls = threading.local()


class NktSettings(BaseSettings):
    """Unified settings for the nkt CLI, stored on the click context.

    Attributes:
        root_dir: Directory holding ``topology.json`` and all collections.
        config_path: The TOML file actually read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "NKT_",
        "env_nested_delimiter": "__",
    }

    root_dir: Path = Field(default_factory=default_root)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    time: TimeConfig = Field(default_factory=TimeConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root_dir: Path | None = None,
        **cli_flags: Any,
    ) -> NktSettings:
        """Construct settings from a CLI invocation.

        An explicit *root_dir* wins over ``NKT_ROOT_DIR``; the config
        file defaults to ``nkt.toml`` inside the resolved root.
        """
        resolved_root = root_dir if root_dir is not None else default_root()

        toml_path: Path | None
        if config_path:
            p = Path(config_path)
            toml_path = p if p.is_file() else None
        else:
            toml_path = find_config(resolved_root)

        _tls.toml_path = toml_path
        try:
            return cls(
                root_dir=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    def timezone(self) -> TimeZone:
        """The configured :class:`TimeZone` (system local by default)."""
        return TimeZone.from_name(self.time.timezone)
