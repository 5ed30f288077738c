"""Shared pytest fixtures and test helpers for nkt tests."""

from __future__ import annotations

import json
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from nkt.domain.time import TimeZone
from nkt.infrastructure.root import Root
from nkt.services.base import BaseService
from nkt.services.telemetry import disable_telemetry

# Sunday, 10:00 UTC.
FIXED_NOW = datetime(2024, 1, 7, 10, 0, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tz() -> TimeZone:
    return TimeZone.utc()


@pytest.fixture
def root(tmp_path: Path, clock: FakeClock) -> Root:
    """Root on a temp directory with the default collections written out."""
    r = Root.at(tmp_path, clock=clock)
    r.add_initial_collections()
    r.create_filesystem()
    return r


@pytest.fixture
def memory_root(clock: FakeClock) -> Root:
    """Root without a filesystem; collections live only in the cache."""
    r = Root(clock=clock)
    r.add_initial_collections()
    return r


@pytest.fixture(autouse=True)
def _telemetry_off() -> Generator[None]:
    yield
    disable_telemetry()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at a temp root directory, in UTC.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command
    test classes; ``tmp_path`` is the same directory.
    """
    for var in ("NKT_SELECTION__DIRECTORY_INDEX", "NKT_JSON_OUTPUT", "NKT_QUIET", "NKT_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NKT_ROOT_DIR", str(tmp_path))
    monkeypatch.setenv("NKT_TIME__TIMEZONE", "UTC")
    return tmp_path


@pytest.fixture
def _initialized_root(_isolated_root: Path, cli_runner: CliRunner) -> Path:
    """An isolated root on which `nkt init` has already run."""
    result = invoke(cli_runner, "init")
    assert result.exit_code == 0, result.output
    return _isolated_root


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def invoke(runner: CliRunner, *args: str, input: str | None = None) -> Result:
    """Run the nkt CLI with *args*."""
    from nkt.cli import cli

    return runner.invoke(cli, list(args), input=input)


def invoke_json(runner: CliRunner, *args: str) -> dict[str, Any]:
    """Run the nkt CLI in JSON mode, asserting success; returns the payload."""
    result = invoke(runner, "--json", *args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def reload(root: Root) -> Root:
    """A fresh Root over the same directory, loaded from disk."""
    assert root.fs is not None
    fresh = Root.at(root.fs.root, clock=root.clock)
    fresh.load()
    return fresh


def make_service[S: BaseService](cls: type[S], root: Root, **kwargs: Any) -> S:
    """Build a service in UTC using the root's clock."""
    kwargs.setdefault("tz", TimeZone.utc())
    return cls(root, clock=root.clock, **kwargs)


def log_entry(root: Root, text: str, **kwargs: Any) -> dict[str, Any]:
    """Add a journal entry via CreateService, asserting success."""
    from nkt.services.create import CreateService

    result = make_service(CreateService, root).log(text, **kwargs)
    assert result.ok, result.error
    return result.data


def add_task(root: Root, outcome: str, *args: Any, **kwargs: Any) -> dict[str, Any]:
    """Add a task via CreateService, asserting success."""
    from nkt.services.create import CreateService

    result = make_service(CreateService, root).add_task(outcome, *args, **kwargs)
    assert result.ok, result.error
    return result.data


def add_note(root: Root, name: str, **kwargs: Any) -> dict[str, Any]:
    """Add a note via CreateService, asserting success."""
    from nkt.services.create import CreateService

    result = make_service(CreateService, root).add_note(name, **kwargs)
    assert result.ok, result.error
    return result.data


def new_tag(root: Root, name: str) -> None:
    from nkt.services.create import CreateService

    result = make_service(CreateService, root).new_tag(name)
    assert result.ok, result.error
