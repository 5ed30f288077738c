"""Parametrized help tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from tests.conftest import invoke

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    # -- groups --
    (["new", "--help"], ["journal", "directory", "tasklist", "tag", "chain", "stack"]),
    (["new", "chain", "--help"], ["--alias", "--details"]),
    (["chain", "--help"], ["list", "complete"]),
    (["chain", "list", "--help"], ["--all"]),
    (["stack", "--help"], ["push", "pop", "peek"]),
    (["stack", "push", "--help"], ["--message", "--position", "--journal"]),
    (["stack", "pop", "--help"], ["--index"]),
    # -- standalone --
    (["init", "--help"], ["--force"]),
    (["select", "--help"], ["--journal", "--directory", "--tasklist", "--time"]),
    (["read", "--help"], ["--time"]),
    (["log", "--help"], ["TEXT", "--journal", "--tag"]),
    (["task", "--help"], ["OUTCOME", "ACTION", "--due", "--importance"]),
    (["set", "--help"], ["--done", "--undone", "--archive", "--no-due"]),
    (["note", "--help"], ["--directory", "--ext", "--stdin"]),
    (["import", "--help"], ["--directory", "--tasklist", "--move"]),
    (["tag", "--help"], ["TAGS", "--delete"]),
    (["rename", "--help"], ["NEW_NAME", "--to-directory"]),
    (["remove", "--help"], ["--tasklist"]),
    (["list", "--help"], ["--all"]),
]


@pytest.mark.parametrize(
    ("args", "keywords"),
    HELP_COMMANDS,
    ids=[" ".join(a) for a, _ in HELP_COMMANDS],
)
def test_help(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = invoke(cli_runner, *args)
    assert result.exit_code == 0, result.output
    for keyword in keywords:
        assert keyword in result.output, f"{keyword!r} missing from {' '.join(args)}"


def test_help_needs_no_root(cli_runner: CliRunner, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NKT_ROOT_DIR", str(tmp_path / "missing"))
    assert invoke(cli_runner, "select", "--help").exit_code == 0
    assert not (tmp_path / "missing").exists()
