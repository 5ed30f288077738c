"""Tests for InitService: creating a fresh root."""

from __future__ import annotations

import json
from pathlib import Path

from nkt.infrastructure.root import Root
from nkt.services.init import InitService
from tests.conftest import FakeClock, add_task, make_service, reload


class TestInit:
    def test_creates_root(self, tmp_path: Path, clock: FakeClock) -> None:
        result = make_service(InitService, Root.at(tmp_path, clock=clock)).init()
        assert result.ok
        assert result.data["root"] == str(tmp_path)
        assert result.data["directories"] == ["notes", "diary"]
        assert result.data["journals"] == ["diary"]
        assert result.data["tasklists"] == ["todo"]
        for path in ("topology.json", "tags.json", "chains.json", "stacks.json"):
            assert (tmp_path / path).is_file()
        assert (tmp_path / "dir.notes").is_dir()
        assert (tmp_path / "journal.diary").is_dir()

    def test_topology_is_loadable(self, tmp_path: Path, clock: FakeClock) -> None:
        make_service(InitService, Root.at(tmp_path, clock=clock)).init()
        root = Root.at(tmp_path, clock=clock)
        root.load()
        assert root.info.default_journal == "diary"
        assert json.loads((tmp_path / "topology.json").read_text())["editor"] == ["vim"]

    def test_refuses_existing_root(self, root: Root) -> None:
        add_task(root, "keep me")
        result = make_service(InitService, reload(root)).init()
        assert not result.ok
        assert result.error.code == "ALREADY_INITIALIZED"
        assert reload(root).get_tasklist().get_task("keep me")

    def test_force_overwrites(self, root: Root) -> None:
        add_task(root, "gone")
        result = make_service(InitService, reload(root)).init(force=True)
        assert result.ok
        assert reload(root).get_tasklist().info.tasks == []

    def test_memory_root(self, memory_root: Root) -> None:
        result = make_service(InitService, memory_root).init()
        assert result.error.code == "NEEDS_FILESYSTEM"
