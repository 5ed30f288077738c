"""Tests for CreateService: entries, tasks, notes, collections and registries."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from nkt.domain.time import TimeZone
from nkt.domain.types import CollectionKind
from nkt.infrastructure.root import Root
from nkt.services.create import CreateService
from tests.conftest import FakeClock, add_note, add_task, make_service, new_tag, reload

# ---------------------------------------------------------------------------
# Journal entries
# ---------------------------------------------------------------------------


class TestLog:
    def test_basic_entry(self, root: Root) -> None:
        result = make_service(CreateService, root).log("hello there")
        assert result.ok
        assert result.op == "log"
        assert result.data["journal"] == "diary"
        assert result.data["day"] == "2024-01-07"
        assert result.data["time"] == "10:00:00"

    def test_entry_written_to_day_file(self, root: Root, tmp_path: Path) -> None:
        make_service(CreateService, root).log("hello there")
        stored = json.loads((tmp_path / "journal.diary" / "2024-01-07.json").read_text())
        assert [e["text"] for e in stored["entries"]] == ["hello there"]

    def test_inline_and_explicit_tags(self, root: Root) -> None:
        new_tag(root, "work")
        new_tag(root, "home")
        result = make_service(CreateService, root).log("call @work", tags=["home", "work"])
        assert result.ok
        assert result.data["tags"] == ["home", "work"]

    def test_unknown_tag_changes_nothing(self, root: Root, tmp_path: Path) -> None:
        result = make_service(CreateService, root).log("hello @nowhere")
        assert not result.ok
        assert result.error.code == "INVALID_TAG"
        assert root.get_journal().info.days == []
        assert not (tmp_path / "journal.diary" / "2024-01-07.json").exists()

    def test_uppercase_inline_tag(self, root: Root) -> None:
        result = make_service(CreateService, root).log("hello @World")
        assert result.error.code == "TAG_NOT_LOWERCASE"

    def test_other_journal(self, root: Root) -> None:
        create = make_service(CreateService, root)
        create.new_collection(CollectionKind.JOURNAL, "work")
        assert create.log("standup", journal="work").data["journal"] == "work"

    def test_unknown_journal(self, root: Root) -> None:
        result = make_service(CreateService, root).log("x", journal="nope")
        assert result.error.code == "NO_SUCH_COLLECTION"

    def test_timezone_decides_day(self, root: Root, clock: FakeClock) -> None:
        clock.now = clock.now.replace(hour=23, minute=30)
        tz = TimeZone(tz=timezone(timedelta(hours=2)), name="EET")
        result = make_service(CreateService, root, tz=tz).log("late")
        assert result.data["day"] == "2024-01-08"


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


class TestAddTask:
    def test_basic_task(self, root: Root) -> None:
        result = make_service(CreateService, root).add_task("water plants")
        assert result.ok
        assert result.data["index"] == "t0"
        assert len(result.data["hash"]) == 16
        assert result.data["mini_hash"] == result.data["hash"][:5]
        assert result.data["importance"] == "low"

    def test_due_and_importance(self, root: Root) -> None:
        result = make_service(CreateService, root).add_task(
            "water plants", due="tomorrow evening", importance="urgent"
        )
        assert result.data["due"] == "2024-01-08 19:00:00"
        assert result.data["importance"] == "urgent"

    def test_bad_due(self, root: Root) -> None:
        result = make_service(CreateService, root).add_task("x", due="whenever")
        assert result.error.code == "INVALID_TIMELIKE"
        assert root.get_tasklist().info.tasks == []

    def test_bad_importance(self, root: Root) -> None:
        result = make_service(CreateService, root).add_task("x", importance="medium")
        assert result.error.code == "UNKNOWN_IMPORTANCE"

    def test_persisted(self, root: Root) -> None:
        make_service(CreateService, root).add_task("water plants", "buy a can", details="big one")
        task = reload(root).get_tasklist().get_task("water plants")
        assert task.action == "buy a can"
        assert task.details == "big one"


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


class TestAddNote:
    def test_note_file_created(self, root: Root, tmp_path: Path) -> None:
        result = make_service(CreateService, root).add_note("hello", content="# Hi\n")
        assert result.ok
        assert result.data["path"] == "dir.notes/hello.md"
        assert (tmp_path / "dir.notes" / "hello.md").read_text() == "# Hi\n"

    def test_duplicate_note(self, root: Root) -> None:
        create = make_service(CreateService, root)
        create.add_note("hello")
        assert create.add_note("hello").error.code == "DUPLICATE_NOTE"

    def test_tagged_note(self, root: Root) -> None:
        new_tag(root, "idea")
        make_service(CreateService, root).add_note("hello", tags=["@idea"])
        assert [t.name for t in reload(root).get_directory().get_note("hello").tags] == ["idea"]

    @pytest.mark.parametrize("name", ["../../x", "a/b", ""])
    def test_unsafe_name(self, root: Root, name: str) -> None:
        result = make_service(CreateService, root).add_note(name)
        assert result.error.code == "INVALID_NAME"

    def test_directory_file_name_reserved(self, root: Root, tmp_path: Path) -> None:
        before = (tmp_path / "dir.notes" / "topology.json").read_text()
        result = make_service(CreateService, root).add_note("topology", ext="json", content="oops")
        assert result.error.code == "INVALID_NAME"
        assert (tmp_path / "dir.notes" / "topology.json").read_text() == before
        assert reload(root).get_directory().info.notes == []


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------

DENDRON_NOTE = """\
---
id: 4f2a
title: Garden plans
desc: ''
updated: 1704621600000
created: 1704535200000
---

Plant tomatoes in May.
"""


@pytest.fixture
def outside(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("outside")


class TestImportNotes:
    def test_copy_into_default_directory(self, root: Root, tmp_path: Path, outside: Path) -> None:
        (outside / "ideas.md").write_text("# Ideas\n")
        result = make_service(CreateService, root).import_files([outside / "ideas.md"])
        assert result.ok
        assert result.data["collection"] == "notes"
        assert result.data["imported"] == [{"name": "ideas", "path": "dir.notes/ideas.md", "pipeline": None}]
        assert (tmp_path / "dir.notes" / "ideas.md").read_text() == "# Ideas\n"
        assert (outside / "ideas.md").exists()
        assert reload(root).get_directory().find_note("ideas") is not None

    def test_move_into_named_directory(self, root: Root, tmp_path: Path, outside: Path) -> None:
        make_service(CreateService, root).new_collection(CollectionKind.DIRECTORY, "work")
        (outside / "plan.txt").write_text("plan")
        result = make_service(CreateService, root).import_files([outside / "plan.txt"], directory="work", move=True)
        assert result.data["imported"][0]["path"] == "dir.work/plan.txt"
        assert not (outside / "plan.txt").exists()
        assert reload(root).get_directory("work").get_note("plan").extension == "txt"

    def test_dendron_front_matter(self, root: Root, tmp_path: Path, outside: Path) -> None:
        (outside / "garden.plans.md").write_text(DENDRON_NOTE)
        result = make_service(CreateService, root).import_files([outside / "garden.plans.md"])
        assert result.data["imported"][0]["pipeline"] == "dendron"
        assert (tmp_path / "dir.notes" / "garden.plans.md").read_text() == "# Garden plans\nPlant tomatoes in May.\n"
        note = reload(root).get_directory().get_note("garden.plans")
        assert note.created == datetime(2024, 1, 6, 10, 0, tzinfo=UTC)
        assert note.modified == datetime(2024, 1, 7, 10, 0, tzinfo=UTC)

    def test_missing_file_imports_nothing(self, root: Root, tmp_path: Path, outside: Path) -> None:
        (outside / "a.md").write_text("a")
        result = make_service(CreateService, root).import_files([outside / "a.md", outside / "b.md"])
        assert result.error.code == "NO_SUCH_FILE"
        assert not (tmp_path / "dir.notes" / "a.md").exists()

    def test_existing_note_imports_nothing(self, root: Root, tmp_path: Path, outside: Path) -> None:
        add_note(root, "b")
        (outside / "a.md").write_text("a")
        (outside / "b.md").write_text("b")
        result = make_service(CreateService, root).import_files([outside / "a.md", outside / "b.md"], move=True)
        assert result.error.code == "DUPLICATE_NOTE"
        assert (outside / "a.md").exists()
        assert reload(root).get_directory().find_note("a") is None

    def test_same_stem_twice(self, root: Root, outside: Path) -> None:
        (outside / "x").mkdir()
        (outside / "a.md").write_text("a")
        (outside / "x" / "a.md").write_text("a")
        result = make_service(CreateService, root).import_files([outside / "a.md", outside / "x" / "a.md"])
        assert result.error.code == "DUPLICATE_ITEM"

    def test_reserved_name(self, root: Root, outside: Path) -> None:
        (outside / "topology.json").write_text("{}")
        result = make_service(CreateService, root).import_files([outside / "topology.json"])
        assert result.error.code == "INVALID_NAME"


class TestImportTasklists:
    def _exported(self, root: Root, tmp_path: Path, outside: Path) -> Path:
        make_service(CreateService, root).new_collection(CollectionKind.TASKLIST, "spare")
        add_task(root, "buy milk", tasklist="spare")
        target = outside / "groceries.json"
        target.write_text((tmp_path / "tasklists" / "spare.json").read_text())
        return target

    def test_adopted_as_new_tasklist(self, root: Root, tmp_path: Path, outside: Path) -> None:
        source = self._exported(root, tmp_path, outside)
        result = make_service(CreateService, root).import_files([source], as_tasklists=True)
        assert result.ok
        assert result.data["kind"] == "tasklist"
        assert result.data["imported"][0]["path"] == "tasklists/groceries.json"
        fresh = reload(root)
        assert "groceries" in fresh.collection_names(CollectionKind.TASKLIST)
        assert [t.outcome for t in fresh.get_tasklist("groceries").info.tasks] == ["buy milk"]

    def test_existing_name(self, root: Root, outside: Path) -> None:
        (outside / "todo.json").write_text("{}")
        result = make_service(CreateService, root).import_files([outside / "todo.json"], as_tasklists=True)
        assert result.error.code == "DUPLICATE_ITEM"

    def test_malformed_file(self, root: Root, tmp_path: Path, outside: Path) -> None:
        (outside / "broken.json").write_text('{"tasks": "nope"}')
        result = make_service(CreateService, root).import_files([outside / "broken.json"], as_tasklists=True)
        assert result.error.code == "TOPOLOGY_PARSE_ERROR"
        assert not (tmp_path / "tasklists" / "broken.json").exists()

    def test_needs_json(self, root: Root, outside: Path) -> None:
        (outside / "list.md").write_text("- milk")
        result = make_service(CreateService, root).import_files([outside / "list.md"], as_tasklists=True)
        assert result.error.code == "INVALID_NAME"


# ---------------------------------------------------------------------------
# Collections and registries
# ---------------------------------------------------------------------------


class TestRegistries:
    @pytest.mark.parametrize(
        ("kind", "path"),
        [
            (CollectionKind.DIRECTORY, "dir.work/topology.json"),
            (CollectionKind.JOURNAL, "journal.work/topology.json"),
            (CollectionKind.TASKLIST, "tasklists/work.json"),
        ],
    )
    def test_new_collection(self, root: Root, tmp_path: Path, kind: CollectionKind, path: str) -> None:
        result = make_service(CreateService, root).new_collection(kind, "work")
        assert result.data["path"] == path
        assert (tmp_path / path).is_file()
        assert "work" in reload(root).collection_names(kind)

    def test_duplicate_collection(self, root: Root) -> None:
        result = make_service(CreateService, root).new_collection(CollectionKind.TASKLIST, "todo")
        assert result.error.code == "DUPLICATE_ITEM"

    def test_new_tag(self, root: Root) -> None:
        result = make_service(CreateService, root).new_tag("@work")
        assert result.data["name"] == "work"
        assert result.data["color"].startswith("#")
        assert reload(root).tags().get("work") is not None

    def test_duplicate_tag(self, root: Root) -> None:
        new_tag(root, "work")
        assert make_service(CreateService, root).new_tag("work").error.code == "DUPLICATE_ITEM"

    def test_new_chain_alias_clash(self, root: Root) -> None:
        create = make_service(CreateService, root)
        assert create.new_chain("running", alias="run").ok
        assert create.new_chain("run").error.code == "DUPLICATE_ITEM"
        assert reload(root).chains().get_chain("run").name == "running"

    def test_new_stack(self, root: Root) -> None:
        create = make_service(CreateService, root)
        assert create.new_stack("reading").ok
        assert not create.new_stack("reading").ok
        assert reload(root).stacks().get_stack("reading").items == []
