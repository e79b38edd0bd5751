# tests/test_state.py

from __future__ import annotations

import json
import logging
from datetime import date

import pytest

from datebook.cli.bootstrap import create_initial_state
from datebook.core.state import AppState
from datebook.storage import MemoryStorage
from datebook.storage.sqlite_storage import SqliteKeyValueStorage
from datebook.tasks.task_models import TaskNotFoundError, ViewMode
from datebook.tasks.task_store import TaskStore

from .conftest import TODAY
from .fakes import ExplodingRenderer, FlakyStorage, ReadOnlyStorage, RecordingRenderer


def test_add_task_saves_and_renders(state: AppState, storage: MemoryStorage, renderer: RecordingRenderer) -> None:
    snap = state.add_task("buy milk")

    assert json.loads(storage.data["tasks"]) == {"2024-03-06": [{"text": "buy milk", "completed": False}]}
    assert renderer.last is snap
    assert renderer.texts() == ["buy milk"]
    assert snap.header_label == "Wednesday"
    assert state.last_snapshot is snap


def test_add_task_uses_reference_date_not_today(state: AppState, renderer: RecordingRenderer) -> None:
    state.navigate(1)
    state.add_task("tomorrow's task")
    assert state.task_store.get("2024-03-07")[0].text == "tomorrow's task"
    assert state.task_store.get("2024-03-06") == []


def test_toggle_and_delete_cycle(state: AppState, storage: MemoryStorage, renderer: RecordingRenderer) -> None:
    state.add_task("a")
    state.add_task("b")

    row = renderer.last.items[1]
    state.toggle_task(row.date_key, row.index)
    assert [r.task.completed for r in renderer.last.items] == [False, True]
    assert json.loads(storage.data["tasks"])["2024-03-06"][1]["completed"] is True

    first = renderer.last.items[0]
    state.delete_task(first.date_key, first.index)
    assert renderer.texts() == ["b"]
    assert renderer.last.items[0].index == 0
    assert len(json.loads(storage.data["tasks"])["2024-03-06"]) == 1


def test_week_view_rows_address_their_own_keys(state: AppState, renderer: RecordingRenderer) -> None:
    state.add_task("wed")
    state.navigate(1)
    state.add_task("thu 1")
    state.add_task("thu 2")
    state.select_view(ViewMode.WEEK)

    rows = renderer.last.items
    assert [(r.date_key, r.index) for r in rows] == [
        ("2024-03-06", 0),
        ("2024-03-07", 0),
        ("2024-03-07", 1),
    ]

    state.toggle_task(rows[2].date_key, rows[2].index)
    assert state.task_store.get("2024-03-07")[1].completed is True
    assert state.task_store.get("2024-03-06")[0].completed is False


def test_strict_mode_raises_on_missing_task(state: AppState, storage: MemoryStorage) -> None:
    state.strict_indices = True
    with pytest.raises(TaskNotFoundError):
        state.toggle_task("2024-03-06", 0)
    assert "tasks" not in storage.data


def test_lenient_mode_logs_and_ignores(
    state: AppState,
    storage: MemoryStorage,
    renderer: RecordingRenderer,
    caplog: pytest.LogCaptureFixture,
) -> None:
    state.strict_indices = False
    state.add_task("only")
    saved = storage.data["tasks"]

    with caplog.at_level(logging.WARNING, logger="datebook.core.state"):
        snap = state.delete_task("2024-03-06", 5)

    assert storage.data["tasks"] == saved
    assert [r.task.text for r in snap.items] == ["only"]
    assert renderer.last is snap
    assert "Ignoring delete" in caplog.text


def test_view_changes_never_save(state: AppState, storage: MemoryStorage) -> None:
    state.add_task("x")
    saved = storage.data["tasks"]
    storage.data["tasks"] = "sentinel"

    state.select_view("month")
    state.navigate(-1)
    state.go_to_today()

    assert storage.data["tasks"] == "sentinel"
    assert json.loads(saved) == state.task_store.as_dict()


def test_navigate_month_from_jan_31(settings, storage: MemoryStorage) -> None:
    st = create_initial_state(settings=settings, storage=storage, today=lambda: date(2024, 1, 31))
    st.select_view(ViewMode.MONTH)
    snap = st.navigate(1)
    assert snap.reference_date == date(2024, 3, 2)
    assert snap.header_label == "March 2024"


def test_go_to_today_resets_reference(state: AppState) -> None:
    state.select_view("year")
    state.navigate(3)
    snap = state.go_to_today()
    assert snap.reference_date == TODAY
    assert snap.mode is ViewMode.YEAR


def test_failing_renderer_does_not_break_cycle(state: AppState, renderer: RecordingRenderer) -> None:
    broken = ExplodingRenderer()
    state.register_renderer(broken)
    after = RecordingRenderer()
    state.register_renderer(after)

    state.add_task("x")

    assert broken.calls == 1
    assert after.texts() == ["x"]
    assert renderer.texts() == ["x"]


def test_unregister_renderer(state: AppState) -> None:
    rec = RecordingRenderer()
    unregister = state.register_renderer(rec)
    state.refresh()
    unregister()
    unregister()
    state.refresh()
    assert len(rec.snapshots) == 1


def test_instances_are_isolated(settings) -> None:
    a = create_initial_state(settings=settings, storage=MemoryStorage(), today=lambda: TODAY)
    b = create_initial_state(settings=settings, storage=MemoryStorage(), today=lambda: TODAY)
    rec_a, rec_b = RecordingRenderer(), RecordingRenderer()
    a.register_renderer(rec_a)
    b.register_renderer(rec_b)

    a.add_task("only in a")

    assert rec_a.texts() == ["only in a"]
    assert rec_b.snapshots == []
    assert b.task_store.count_tasks() == 0


def test_bootstrap_loads_existing_record_and_default_view(settings) -> None:
    settings.default_view = "week"
    settings.chronological = True
    storage = MemoryStorage(
        {"tasks": json.dumps({"2024-03-08": [{"text": "fri", "completed": True}], "2024-03-04": [{"text": "mon"}]})}
    )
    st = create_initial_state(settings=settings, storage=storage, today=lambda: TODAY)

    snap = st.refresh()
    assert snap.mode is ViewMode.WEEK
    assert [(r.task.text, r.task.completed) for r in snap.items] == [("mon", False), ("fri", True)]


def test_bootstrap_unknown_default_view_falls_back_to_day(settings, storage: MemoryStorage) -> None:
    settings.default_view = "decade"
    st = create_initial_state(settings=settings, storage=storage, today=lambda: TODAY)
    assert st.scheduler.mode is ViewMode.DAY


def test_save_failure_propagates(settings) -> None:
    st = create_initial_state(settings=settings, storage=ReadOnlyStorage(), today=lambda: TODAY)
    with pytest.raises(OSError):
        st.add_task("x")


def test_failed_save_rolls_memory_back_to_saved_record(settings) -> None:
    storage = FlakyStorage()
    st = create_initial_state(settings=settings, storage=storage, today=lambda: TODAY)
    st.add_task("a")
    st.add_task("b")
    saved = storage.data["tasks"]

    storage.fail_writes = True
    with pytest.raises(OSError):
        st.add_task("c")
    with pytest.raises(OSError):
        st.toggle_task("2024-03-06", 0)
    with pytest.raises(OSError):
        st.delete_task("2024-03-06", 1)

    assert storage.data["tasks"] == saved
    assert json.loads(saved) == st.task_store.as_dict()
    assert [t.text for t in st.task_store.get("2024-03-06")] == ["a", "b"]

    storage.fail_writes = False
    snap = st.add_task("d")
    assert [r.task.text for r in snap.items] == ["a", "b", "d"]


def test_sqlite_accepts_lone_surrogate_text(settings, tmp_path) -> None:
    storage = SqliteKeyValueStorage(tmp_path / "tasks.sqlite3")
    st = create_initial_state(settings=settings, storage=storage, today=lambda: TODAY)

    st.add_task("bad \udcff")
    st.add_task("fine")

    reloaded = TaskStore.load(storage)
    assert [t.text for t in reloaded.get("2024-03-06")] == ["bad \udcff", "fine"]
