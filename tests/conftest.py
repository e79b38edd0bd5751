# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from datebook.cli.bootstrap import create_initial_state
from datebook.core.state import AppState
from datebook.storage import MemoryStorage

from .fakes import RecordingRenderer

# Wednesday.
TODAY = date(2024, 3, 6)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and AppState.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the process environment.
    """
    return SimpleNamespace(
        app_name="datebook-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_backend="memory",
        tasks_db_path=tmp_path / "tasks.sqlite3",
        tasks_json_path=tmp_path / "tasks.json",
        storage_key="tasks",
        default_view="Day",
        strict_indices=True,
        chronological=False,
    )


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def state(settings: SimpleNamespace, storage: MemoryStorage) -> AppState:
    """AppState over in-memory storage with a fixed 'today'."""
    return create_initial_state(settings=settings, storage=storage, today=lambda: TODAY)


@pytest.fixture()
def renderer(state: AppState) -> RecordingRenderer:
    rec = RecordingRenderer()
    state.register_renderer(rec)
    return rec
