# src/datebook/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- opens the configured storage backend and loads the TaskStore,
- wires TaskStore + ViewScheduler into AppState.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from ..config import get_settings
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..storage import open_storage
from ..tasks.task_models import ViewMode
from ..tasks.task_store import TaskStore
from ..tasks.view_scheduler import ViewScheduler

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_json_path.parent.mkdir(parents=True, exist_ok=True)


def _initial_mode(settings) -> ViewMode:
    raw = getattr(settings, "default_view", "Day")
    try:
        return ViewMode.parse(raw)
    except ValueError:
        logger.warning("Unknown default view %r; using Day.", raw)
        return ViewMode.DAY


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    today: Callable[[], date] = date.today,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and storage injectable makes the app easier to test and avoids hidden
    global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = open_storage(settings)

    store = TaskStore.load(storage, key=getattr(settings, "storage_key", "tasks"))
    scheduler = ViewScheduler(
        store,
        mode=_initial_mode(settings),
        reference_date=today(),
        chronological=bool(getattr(settings, "chronological", False)),
    )

    return AppState(
        settings=settings,
        task_store=store,
        scheduler=scheduler,
        strict_indices=bool(getattr(settings, "strict_indices", False)),
        today=today,
    )
