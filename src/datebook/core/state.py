# src/datebook/core/state.py

"""
Application context.

AppState owns the TaskStore and the ViewScheduler and exposes the input
entry points. Every entry point runs one full cycle:
mutation -> save (store mutations only) -> snapshot -> renderers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from ..tasks.dates import format_date_key
from ..tasks.task_models import TaskNotFoundError, ViewMode, ViewSnapshot
from ..tasks.task_store import TaskStore
from ..tasks.view_scheduler import ViewScheduler
from .ports import Renderer

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    # Settings live on the state for easy access in commands/connectors.
    settings: object

    task_store: TaskStore
    scheduler: ViewScheduler

    # Invalid (date_key, index) raises when True, is logged and ignored when False.
    strict_indices: bool = False
    today: Callable[[], date] = date.today

    renderers: list[Renderer] = field(default_factory=list)
    last_snapshot: ViewSnapshot | None = None

    # ---- renderer registration ----

    def register_renderer(self, renderer: Renderer) -> Callable[[], None]:
        """Register a snapshot consumer. Returns a function that unregisters it."""
        self.renderers.append(renderer)

        def _unregister() -> None:
            if renderer in self.renderers:
                self.renderers.remove(renderer)

        return _unregister

    def refresh(self) -> ViewSnapshot:
        snapshot = self.scheduler.snapshot()
        self.last_snapshot = snapshot
        for renderer in list(self.renderers):
            try:
                renderer(snapshot)
            except Exception:
                logger.exception("Renderer %r failed.", renderer)
        return snapshot

    # ---- entry points ----

    def add_task(self, text: str) -> ViewSnapshot:
        date_key = format_date_key(self.scheduler.reference_date)
        checkpoint = self.task_store.checkpoint()
        self.task_store.add(date_key, text)
        self._save_or_restore(checkpoint)
        return self.refresh()

    def toggle_task(self, date_key: str, index: int) -> ViewSnapshot:
        return self._mutate(self.task_store.toggle, date_key, index)

    def delete_task(self, date_key: str, index: int) -> ViewSnapshot:
        return self._mutate(self.task_store.delete, date_key, index)

    def select_view(self, mode: ViewMode | str) -> ViewSnapshot:
        self.scheduler.set_mode(mode)
        return self.refresh()

    def navigate(self, delta: int) -> ViewSnapshot:
        self.scheduler.advance(delta)
        return self.refresh()

    def go_to_today(self) -> ViewSnapshot:
        self.scheduler.go_to(self.today())
        return self.refresh()

    def _save_or_restore(self, checkpoint) -> None:
        # Memory must keep matching the persisted record when a write fails.
        try:
            self.task_store.save()
        except Exception:
            self.task_store.restore(checkpoint)
            raise

    def _mutate(self, op, date_key: str, index: int) -> ViewSnapshot:
        checkpoint = self.task_store.checkpoint()
        try:
            op(date_key, index)
        except TaskNotFoundError:
            if self.strict_indices:
                raise
            logger.warning("Ignoring %s on missing task date=%s index=%s", op.__name__, date_key, index)
            return self.refresh()
        self._save_or_restore(checkpoint)
        return self.refresh()
