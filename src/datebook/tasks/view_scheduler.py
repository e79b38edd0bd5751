# src/datebook/tasks/view_scheduler.py

from __future__ import annotations

"""
View state machine.

Holds the current view mode and reference date, derives the date window for
that pair, and filters a borrowed TaskStore into the visible rows. It never
mutates tasks; mutations go through TaskStore.

Window per mode:
- Day:   the reference date itself
- Week:  Monday..Sunday of the reference date's ISO week
- Month: first..last day of the reference month
- Year:  Jan 1..Dec 31
"""

import logging
from datetime import date

from . import dates
from .task_models import DateWindow, Task, ViewMode, ViewSnapshot, VisibleTask
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def _row(task: Task, date_key: str, index: int) -> VisibleTask:
    # Copy so a snapshot does not change when the store is mutated later.
    return VisibleTask(Task(task.text, task.completed), date_key, index)


class ViewScheduler:
    def __init__(
        self,
        store: TaskStore,
        *,
        mode: ViewMode | str = ViewMode.DAY,
        reference_date: date | None = None,
        chronological: bool = False,
    ) -> None:
        self._store = store
        self.mode = ViewMode.parse(mode)
        self.reference_date = reference_date if reference_date is not None else date.today()
        # Off: rows follow the store's key order. On: keys are sorted by date first.
        self.chronological = chronological

    # ---- state transitions ----

    def set_mode(self, mode: ViewMode | str) -> ViewMode:
        self.mode = ViewMode.parse(mode)
        return self.mode

    def go_to(self, day: date) -> None:
        self.reference_date = day

    def advance(self, delta: int) -> date:
        ref = self.reference_date
        if self.mode is ViewMode.DAY:
            ref = dates.add_days(ref, delta)
        elif self.mode is ViewMode.WEEK:
            ref = dates.add_days(ref, 7 * delta)
        elif self.mode is ViewMode.MONTH:
            ref = dates.add_months(ref, delta)
        else:
            ref = dates.add_years(ref, delta)
        self.reference_date = ref
        return ref

    # ---- derived view ----

    def window(self) -> DateWindow:
        ref = self.reference_date
        if self.mode is ViewMode.DAY:
            return dates.day_window(ref)
        if self.mode is ViewMode.WEEK:
            return dates.week_window(ref)
        if self.mode is ViewMode.MONTH:
            return dates.month_window(ref)
        return dates.year_window(ref)

    def visible_tasks(self) -> list[VisibleTask]:
        if self.mode is ViewMode.DAY:
            key = dates.format_date_key(self.reference_date)
            return [_row(t, key, i) for i, t in enumerate(self._store.get(key))]

        win = self.window()
        matched: list[tuple[date, str, list[Task]]] = []
        for key, seq in self._store.items():
            day = dates.parse_date_key(key)
            if day is None:
                logger.debug("Skipping unparseable date key %r", key)
                continue
            if win.contains(day):
                matched.append((day, key, seq))

        if self.chronological:
            # sort() is stable, so same-day keys keep store order.
            matched.sort(key=lambda m: m[0])

        return [_row(t, key, i) for _, key, seq in matched for i, t in enumerate(seq)]

    def header_label(self) -> str:
        ref = self.reference_date
        if self.mode is ViewMode.DAY:
            return dates.weekday_name(ref)
        if self.mode is ViewMode.WEEK:
            win = dates.week_window(ref)
            return f"{dates.short_date(win.start)} – {dates.short_date(win.end)}"
        if self.mode is ViewMode.MONTH:
            return dates.month_label(ref)
        return str(ref.year)

    def date_label(self) -> str:
        return dates.long_date(self.reference_date)

    def snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(
            mode=self.mode,
            header_label=self.header_label(),
            date_label=self.date_label(),
            reference_date=self.reference_date,
            window=self.window(),
            items=tuple(self.visible_tasks()),
        )
