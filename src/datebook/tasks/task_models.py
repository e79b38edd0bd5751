# src/datebook/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum


class ViewMode(StrEnum):
    """Display granularity. Values double as the labels shown to the user."""

    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"
    YEAR = "Year"

    @classmethod
    def parse(cls, raw: str | ViewMode) -> ViewMode:
        if isinstance(raw, ViewMode):
            return raw
        wanted = str(raw or "").strip().lower()
        for mode in cls:
            if mode.value.lower() == wanted:
                return mode
        raise ValueError(f"Unknown view mode: {raw!r}")


class TaskNotFoundError(LookupError):
    """A (date_key, index) pair that does not address an existing task."""

    def __init__(self, date_key: str, index: int) -> None:
        super().__init__(f"No task at index {index} for {date_key!r}")
        self.date_key = date_key
        self.index = index


@dataclass(slots=True)
class Task:
    text: str
    completed: bool = False

    def to_dict(self) -> dict[str, object]:
        return {"text": self.text, "completed": self.completed}


@dataclass(slots=True, frozen=True)
class DateWindow:
    """Inclusive range of calendar days."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(slots=True, frozen=True)
class VisibleTask:
    """
    One row of a rendered view.

    `index` is the task's position inside its own date key's list, so
    (date_key, index) can be handed straight back to TaskStore.toggle/delete.
    """

    task: Task
    date_key: str
    index: int


@dataclass(slots=True, frozen=True)
class ViewSnapshot:
    mode: ViewMode
    header_label: str
    date_label: str
    reference_date: date
    window: DateWindow
    items: tuple[VisibleTask, ...]
