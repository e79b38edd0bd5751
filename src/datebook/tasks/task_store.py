# src/datebook/tasks/task_store.py

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from .task_models import Task, TaskNotFoundError

if TYPE_CHECKING:
    from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


def encode_tasks(tasks: dict[str, list[Task]]) -> str:
    """Serialize the full mapping; key order and list order are preserved."""
    payload = {key: [t.to_dict() for t in seq] for key, seq in tasks.items()}
    # ASCII escapes keep lone surrogates (surrogateescape console input) encodable.
    return json.dumps(payload, ensure_ascii=True)


def _task_from_obj(obj: Any) -> Task | None:
    if not isinstance(obj, dict):
        return None
    text = obj.get("text", "")
    return Task(text="" if text is None else str(text), completed=obj.get("completed") is True)


def decode_tasks(raw: str) -> dict[str, list[Task]]:
    """
    Parse a persisted record.

    Raises ValueError when the record is not a JSON object. Inside a valid
    object, malformed entries are dropped rather than failing the whole load.
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"task record must be a JSON object, got {type(data).__name__}")

    out: dict[str, list[Task]] = {}
    for key, seq in data.items():
        if not isinstance(seq, list):
            logger.debug("Dropping malformed entry key=%r", key)
            continue
        tasks = [t for t in (_task_from_obj(item) for item in seq) if t is not None]
        out[str(key)] = tasks
    return out


class TaskStore:
    """
    In-memory mapping of date key -> ordered task list, mirrored to a
    KeyValueStorage record.

    Mutators only touch memory; the caller persists with save() after each
    mutation. Indices are positions in a date key's list and shift on delete,
    so they are only meaningful against the state they were read from.
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        tasks: dict[str, list[Task]] | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._tasks: dict[str, list[Task]] = tasks if tasks is not None else {}

    @classmethod
    def load(cls, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY) -> TaskStore:
        """Read the persisted record. Missing or corrupt data yields an empty store."""
        try:
            raw = storage.get_item(key)
        except Exception:
            logger.warning("Failed to read task record key=%s; starting empty.", key, exc_info=True)
            return cls(storage, key=key)

        if raw is None:
            logger.info("No task record under key=%s; starting empty.", key)
            return cls(storage, key=key)

        try:
            tasks = decode_tasks(raw)
        except (ValueError, RecursionError):
            logger.warning("Corrupt task record key=%s; starting empty.", key, exc_info=True)
            return cls(storage, key=key)

        store = cls(storage, key=key, tasks=tasks)
        logger.info("TaskStore loaded key=%s dates=%d tasks=%d", key, len(tasks), store.count_tasks())
        return store

    def checkpoint(self) -> dict[str, list[Task]]:
        """Copy of the current mapping, for restore() after a failed save."""
        return {key: [Task(t.text, t.completed) for t in seq] for key, seq in self._tasks.items()}

    def restore(self, checkpoint: dict[str, list[Task]]) -> None:
        self._tasks = {key: [Task(t.text, t.completed) for t in seq] for key, seq in checkpoint.items()}

    def save(self) -> None:
        if self._storage is None:
            raise RuntimeError("TaskStore has no storage attached")
        try:
            self._storage.set_item(self._key, encode_tasks(self._tasks))
        except Exception:
            logger.error("Failed to persist tasks key=%s", self._key)
            raise

    # ---- mutations ----

    def add(self, date_key: str, text: str) -> Task:
        task = Task(text=text, completed=False)
        self._tasks.setdefault(date_key, []).append(task)
        logger.debug("Task added date=%s index=%d", date_key, len(self._tasks[date_key]) - 1)
        return task

    def _locate(self, date_key: str, index: int) -> list[Task]:
        seq = self._tasks.get(date_key)
        if seq is None or not 0 <= index < len(seq):
            raise TaskNotFoundError(date_key, index)
        return seq

    def toggle(self, date_key: str, index: int) -> Task:
        task = self._locate(date_key, index)[index]
        task.completed = not task.completed
        logger.debug("Task toggled date=%s index=%d completed=%s", date_key, index, task.completed)
        return task

    def delete(self, date_key: str, index: int) -> Task:
        # Emptied lists stay in the mapping.
        task = self._locate(date_key, index).pop(index)
        logger.debug("Task deleted date=%s index=%d", date_key, index)
        return task

    # ---- reads ----

    @property
    def key(self) -> str:
        return self._key

    def get(self, date_key: str) -> list[Task]:
        return list(self._tasks.get(date_key, ()))

    def date_keys(self) -> list[str]:
        return list(self._tasks)

    def items(self) -> Iterator[tuple[str, list[Task]]]:
        return iter(self._tasks.items())

    def count_tasks(self) -> int:
        return sum(len(seq) for seq in self._tasks.values())

    def as_dict(self) -> dict[str, list[dict[str, object]]]:
        return {key: [t.to_dict() for t in seq] for key, seq in self._tasks.items()}

    def __contains__(self, date_key: object) -> bool:
        return date_key in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TaskStore):
            return NotImplemented
        return list(self._tasks.items()) == list(other._tasks.items())

    def __repr__(self) -> str:
        return f"TaskStore(key={self._key!r}, dates={len(self._tasks)}, tasks={self.count_tasks()})"
