# src/datebook/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends and presentation layers swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol

from ..tasks.task_models import ViewSnapshot


class KeyValueStorage(Protocol):
    """
    String record storage addressed by key (the browser localStorage shape).

    get_item returns None when the key was never written.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


Renderer = Callable[[ViewSnapshot], None]
# Presentation-side port: receives a plain snapshot after every state change.
