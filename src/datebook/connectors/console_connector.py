# src/datebook/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import ViewSnapshot

logger = logging.getLogger(__name__)

# Bare arrows behave like the navigation buttons.
_NAV_SHORTCUTS = {"<": -1, ">": 1}


def format_snapshot(snapshot: ViewSnapshot) -> str:
    lines = [
        f"== {snapshot.header_label} ==",
        f"{snapshot.date_label}  [{snapshot.mode.value}]",
    ]
    if not snapshot.items:
        lines.append("  (no tasks)")
    for n, row in enumerate(snapshot.items, start=1):
        mark = "x" if row.task.completed else " "
        lines.append(f"  {n}. [{mark}] {row.task.text}  ({row.date_key})")
    return "\n".join(lines)


def make_console_renderer(write: Callable[[str], None] = print) -> Callable[[ViewSnapshot], None]:
    def _render(snapshot: ViewSnapshot) -> None:
        write(format_snapshot(snapshot))

    return _render


def handle_line(state: AppState, line: str) -> str | None:
    """
    Route one input line. Returns a reply to print (may be ""), or None when the
    loop should stop.
    """
    text = line.strip()
    if not text:
        return ""

    if text.lower() in ("/exit", "/quit"):
        return None

    if text in _NAV_SHORTCUTS:
        state.navigate(_NAV_SHORTCUTS[text])
        return ""

    reply = command_registry.handle(state, text)
    if reply is not None:
        return reply

    state.add_task(text)
    return ""


def run_console_loop(state: AppState, *, input_fn: Callable[[str], str] = input) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "datebook"))
    print(f"[{app_name}] Type a task and press Enter. Use /help for commands, /exit to quit.\n")

    unregister = state.register_renderer(make_console_renderer())
    try:
        state.refresh()
        while True:
            try:
                line = input_fn("> ")
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            try:
                reply = handle_line(state, line)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is None:
                logger.info("Console exit command received.")
                break
            if reply:
                print(reply)
    finally:
        unregister()

    logger.info("Console connector finished.")
