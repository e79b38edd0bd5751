# src/datebook/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_models import TaskNotFoundError, ViewMode, VisibleTask

# (state, args split on whitespace, raw text after the command name) -> reply
CommandHandler = Callable[[AppState, list[str], str], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /view, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string ("" when the re-rendered view says it all) or None if not a command.
        """
        if not line.startswith("/"):
            return None

        body = line[1:]
        parts = body.split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        rest = body.lstrip()[len(parts[0]) :].strip()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        logger.debug("Command /%s args=%s", name, args)
        return handler(state, args, rest)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  (any other line adds a task for the current date)")
        return "\n".join(lines)


registry = CommandRegistry()


def _row(state: AppState, args: list[str]) -> VisibleTask | str:
    """Resolve a 1-based row number against the last rendered snapshot."""
    if not args:
        return "Missing row number."
    try:
        n = int(args[0])
    except ValueError:
        return f"Not a row number: {args[0]}"

    snapshot = state.last_snapshot if state.last_snapshot is not None else state.refresh()
    if not 1 <= n <= len(snapshot.items):
        return f"No row {n} in the current view ({len(snapshot.items)} rows)."
    return snapshot.items[n - 1]


def cmd_help(state: AppState, args: list[str], rest: str) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str], rest: str) -> str:
    state.add_task(rest)
    return ""


def cmd_view(state: AppState, args: list[str], rest: str) -> str:
    """
    /view         -> show current mode
    /view <mode>  -> switch to day | week | month | year
    """
    if not args:
        return f"Current view: {state.scheduler.mode.value}. Use /view day|week|month|year."
    try:
        state.select_view(args[0])
    except ValueError:
        return f"Unknown view: {args[0]}. Use /view day|week|month|year."
    return ""


def _fixed_view(mode: ViewMode) -> CommandHandler:
    def _handler(state: AppState, args: list[str], rest: str) -> str:
        state.select_view(mode)
        return ""

    return _handler


def cmd_prev(state: AppState, args: list[str], rest: str) -> str:
    state.navigate(-1)
    return ""


def cmd_next(state: AppState, args: list[str], rest: str) -> str:
    state.navigate(1)
    return ""


def cmd_today(state: AppState, args: list[str], rest: str) -> str:
    state.go_to_today()
    return ""


def cmd_done(state: AppState, args: list[str], rest: str) -> str:
    row = _row(state, args)
    if isinstance(row, str):
        return f"{row} Usage: /done N"
    try:
        state.toggle_task(row.date_key, row.index)
    except TaskNotFoundError as e:
        return f"Task no longer exists ({e}). Use /list to refresh."
    return ""


def cmd_delete(state: AppState, args: list[str], rest: str) -> str:
    row = _row(state, args)
    if isinstance(row, str):
        return f"{row} Usage: /del N"
    try:
        state.delete_task(row.date_key, row.index)
    except TaskNotFoundError as e:
        return f"Task no longer exists ({e}). Use /list to refresh."
    return ""


def cmd_list(state: AppState, args: list[str], rest: str) -> str:
    state.refresh()
    return ""


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task for the current date: /add <text>.")
registry.register("view", cmd_view, help_text="Switch view: /view day | week | month | year.")
registry.register("day", _fixed_view(ViewMode.DAY), help_text="Day view.")
registry.register("week", _fixed_view(ViewMode.WEEK), help_text="Week view (Monday to Sunday).")
registry.register("month", _fixed_view(ViewMode.MONTH), help_text="Month view.")
registry.register("year", _fixed_view(ViewMode.YEAR), help_text="Year view.")
registry.register("prev", cmd_prev, help_text="Go back one day/week/month/year.", aliases=["<"])
registry.register("next", cmd_next, help_text="Go forward one day/week/month/year.", aliases=[">"])
registry.register("today", cmd_today, help_text="Jump back to today.")
registry.register("done", cmd_done, help_text="Toggle completion of row N: /done N.", aliases=["toggle"])
registry.register("del", cmd_delete, help_text="Delete row N: /del N.", aliases=["rm", "delete"])
registry.register("list", cmd_list, help_text="Show the current view again.", aliases=["ls"])
