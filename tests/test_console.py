# tests/test_console.py

from __future__ import annotations

from collections.abc import Iterator

import pytest

from datebook.connectors.console_connector import format_snapshot, handle_line, run_console_loop
from datebook.core.state import AppState


def _inputs(lines: list[str]):
    it: Iterator[str] = iter(lines)

    def _input(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return _input


def test_plain_lines_add_tasks_and_arrows_navigate(state: AppState) -> None:
    assert handle_line(state, "  water plants ") == ""
    assert handle_line(state, "") == ""
    assert handle_line(state, ">") == ""
    assert state.task_store.get("2024-03-06")[0].text == "water plants"
    assert state.scheduler.reference_date.day == 7
    assert handle_line(state, "/quit") is None


def test_format_snapshot(state: AppState) -> None:
    assert "(no tasks)" in format_snapshot(state.refresh())

    state.add_task("rent")
    snap = state.toggle_task("2024-03-06", 0)
    text = format_snapshot(snap)

    assert text.splitlines()[0] == "== Wednesday =="
    assert "March 6, 2024  [Day]" in text
    assert "1. [x] rent  (2024-03-06)" in text


def test_run_console_loop(state: AppState, capsys: pytest.CaptureFixture[str]) -> None:
    run_console_loop(state, input_fn=_inputs(["buy bread", "/week", "/bogus", "/exit", "never"]))

    out = capsys.readouterr().out
    assert "1. [ ] buy bread  (2024-03-06)" in out
    assert "== Mar 4, 2024 – Mar 10, 2024 ==" in out
    assert "Unknown command: /bogus" in out
    assert state.renderers == []
    assert state.task_store.count_tasks() == 1


def test_run_console_loop_stops_on_eof(state: AppState) -> None:
    run_console_loop(state, input_fn=_inputs([]))
    assert state.last_snapshot is not None
