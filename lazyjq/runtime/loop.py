"""Main interactive loop.

Each iteration samples the terminal size, runs due timers and worker events,
repaints when something changed, then waits for one key no longer than the
next timer deadline.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..input import read_key
from .terminal import TerminalController

if TYPE_CHECKING:
    from .app import ExplorerApp


def terminal_size() -> tuple[int, int]:
    term = shutil.get_terminal_size((80, 24))
    return term.columns, term.lines


def run_main_loop(
    app: ExplorerApp,
    terminal: TerminalController,
    stdin_fd: int,
    *,
    get_size: Callable[[], tuple[int, int]] = terminal_size,
    key_reader: Callable[[int, int | None], str] = read_key,
) -> None:
    """Run until a key handler asks to quit."""
    with terminal.raw_mode():
        while True:
            app.observe_size(get_size())
            if app.pump():
                app.paint()

            try:
                key = key_reader(stdin_fd, app.next_timeout_ms())
            except KeyboardInterrupt:
                continue
            if not key:
                continue
            if app.handle_key(key):
                break


__all__ = ["run_main_loop", "terminal_size"]
