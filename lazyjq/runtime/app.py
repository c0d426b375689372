"""Explorer wiring: workers, timers, key actions and painting.

``ExplorerApp`` owns the event queue drained on the main thread, the spinner,
the evaluator and loader workers, the view-state aggregator, the query editor
and the resize debounce. The terminal loop only feeds it keys and sizes.
"""

from __future__ import annotations

import logging
import os
import queue
import sys
import time
from collections.abc import Callable

from ..editor import LineEditor
from ..engine import FilterEngine, JqEngine
from ..json_view.document import JsonDocument
from ..json_view.paths import JsonPathIndex
from ..keymap import KeyComboRegistry
from ..pipeline.aggregator import ViewStateAggregator
from ..pipeline.debounce import DebounceScheduler
from ..pipeline.evaluator import QueryEvaluator
from ..pipeline.spinner import SpinnerCoordinator
from ..pipeline.state import EDITOR_FOCUS, RenderSnapshot
from ..pipeline.suggestions import SuggestionLoader
from ..render import FrameRenderer
from .clipboard import copy_text_to_clipboard
from .config import ExplorerConfig
from .loop import run_main_loop, terminal_size
from .terminal import TerminalController

logger = logging.getLogger(__name__)

STATUS_MESSAGE_SECONDS = 2.0
IDLE_POLL_MS = 120

Size = tuple[int, int]


class ExplorerApp:
    def __init__(
        self,
        document: JsonDocument,
        config: ExplorerConfig,
        *,
        engine: FilterEngine | None = None,
        clock: Callable[[], float] = time.monotonic,
        copy_text: Callable[[str], bool] = copy_text_to_clipboard,
        size: Size = (80, 24),
    ) -> None:
        self.config = config
        self.events: queue.Queue[object] = queue.Queue()
        self._clock = clock
        self._copy_text = copy_text

        self.spinner = SpinnerCoordinator(config.spin_interval_seconds, clock=clock)
        self.evaluator = QueryEvaluator(
            engine if engine is not None else JqEngine(config.engine_command),
            self.events.put,
            self.spinner,
        )
        self.loader = SuggestionLoader(
            self.events.put,
            self.spinner,
            load_chunk_size=config.search_load_chunk_size,
            result_chunk_size=config.search_result_chunk_size,
            ranking=config.suggestion_ranking,
        )
        self.aggregator = ViewStateAggregator(
            document,
            evaluator=self.evaluator,
            loader=self.loader,
            candidates=JsonPathIndex(document.values),
            query_debounce_seconds=config.query_debounce_seconds,
            fold_depth=config.fold_depth,
            indent=config.indent,
            clock=clock,
            on_publish=self._on_publish,
        )
        self.editor = LineEditor(mode=config.edit_mode)
        self.renderer = FrameRenderer(
            style=config.style,
            no_color=config.no_color,
            suggestion_lines=config.suggestion_lines,
            no_hint=config.no_hint,
        )
        self.resize_debounce: DebounceScheduler[Size] = DebounceScheduler(
            config.resize_debounce_seconds,
            self._apply_resize,
            clock=clock,
            name="resize-debounce",
        )
        self.size = size
        self._observed_size = size
        self.dirty = True
        self._status_until = 0.0

        keybinds = config.keybinds
        self._global_keys = KeyComboRegistry().register_actions(
            keybinds["global"],
            {
                "exit": lambda: True,
                "copy_query": self.copy_query,
                "copy_result": self.copy_result,
                "switch_mode": self.switch_mode,
            },
        )
        self._completion_keys = KeyComboRegistry().register_actions(
            keybinds["completion"],
            {
                "up": lambda: self.aggregator.on_suggestion_select(-1),
                "down": lambda: self.aggregator.on_suggestion_select(1),
                "accept": self.accept_completion,
                "cancel": self.aggregator.on_completion_close,
            },
        )
        self._editor_keys = KeyComboRegistry().register_actions(
            keybinds["editor"],
            {
                "backward": lambda: self._edit(self.editor.backward),
                "forward": lambda: self._edit(self.editor.forward),
                "move_to_head": lambda: self._edit(self.editor.move_to_head),
                "move_to_tail": lambda: self._edit(self.editor.move_to_tail),
                "move_to_previous_nearest": lambda: self._edit(self.editor.move_to_previous_nearest),
                "move_to_next_nearest": lambda: self._edit(self.editor.move_to_next_nearest),
                "erase": lambda: self._edit(self.editor.erase),
                "erase_all": lambda: self._edit(self.editor.erase_all),
                "erase_to_previous_nearest": lambda: self._edit(self.editor.erase_to_previous_nearest),
                "erase_to_next_nearest": lambda: self._edit(self.editor.erase_to_next_nearest),
                "completion": lambda: self.aggregator.on_suggestion_select(1),
            },
        )
        self._viewer_keys = KeyComboRegistry().register_actions(
            keybinds["viewer"],
            {
                "up": lambda: self.aggregator.on_viewer_move(-1),
                "down": lambda: self.aggregator.on_viewer_move(1),
                "move_to_head": lambda: self.aggregator.on_viewer_jump(to_end=False),
                "move_to_tail": lambda: self.aggregator.on_viewer_jump(to_end=True),
                "toggle": self.aggregator.on_fold_toggle_at_cursor,
                "expand": lambda: self.aggregator.on_fold_all(collapsed=False),
                "collapse": lambda: self.aggregator.on_fold_all(collapsed=True),
            },
        )

    def snapshot(self) -> RenderSnapshot:
        return self.aggregator.snapshot()

    def _on_publish(self, snapshot: RenderSnapshot) -> None:
        self.dirty = True

    def start(self, text: str = "") -> None:
        """Evaluate ``text`` (usually empty) right away so the document shows immediately."""
        if text:
            self.editor.set_text(text)
        self.aggregator.start(self.editor.text, self.editor.prefix())

    def close(self) -> None:
        self.resize_debounce.close()
        self.aggregator.close()

    # timers and worker events
    def drain_events(self) -> int:
        applied = 0
        while True:
            try:
                event = self.events.get_nowait()
            except queue.Empty:
                return applied
            self.aggregator.apply_event(event)
            applied += 1

    def pump(self, now: float | None = None) -> bool:
        """Run every due timer and apply pending worker events; return whether a repaint is due."""
        if now is None:
            now = self._clock()
        self.aggregator.query_debounce.poll(now)
        self.resize_debounce.poll(now)
        self.drain_events()
        spinner_state = self.spinner.tick(now)
        if spinner_state is not None:
            self.aggregator.on_spinner_tick(spinner_state)
        if self.snapshot().status_message and now >= self._status_until:
            self.aggregator.on_status("")
        return self.dirty

    def next_timeout_ms(self, now: float | None = None) -> int:
        """Milliseconds the loop may wait for a key before the next timer is due."""
        if not self.events.empty():
            return 0
        if now is None:
            now = self._clock()
        deadlines = [
            self.aggregator.query_debounce.next_deadline(),
            self.resize_debounce.next_deadline(),
            self.spinner.next_deadline(),
        ]
        if self.snapshot().status_message:
            deadlines.append(self._status_until)
        timeout_ms = IDLE_POLL_MS
        for deadline in deadlines:
            if deadline is None:
                continue
            timeout_ms = min(timeout_ms, int(max(0.0, deadline - now) * 1000))
        return timeout_ms

    # resize
    def observe_size(self, size: Size) -> None:
        """Record a terminal size sample; a change repaints once resizing settles."""
        if size == self._observed_size:
            return
        self._observed_size = size
        self.resize_debounce.schedule(size)

    def _apply_resize(self, size: Size) -> None:
        if size == self.size:
            return
        logger.debug("terminal resized to %dx%d", size[0], size[1])
        self.size = size
        self.dirty = True

    # painting
    def paint(self) -> None:
        columns, lines = self.size
        self.renderer.paint(self.snapshot(), self.editor.cursor, columns, lines)
        self.dirty = False

    # actions
    def set_status(self, message: str) -> None:
        self._status_until = self._clock() + STATUS_MESSAGE_SECONDS
        self.aggregator.on_status(message)

    def _query_changed(self) -> None:
        self.aggregator.on_query_changed(self.editor.text, self.editor.prefix())

    def _edit(self, action: Callable[[], None]) -> bool:
        before = (self.editor.text, self.editor.cursor)
        action()
        if self.editor.text != before[0]:
            self._query_changed()
        elif self.editor.cursor != before[1]:
            self.dirty = True
        return False

    def insert_text(self, chars: str) -> None:
        self.editor.insert(chars)
        self._query_changed()

    def accept_completion(self) -> bool:
        selected = self.aggregator.accept_completion()
        if selected is None:
            return False
        tail = self.editor.text[self.editor.cursor :]
        self.editor.set_text(selected + tail, cursor=len(selected))
        self._query_changed()
        return False

    def switch_mode(self) -> bool:
        self.aggregator.toggle_focus()
        return False

    def copy_query(self) -> bool:
        if self._copy_text(self.editor.text):
            self.set_status("copied query to clipboard")
        else:
            self.set_status("failed to copy query to clipboard")
        return False

    def copy_result(self) -> bool:
        if self._copy_text(self.aggregator.result_text()):
            self.set_status("copied result to clipboard")
        else:
            self.set_status("failed to copy result to clipboard")
        return False

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token; return ``True`` when the explorer should exit."""
        if self._global_keys.handles(key):
            return bool(self._global_keys.dispatch(key))

        snapshot = self.snapshot()
        if snapshot.completion_active:
            if self._completion_keys.handles(key):
                self._completion_keys.dispatch(key)
                return False
            self.aggregator.on_completion_close()

        if snapshot.focus == EDITOR_FOCUS:
            if self._editor_keys.handles(key):
                self._editor_keys.dispatch(key)
                return False
            if len(key) == 1 and key.isprintable():
                self.insert_text(key)
            return False

        self._viewer_keys.dispatch(key)
        return False


def open_key_input() -> tuple[int, bool]:
    """Return a readable tty descriptor and whether the caller must close it.

    When the document arrived on stdin, keys are read from the controlling
    terminal instead.
    """
    if sys.stdin.isatty():
        return sys.stdin.fileno(), False
    return os.open("/dev/tty", os.O_RDONLY), True


def run_explorer(document: JsonDocument, config: ExplorerConfig, query: str = "") -> None:
    stdin_fd, owned = open_key_input()
    app = ExplorerApp(document, config, size=terminal_size())
    try:
        terminal = TerminalController(stdin_fd, sys.stdout.fileno())
        app.start(query)
        run_main_loop(app, terminal, stdin_fd)
    finally:
        app.close()
        if owned:
            os.close(stdin_fd)


__all__ = [
    "ExplorerApp",
    "IDLE_POLL_MS",
    "STATUS_MESSAGE_SECONDS",
    "open_key_input",
    "run_explorer",
]
