"""Frame composer for the explorer screen.

Paints one :class:`RenderSnapshot` as a full frame: the query line, the
completion list, the error indicator, the visible window of result rows and
the status/hint line. Only rows inside the viewport are styled.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

from .ansi import RESET, clip_ansi_line, pad_to_width, reverse_video
from .json_view.formatter import JsonRow
from .json_view.styling import DEFAULT_STYLE, style_row
from .pipeline.spinner import spinner_glyph
from .pipeline.state import VIEWER_FOCUS, RenderSnapshot, SuggestionPage

QUERY_PREFIX = "❯❯ "
MAX_ERROR_LINES = 3

EDITOR_HINT = "Tab complete │ Shift+↑↓ viewer │ ^Q copy query │ ^O copy result │ ^C quit"
VIEWER_HINT = "↑↓ move │ Enter fold │ ^P expand all │ ^N collapse all │ Shift+↑↓ editor │ ^C quit"

_QUERY_SGR = "\033[1;38;5;81m"
_DIM_SGR = "\033[2;38;5;250m"
_ERROR_SGR = "\033[1;38;5;203m"


def format_suggestion_status(page: SuggestionPage) -> str:
    parts: list[str] = []
    if page.loading:
        parts.append("searching")
    count = len(page.items)
    if count:
        noun = "candidate" if count == 1 else "candidates"
        parts.append(f"{count:,}{'+' if page.more_available else ''} {noun}")
    elif not page.loading and page.error is None:
        return ""
    if page.error:
        parts.append(f"search failed: {page.error}")
    return " · ".join(parts)


def _query_line(snapshot: RenderSnapshot, cursor: int, width: int, no_color: bool) -> str:
    text = snapshot.query.text
    cursor = max(0, min(cursor, len(text)))
    head, tail = text[:cursor], text[cursor:]
    at_cursor = tail[:1] or " "
    editing = snapshot.focus != VIEWER_FOCUS
    glyph = spinner_glyph(snapshot.spinner)
    status = format_suggestion_status(snapshot.suggestions) if snapshot.query.text.strip() else ""

    if no_color:
        line = f"{glyph} {QUERY_PREFIX}{text}"
        if status:
            line += f"  [{status}]"
        return clip_ansi_line(line, width)

    cursor_cell = reverse_video(at_cursor) if editing else at_cursor
    line = f"{glyph} {_QUERY_SGR}{QUERY_PREFIX}{head}{RESET}{cursor_cell}{_QUERY_SGR}{tail[1:]}{RESET}"
    if status:
        line += f"{_DIM_SGR}  {status}{RESET}"
    return clip_ansi_line(line, width) + RESET


def _completion_lines(snapshot: RenderSnapshot, visible: int, width: int) -> list[str]:
    page = snapshot.suggestions
    if not snapshot.completion_active or not page.items or visible <= 0:
        return []
    selected = page.selected or 0
    start = max(0, min(selected - visible + 1, len(page.items) - visible))
    start = min(start, selected)
    lines: list[str] = []
    for idx in range(start, min(len(page.items), start + visible)):
        item = clip_ansi_line(f"   {page.items[idx]}", width)
        if idx == selected:
            item = reverse_video(pad_to_width(item, width))
        lines.append(item)
    return lines


def _error_lines(snapshot: RenderSnapshot, width: int, no_color: bool) -> list[str]:
    if snapshot.error is None:
        return []
    message_lines = snapshot.error.message.splitlines() or [snapshot.error.message]
    first_label = "engine unavailable: " if snapshot.error.unavailable else "error: "
    lines: list[str] = []
    for idx, message in enumerate(message_lines[:MAX_ERROR_LINES]):
        label = first_label if idx == 0 else " " * len(first_label)
        text = clip_ansi_line(f"{label}{message}", width)
        lines.append(text if no_color else f"{_ERROR_SGR}{text}{RESET}")
    return lines


class FrameRenderer:
    """Composes frames and remembers the result viewport's scroll offset."""

    def __init__(
        self,
        *,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
        suggestion_lines: int = 3,
        no_hint: bool = False,
    ) -> None:
        self.style = style
        self.no_color = no_color
        self.suggestion_lines = suggestion_lines
        self.no_hint = no_hint
        self.scroll = 0

    def _footer(self, snapshot: RenderSnapshot, width: int) -> str | None:
        if snapshot.status_message:
            text = snapshot.status_message
        elif self.no_hint:
            return None
        else:
            text = VIEWER_HINT if snapshot.focus == VIEWER_FOCUS else EDITOR_HINT
        text = pad_to_width(clip_ansi_line(text, width), width)
        return text if self.no_color else reverse_video(text)

    def _follow_cursor(self, cursor: int, visible: int, total: int) -> None:
        if visible <= 0:
            self.scroll = 0
            return
        if cursor < self.scroll:
            self.scroll = cursor
        elif cursor >= self.scroll + visible:
            self.scroll = cursor - visible + 1
        self.scroll = max(0, min(self.scroll, max(0, total - visible)))

    def compose(self, snapshot: RenderSnapshot, cursor: int, width: int, height: int) -> list[str]:
        """Return the frame as a list of screen lines, at most ``height`` long."""
        width = max(1, width)
        lines = [_query_line(snapshot, cursor, width, self.no_color)]
        lines.extend(_completion_lines(snapshot, self.suggestion_lines, width))
        lines.extend(_error_lines(snapshot, width, self.no_color))

        footer = self._footer(snapshot, width)
        visible = height - len(lines) - (1 if footer is not None else 0)
        rows = snapshot.rows
        if snapshot.empty_result and not rows:
            lines.append("(no output)" if self.no_color else f"{_DIM_SGR}(no output){RESET}")
            visible -= 1
        self._follow_cursor(snapshot.viewer_cursor, visible, len(rows))

        for idx in range(self.scroll, min(len(rows), self.scroll + max(0, visible))):
            text = clip_ansi_line(style_row(rows[idx], self.style, self.no_color), width)
            if idx == snapshot.viewer_cursor and snapshot.focus == VIEWER_FOCUS:
                text = reverse_video(pad_to_width(text, width))
            elif "\033" in text:
                text += RESET
            lines.append(text)

        if footer is not None:
            while len(lines) < height - 1:
                lines.append("")
            lines.append(footer)
        return lines[: max(1, height)]

    def paint(self, snapshot: RenderSnapshot, cursor: int, width: int, height: int) -> None:
        frame = "\033[H\033[J" + "\r\n".join(self.compose(snapshot, cursor, width, height))
        os.write(sys.stdout.fileno(), frame.encode("utf-8", errors="replace"))


def render_rows_text(rows: Sequence[JsonRow], style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Return ``rows`` as newline-joined text for non-interactive output."""
    out: list[str] = []
    for row in rows:
        text = style_row(row, style, no_color)
        if "\033" in text:
            text += RESET
        out.append(text)
    return "\n".join(out)


__all__ = [
    "EDITOR_HINT",
    "FrameRenderer",
    "QUERY_PREFIX",
    "VIEWER_HINT",
    "format_suggestion_status",
    "render_rows_text",
]
