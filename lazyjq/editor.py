"""Single-line query editor.

Holds the expression text and cursor. Word-wise motions stop at the
word-break characters that separate jq path segments.
"""

from __future__ import annotations

EDIT_MODE_INSERT = "insert"
EDIT_MODE_OVERWRITE = "overwrite"
EDIT_MODES = (EDIT_MODE_INSERT, EDIT_MODE_OVERWRITE)

DEFAULT_WORD_BREAK_CHARS = frozenset(".|()[]")


class LineEditor:
    def __init__(
        self,
        text: str = "",
        *,
        mode: str = EDIT_MODE_INSERT,
        word_break_chars: frozenset[str] = DEFAULT_WORD_BREAK_CHARS,
    ) -> None:
        if mode not in EDIT_MODES:
            raise ValueError(f"edit mode must be one of {', '.join(EDIT_MODES)}: {mode!r}")
        self.mode = mode
        self.word_break_chars = word_break_chars
        self._text = text
        self._cursor = len(text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    def prefix(self) -> str:
        """Return the text before the cursor."""
        return self._text[: self._cursor]

    def set_text(self, text: str, cursor: int | None = None) -> None:
        """Replace the text; the cursor goes to ``cursor`` or the end."""
        self._text = text
        self._cursor = len(text) if cursor is None else max(0, min(cursor, len(text)))

    def insert(self, chars: str) -> None:
        if not chars:
            return
        head = self._text[: self._cursor]
        if self.mode == EDIT_MODE_OVERWRITE:
            tail = self._text[self._cursor + len(chars) :]
        else:
            tail = self._text[self._cursor :]
        self._text = head + chars + tail
        self._cursor += len(chars)

    # motions
    def backward(self) -> None:
        self._cursor = max(0, self._cursor - 1)

    def forward(self) -> None:
        self._cursor = min(len(self._text), self._cursor + 1)

    def move_to_head(self) -> None:
        self._cursor = 0

    def move_to_tail(self) -> None:
        self._cursor = len(self._text)

    def _previous_nearest(self) -> int:
        pos = self._cursor - 1
        while pos > 0 and self._text[pos - 1] not in self.word_break_chars:
            pos -= 1
        return max(0, pos)

    def _next_nearest(self) -> int:
        pos = self._cursor + 1
        while pos < len(self._text) and self._text[pos] not in self.word_break_chars:
            pos += 1
        return min(len(self._text), pos)

    def move_to_previous_nearest(self) -> None:
        self._cursor = self._previous_nearest()

    def move_to_next_nearest(self) -> None:
        self._cursor = self._next_nearest()

    # erasing
    def erase(self) -> None:
        """Delete the character before the cursor."""
        if self._cursor == 0:
            return
        self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
        self._cursor -= 1

    def erase_all(self) -> None:
        self._text = ""
        self._cursor = 0

    def erase_to_previous_nearest(self) -> None:
        target = self._previous_nearest()
        self._text = self._text[:target] + self._text[self._cursor :]
        self._cursor = target

    def erase_to_next_nearest(self) -> None:
        target = self._next_nearest()
        self._text = self._text[: self._cursor] + self._text[target:]


__all__ = [
    "DEFAULT_WORD_BREAK_CHARS",
    "EDIT_MODES",
    "EDIT_MODE_INSERT",
    "EDIT_MODE_OVERWRITE",
    "LineEditor",
]
