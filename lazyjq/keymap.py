"""Key-token dispatch tables and default bindings."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

KeyBindings = dict[str, tuple[str, ...]]


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small exact-match key dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_actions(
        self,
        bindings: Mapping[str, tuple[str, ...]],
        actions: Mapping[str, Callable[[], bool | None]],
    ) -> KeyComboRegistry:
        """Bind every action name in ``actions`` to its combos from ``bindings``."""
        for name, handler in actions.items():
            self.register_binding(KeyComboBinding(bindings.get(name, ()), handler))
        return self

    def handles(self, key: str) -> bool:
        return key in self._handlers

    def dispatch(self, key: str) -> bool | None:
        """Invoke the handler bound to ``key``; ``None`` means unbound."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()


GLOBAL_BINDINGS: KeyBindings = {
    "exit": ("CTRL_C",),
    "copy_query": ("CTRL_Q",),
    "copy_result": ("CTRL_O",),
    "switch_mode": ("SHIFT_UP", "SHIFT_DOWN"),
}

EDITOR_BINDINGS: KeyBindings = {
    "backward": ("LEFT",),
    "forward": ("RIGHT",),
    "move_to_head": ("CTRL_A", "HOME"),
    "move_to_tail": ("CTRL_E", "END"),
    "move_to_previous_nearest": ("ALT_LEFT",),
    "move_to_next_nearest": ("ALT_RIGHT",),
    "erase": ("BACKSPACE",),
    "erase_all": ("CTRL_U",),
    "erase_to_previous_nearest": ("CTRL_W",),
    "erase_to_next_nearest": ("ALT_D",),
    "completion": ("TAB",),
}

COMPLETION_BINDINGS: KeyBindings = {
    "up": ("UP", "SHIFT_TAB"),
    "down": ("DOWN", "TAB"),
    "accept": ("ENTER",),
    "cancel": ("ESC",),
}

VIEWER_BINDINGS: KeyBindings = {
    "up": ("UP", "CTRL_K", "k"),
    "down": ("DOWN", "CTRL_D", "j"),
    "move_to_head": ("HOME", "g"),
    "move_to_tail": ("END", "G"),
    "toggle": ("ENTER", " "),
    "expand": ("CTRL_P",),
    "collapse": ("CTRL_N",),
}

DEFAULT_KEYBINDS: dict[str, KeyBindings] = {
    "global": GLOBAL_BINDINGS,
    "editor": EDITOR_BINDINGS,
    "completion": COMPLETION_BINDINGS,
    "viewer": VIEWER_BINDINGS,
}


def default_keybinds() -> dict[str, KeyBindings]:
    return {section: dict(bindings) for section, bindings in DEFAULT_KEYBINDS.items()}


def merge_keybinds(overrides: Mapping[str, object]) -> dict[str, KeyBindings]:
    """Patch the default tables with ``section -> action -> [key, ...]`` overrides.

    Unknown sections and actions are ignored, and so is any binding that is
    not a non-empty list of key-token strings; those keep their defaults.
    """
    merged = default_keybinds()
    for section, actions in overrides.items():
        table = merged.get(section)
        if table is None or not isinstance(actions, Mapping):
            logger.debug("ignoring keybinds section %r", section)
            continue
        for action, combos in actions.items():
            if action not in table:
                logger.debug("ignoring unknown %s action %r", section, action)
                continue
            if (
                not isinstance(combos, list)
                or not combos
                or not all(isinstance(combo, str) and combo for combo in combos)
            ):
                logger.debug("ignoring keybinds for %s.%s: %r", section, action, combos)
                continue
            table[action] = tuple(combos)
    return merged


__all__ = [
    "COMPLETION_BINDINGS",
    "DEFAULT_KEYBINDS",
    "EDITOR_BINDINGS",
    "GLOBAL_BINDINGS",
    "KeyBindings",
    "KeyComboBinding",
    "KeyComboRegistry",
    "VIEWER_BINDINGS",
    "default_keybinds",
    "merge_keybinds",
]
