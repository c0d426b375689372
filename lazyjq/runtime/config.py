"""Explorer settings loaded from a JSON config file.

The file lives under the platform config directory (``config.json``) unless
``--config`` names another path. Every read is defensive: a missing,
unreadable or malformed file yields the defaults, and a value of the wrong
type falls back to the default for that key.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from ..editor import EDIT_MODE_INSERT, EDIT_MODES
from ..engine import DEFAULT_ENGINE_COMMAND
from ..json_view.styling import DEFAULT_STYLE
from ..keymap import KeyBindings, default_keybinds, merge_keybinds
from ..pipeline.suggestions import RANKING_POLICIES, RANKING_SCAN

logger = logging.getLogger(__name__)

APP_NAME = "lazyjq"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class ExplorerConfig:
    """Resolved, immutable settings consumed by the runtime and the pipeline."""

    query_debounce_ms: int = 600
    resize_debounce_ms: int = 200
    spin_interval_ms: int = 300
    search_result_chunk_size: int = 100
    search_load_chunk_size: int = 50000
    suggestion_lines: int = 3
    fold_depth: int | None = None
    indent: int = 2
    max_streams: int | None = None
    edit_mode: str = EDIT_MODE_INSERT
    no_hint: bool = False
    style: str = DEFAULT_STYLE
    engine_command: str = DEFAULT_ENGINE_COMMAND
    suggestion_ranking: str = RANKING_SCAN
    no_color: bool = False
    keybinds: dict[str, KeyBindings] = field(default_factory=default_keybinds, hash=False)

    @property
    def query_debounce_seconds(self) -> float:
        return self.query_debounce_ms / 1000.0

    @property
    def resize_debounce_seconds(self) -> float:
        return self.resize_debounce_ms / 1000.0

    @property
    def spin_interval_seconds(self) -> float:
        return self.spin_interval_ms / 1000.0

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ExplorerConfig:
        """Build a config from decoded JSON, keeping only well-typed known keys."""
        values: dict[str, Any] = {}
        for item in fields(cls):
            if item.name not in data:
                continue
            value = _coerce(item.name, data[item.name])
            if value is _INVALID:
                logger.debug("ignoring config value for %s: %r", item.name, data[item.name])
                continue
            values[item.name] = value
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> ExplorerConfig:
        """Return a copy with every non-``None`` override applied."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


_INVALID = object()

_POSITIVE_INT_KEYS = frozenset(
    {
        "query_debounce_ms",
        "resize_debounce_ms",
        "spin_interval_ms",
        "search_result_chunk_size",
        "search_load_chunk_size",
    }
)
_NONNEGATIVE_INT_KEYS = frozenset({"suggestion_lines", "indent"})
_OPTIONAL_INT_KEYS = frozenset({"fold_depth", "max_streams"})
_BOOL_KEYS = frozenset({"no_hint", "no_color"})
_STRING_CHOICES: dict[str, tuple[str, ...]] = {
    "edit_mode": EDIT_MODES,
    "suggestion_ranking": RANKING_POLICIES,
}


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce(key: str, value: object) -> object:
    if key in _POSITIVE_INT_KEYS:
        return value if _is_int(value) and value > 0 else _INVALID
    if key in _NONNEGATIVE_INT_KEYS:
        return value if _is_int(value) and value >= 0 else _INVALID
    if key in _OPTIONAL_INT_KEYS:
        if value is None:
            return None
        return value if _is_int(value) and value >= 0 else _INVALID
    if key in _BOOL_KEYS:
        return value if isinstance(value, bool) else _INVALID
    if key in _STRING_CHOICES:
        return value if value in _STRING_CHOICES[key] else _INVALID
    if key == "keybinds":
        return merge_keybinds(value) if isinstance(value, dict) else _INVALID
    return value if isinstance(value, str) and value.strip() else _INVALID


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else DEFAULT_CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("config %s not loaded: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_explorer_config(path: Path | None = None) -> ExplorerConfig:
    return ExplorerConfig.from_mapping(load_config(path))


__all__ = [
    "APP_NAME",
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG_PATH",
    "ExplorerConfig",
    "load_config",
    "load_explorer_config",
]
