"""Adapter for the external jq-compatible filter engine.

The engine is a black box: it receives an expression and the document and
returns the JSON values it printed, or raises with its error text verbatim.
"""

from __future__ import annotations

import json
import logging
import shlex
import shutil
import subprocess
from typing import Any, Protocol

from .json_view.document import JsonDocument

logger = logging.getLogger(__name__)

DEFAULT_ENGINE_COMMAND = "jq"


class EngineError(Exception):
    """The engine rejected the expression or failed while running it."""


class EngineUnavailableError(EngineError):
    """The engine could not be invoked at all."""


class FilterEngine(Protocol):
    def evaluate(self, expression: str, document: JsonDocument) -> list[Any]: ...


class JqEngine:
    """Run filters through a jq-compatible binary (``jq``, ``gojq``, ``jaq``)."""

    def __init__(self, command: str = DEFAULT_ENGINE_COMMAND) -> None:
        argv = shlex.split(command) if command.strip() else [DEFAULT_ENGINE_COMMAND]
        self.argv = argv
        self.name = argv[0]

    def evaluate(self, expression: str, document: JsonDocument) -> list[Any]:
        if shutil.which(self.name) is None:
            raise EngineUnavailableError(f"{self.name} is not installed.")

        cmd = [*self.argv, "--compact-output", expression]
        try:
            proc = subprocess.run(
                cmd,
                input=document.engine_input,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise EngineUnavailableError(f"failed to run {self.name}: {exc}") from exc

        if proc.returncode != 0:
            err = proc.stderr.strip() or f"{self.name} failed with exit code {proc.returncode}"
            logger.debug("engine error for %r: %s", expression, err)
            raise EngineError(err)

        values: list[Any] = []
        for line in proc.stdout.splitlines():
            if not line.strip():
                continue
            try:
                values.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise EngineError(f"unreadable {self.name} output: {exc}") from exc
        return values


__all__ = [
    "DEFAULT_ENGINE_COMMAND",
    "EngineError",
    "EngineUnavailableError",
    "FilterEngine",
    "JqEngine",
]
