"""Command-line front door for lazyjq.

Parses CLI options, resolves the effective config, and loads the JSON input.
Then either renders one expression non-interactively or starts the explorer.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .editor import EDIT_MODES
from .engine import JqEngine
from .json_view.document import DocumentError, JsonDocument, parse_json_stream
from .json_view.formatter import FoldState, format_stream
from .pipeline.evaluator import evaluate_outcome
from .pipeline.state import EvalError, EvalOk
from .render import render_rows_text
from .runtime import run_explorer
from .runtime.config import ExplorerConfig, load_explorer_config

PACKAGE_LOGGER = "lazyjq"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def configure_logging(log_file: Path | None) -> None:
    """Keep log records off the terminal; write them to ``log_file`` when given."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if log_file is None:
        package_logger.addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyjq",
        description="Explore JSON interactively with jq filters.",
    )
    parser.add_argument("input", nargs="?", default=None, help="JSON file to explore. Reads stdin when omitted or '-'.")
    parser.add_argument(
        "-e",
        "--edit-mode",
        choices=EDIT_MODES,
        default=None,
        help="Query editor mode (default: insert).",
    )
    parser.add_argument("-n", "--no-hint", action="store_true", default=None, help="Hide the key hint line.")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Path to a JSON config file.")
    parser.add_argument(
        "--max-streams",
        type=_positive_int,
        default=None,
        help="Only load the first N JSON values of the input stream.",
    )
    parser.add_argument(
        "--suggestions",
        type=_positive_int,
        default=None,
        help="Number of completion candidates shown at once (default: 3).",
    )
    parser.add_argument("--style", default=None, help="Pygments style name for result highlighting.")
    parser.add_argument("--no-color", action="store_true", default=None, help="Disable color output.")
    parser.add_argument("--render", metavar="EXPR", help="Apply EXPR once, print the result rows and exit.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write debug logs to this file.")
    return parser


def resolve_config(args: argparse.Namespace) -> ExplorerConfig:
    """Load the config file and apply command-line overrides on top."""
    return load_explorer_config(args.config).with_overrides(
        edit_mode=args.edit_mode,
        no_hint=args.no_hint,
        max_streams=args.max_streams,
        suggestion_lines=args.suggestions,
        style=args.style,
        no_color=args.no_color,
    )


def read_input(source: str | None) -> str:
    if source is None or source == "-":
        if sys.stdin.isatty():
            raise SystemExit("No input: pass a JSON file or pipe JSON on stdin.")
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SystemExit(f"Cannot read {path}: {exc}") from exc


def load_document(source: str | None, max_streams: int | None) -> JsonDocument:
    try:
        return parse_json_stream(read_input(source), max_streams=max_streams)
    except DocumentError as exc:
        raise SystemExit(str(exc)) from exc


def render_expression(document: JsonDocument, expression: str, config: ExplorerConfig) -> str:
    """Evaluate ``expression`` once and return its fully expanded rows."""
    outcome = evaluate_outcome(JqEngine(config.engine_command), expression, document)
    if isinstance(outcome, EvalError):
        raise SystemExit(outcome.message)
    values = outcome.values if isinstance(outcome, EvalOk) else ()
    rows = format_stream(values, FoldState(None), config.indent)
    return render_rows_text(rows, config.style, config.no_color)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run lazyjq."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)
    config = resolve_config(args)
    document = load_document(args.input, config.max_streams)

    if args.render is not None:
        text = render_expression(document, args.render, config)
        if text:
            sys.stdout.write(text + "\n")
        return

    run_explorer(document, config)


if __name__ == "__main__":
    main()
