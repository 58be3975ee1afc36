"""
stackview command-line host.

Loads a table and its role file from disk, runs the pipeline once and prints the view
model (or the fatal error) as JSON on stdout. Logs go to stderr.

Usage:
    stackview --table data.csv --roles roles.json --width 1200 --height 800
    python -m app.main --table data.parquet --roles roles.json --deselect 0:ok

Exit codes:
    0  view model printed
    1  fatal pipeline error printed
    2  input files or configuration could not be read
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from stackview.core.errors import ConfigError
from stackview.core.schema import Viewport
from stackview.io.config import ViewDefaults
from stackview.io.read import load_dataset
from stackview.logging_config import setup_logging
from stackview.viz.palette import ColorPalette
from stackview.viz.pipeline import build_view_model

logger = logging.getLogger("stackview.app")


def _parse_deselect(value: str) -> tuple[int, str]:
    index, sep, legend_value = value.partition(":")
    if not sep or not index.strip().isdigit():
        raise argparse.ArgumentTypeError(f"expected <legend index>:<value>, got {value!r}")
    return int(index), legend_value


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="stackview",
        description="Build a stacked multi-plot view model from a table and print it as JSON.",
    )
    p.add_argument("--table", required=True, help="CSV or Parquet table.")
    p.add_argument("--roles", required=True, help="JSON role file (column roles and settings).")
    p.add_argument("--width", type=float, default=1200.0, help="Viewport width in pixels.")
    p.add_argument("--height", type=float, default=800.0, help="Viewport height in pixels.")
    p.add_argument("--config", default=None, help="TOML defaults file (env STACKVIEW_* wins).")
    p.add_argument("--seed", type=int, default=0, help="Palette seed for default plot colors.")
    p.add_argument("--high-contrast", action="store_true", help="Use the foreground color everywhere.")
    p.add_argument(
        "--deselect",
        type=_parse_deselect,
        action="append",
        default=[],
        metavar="INDEX:VALUE",
        help="Deselect a legend value after building (repeatable).",
    )
    p.add_argument("--indent", type=int, default=None, help="Indent the JSON output.")
    p.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    p.add_argument("--log-file", default=None, help="Also write logs to this file.")
    return p


def main(argv: list[str] | None = None) -> int:
    """Console entrypoint.

    Args:
        argv (list[str] | None): Optional list of CLI arguments. If None,
            sys.argv[1:] is used.

    Returns:
        int: Process exit code.
    """
    args = _build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
    setup_logging(getattr(logging, str(args.log_level).upper(), logging.WARNING), args.log_file)

    try:
        defaults = ViewDefaults.load(args.config)
        dataset = load_dataset(args.table, args.roles)
    except (FileNotFoundError, ConfigError) as exc:
        logger.error("%s", exc)
        print(json.dumps({"error": {"kind": "input", "message": str(exc)}}))
        return 2

    palette = ColorPalette(defaults.legend_palette, seed=args.seed, is_high_contrast=args.high_contrast)
    result = build_view_model(
        dataset, Viewport(width=args.width, height=args.height), defaults=defaults, palette=palette
    )
    if not result.ok:
        err = result.error
        print(json.dumps({"error": {"kind": err.kind.value, "title": err.title, "message": err.message}}))
        return 1

    vm = result.view_model
    for index, value in args.deselect:
        if index >= len(vm.legends):
            logger.warning("No legend at index %d; ignoring deselect of %r", index, value)
            continue
        vm.deselect(index, value)

    payload: dict[str, Any] = vm.to_dict()
    print(json.dumps(payload, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
