# -*- coding: utf-8 -*-
"""Command-line generator for standalone classification viewers.

Usage::

    classification-viewer <input-json> <output-folder> <system-key>

Reads a classification export, transforms it and writes ``index.html`` into
the output folder. Every failure is detected before anything is written.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import List, NoReturn, Optional

from classification_viewer.config import ConfigManager
from classification_viewer.core.exceptions import ClassificationViewerError, UnknownSystemError
from classification_viewer.core.generators.html_builder import build_viewer_document
from classification_viewer.core.transform import transform_source
from classification_viewer.logging_config import setup_logging

logger = logging.getLogger(__name__)

__all__ = ["main", "write_document", "OUTPUT_FILENAME"]

OUTPUT_FILENAME = "index.html"

_EXAMPLE = 'classification-viewer "Uniclass2015_jan2020.json" "out/uniclass" uniclass'


class _UsageParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 and the full usage text."""

    def error(self, message: str) -> NoReturn:
        self.print_help(sys.stdout)
        self.exit(1, f"\nerror: {message}\n")


def _build_parser(system_keys: List[str]) -> argparse.ArgumentParser:
    parser = _UsageParser(
        prog="classification-viewer",
        description="Transform a classification JSON export into a standalone HTML viewer.",
        epilog=f"System keys: {', '.join(system_keys)}\n\nExample:\n  {_EXAMPLE}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="Path to the classification JSON export")
    parser.add_argument("output", help="Folder that receives index.html (created if absent)")
    parser.add_argument("system", help="Classification system key")
    return parser


def write_document(output_dir: Path, text: str) -> Path:
    """Write *text* to ``<output_dir>/index.html`` atomically."""
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / OUTPUT_FILENAME
    fd, tmp_name = tempfile.mkstemp(prefix=".index-", suffix=".html", dir=output_dir)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
    return target


def main(argv: Optional[List[str]] = None) -> int:
    """Run the generator; returns the process exit status."""
    setup_logging()
    config_manager = ConfigManager()
    system_keys = config_manager.system_keys()

    parser = _build_parser(system_keys)
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return int(exc.code or 0)

    try:
        config = config_manager.get_system_config(args.system)
    except UnknownSystemError as exc:
        print(f"Unknown system key: {exc.system_key}", file=sys.stderr)
        print(f"Valid keys: {', '.join(exc.valid_keys)}")
        logger.error("%s", exc.message)
        return 1

    input_path = Path(args.input)
    print(f"Reading: {input_path}")
    try:
        source = json.loads(input_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        print(f"Error: input file not found: {input_path}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: could not read {input_path}: {exc}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as exc:
        print(f"Error: invalid JSON in {input_path}: {exc}", file=sys.stderr)
        logger.error("Invalid JSON in %s: %s", input_path, exc)
        return 1

    print("Transforming data...")
    try:
        result = transform_source(source)
    except ClassificationViewerError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        logger.error("Transform failed for %s: %s", input_path, exc.message)
        return 1

    print(f"Found {result.top_level_count} top-level items, {result.total_items} total items")

    print("Generating HTML...")
    text = build_viewer_document(
        result, config, viewer_settings=config_manager.get_viewer_settings()
    )

    try:
        output_path = write_document(Path(args.output), text)
    except OSError as exc:
        print(f"Error: could not write output: {exc}", file=sys.stderr)
        logger.error("Could not write output to %s: %s", args.output, exc)
        return 1

    print(f"Generated: {output_path}")
    print(f"   Title: {config.title} {config.version}")
    print(f"   Items: {result.total_items}")
    logger.info("Generated %s (%s, %d items)", output_path, config.key, result.total_items)
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
