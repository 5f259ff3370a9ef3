#!/usr/bin/env python3
"""Build a screen descriptor from a saved Figma JSON export.

Usage:
    # Whole file / node response saved from the Figma API:
    python scripts/process_screen.py data/login.json

    # Pick a sub-node and write the result to a file:
    python scripts/process_screen.py data/file.json --node-id 12-345 --output out/login_screen.json

    # Override the screen frame (x,y,width,height):
    python scripts/process_screen.py data/login.json --screen 0,0,390,844
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import Optional

from screenmap.engine import ScreenMapError, build_screen
from screenmap.logging_config import get_cli_logger


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Figma JSON → screen descriptor")
    parser.add_argument("input", help="Path to the Figma JSON payload")
    parser.add_argument("--node-id", default=None, help="Sub-node id to use as screen root")
    parser.add_argument("--source-id", default=None, help="Value echoed as sourceId")
    parser.add_argument(
        "--screen", default=None,
        help="Screen frame override as x,y,width,height",
    )
    parser.add_argument("--output", default=None, help="Write JSON here instead of stdout")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    return parser.parse_args(argv)


def _parse_screen(value: Optional[str]) -> Optional[dict]:
    if not value:
        return None
    parts = [float(p) for p in value.split(",")]
    if len(parts) != 4:
        raise ValueError("--screen expects x,y,width,height")
    return dict(zip(("x", "y", "width", "height"), parts))


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    logger = get_cli_logger()

    with open(args.input, "r", encoding="utf-8") as f:
        payload = json.load(f)

    try:
        result = build_screen(
            payload,
            _parse_screen(args.screen),
            node_id=args.node_id,
            source_id=args.source_id,
        )
    except ScreenMapError as e:
        print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 1

    text = json.dumps(result.to_dict(), ensure_ascii=False, indent=args.indent)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info(f"Wrote {result.components_count} components to {args.output}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
