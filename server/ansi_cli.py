#!/usr/bin/env python3
"""Convert ANSI-colored text to JSON runs from the command line."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ansi_parser import get_segments, parse_lines, to_run
from ansi_style import BUILDERS, ClassNameStyle

log = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert ANSI escape codes into styled JSON runs")
    parser.add_argument("file", nargs="?", default="", help="Input file (default: stdin)")
    parser.add_argument("--builder", choices=sorted(BUILDERS), default="inline", help="Style builder")
    parser.add_argument("--lines", action="store_true", help="Group runs by line")
    parser.add_argument("--stylesheet", action="store_true", help="Print CSS for the class builder")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP server")
    parser.add_argument("--host", default="", help="Override ANSI_HOST")
    parser.add_argument("--port", type=int, default=0, help="Override ANSI_PORT")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def read_input(path: str) -> str:
    if not path or path == "-":
        return sys.stdin.buffer.read().decode("utf-8", errors="replace")
    return Path(path).read_text(encoding="utf-8", errors="replace")


def convert(text: str, builder: str = "inline", lines: bool = False) -> object:
    factory = BUILDERS[builder]
    if lines:
        return parse_lines(text, factory)
    return [to_run(style, part) for style, part in get_segments(text, factory)]


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.stylesheet:
        sys.stdout.write(ClassNameStyle.stylesheet())
        return 0

    if args.serve:
        import main as server

        server.serve(host=args.host or server.HOST, port=args.port or server.PORT)
        return 0

    try:
        text = read_input(args.file)
    except OSError as exc:
        print(f"ansi-segments: {exc}", file=sys.stderr)
        return 1

    log.debug("Read %d characters", len(text))
    json.dump(convert(text, args.builder, args.lines), sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
