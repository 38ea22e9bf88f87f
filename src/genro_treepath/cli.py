# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Command line access to the tree engine.

Reads a JSON document, applies one operation and writes the JSON result.

Usage:
    genro-treepath -i config.json fetch database.host
    genro-treepath -i config.json extend database.port 5432 -o config.json
    echo '{"a.b": 1}' | genro-treepath normalize
    genro-treepath -i config.json ping database.host && echo present
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from . import __version__
from .engine import exclude, extend, fetch, flatten, normalize, ping, touch
from .exceptions import TreePathError
from .path import DEFAULT_MAX_DEPTH

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ABSENT = 1
EXIT_ERROR = 2


def parse_value(text: str) -> Any:
    """Parse a command line value as JSON, falling back to the raw string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='genro-treepath',
        description='Read and write nested JSON documents using dotted paths',
    )
    parser.add_argument('-i', '--input', help='Input JSON file (default: stdin)')
    parser.add_argument('-o', '--output', help='Output JSON file (default: stdout)')
    parser.add_argument('--indent', type=int, default=2, help='JSON indentation')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_DEPTH,
                        help='Maximum number of path segments')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    commands = parser.add_subparsers(dest='command', required=True)

    cmd = commands.add_parser('fetch', help='Print the value at a path')
    cmd.add_argument('path')
    cmd.add_argument('--default', type=parse_value, default=None,
                     help='Value printed when the path is absent (JSON)')

    cmd = commands.add_parser('ping', help='Check a path for existence')
    cmd.add_argument('path')
    cmd.add_argument('--loose', action='store_true',
                     help='Do not check the final segment of the path')

    cmd = commands.add_parser('extend', help='Set the value at a path')
    cmd.add_argument('path')
    cmd.add_argument('value', type=parse_value, help='Value to set (JSON or raw string)')

    cmd = commands.add_parser('touch', help='Make sure a path holds an object')
    cmd.add_argument('path')

    cmd = commands.add_parser('exclude', help='Remove the value at a path')
    cmd.add_argument('path')

    commands.add_parser('normalize', help='Explode dotted keys into nested objects')
    commands.add_parser('flatten', help='Collapse nested objects into dotted keys')

    return parser


def run(args: argparse.Namespace, document: Any) -> tuple[Any, int]:
    """Apply the command in args to document.

    Returns:
        Tuple of (result to print, exit status).
    """
    depth = args.max_depth
    command = args.command

    if command == 'fetch':
        return fetch(document, args.path, args.default, max_depth=depth), EXIT_OK
    if command == 'ping':
        present = ping(document, args.path, strict=not args.loose, max_depth=depth)
        return present, EXIT_OK if present else EXIT_ABSENT
    if command == 'extend':
        return extend(document, args.path, args.value, max_depth=depth), EXIT_OK
    if command == 'touch':
        return touch(document, args.path, max_depth=depth), EXIT_OK
    if command == 'exclude':
        return exclude(document, args.path, max_depth=depth), EXIT_OK
    if command == 'normalize':
        return normalize(document, max_depth=depth), EXIT_OK
    if command == 'flatten':
        return flatten(document), EXIT_OK
    raise ValueError(f"Unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        if args.input:
            text = Path(args.input).read_text(encoding='utf-8')
        else:
            text = sys.stdin.read()
        document = json.loads(text) if text.strip() else {}
        result, status = run(args, document)
        output = json.dumps(result, indent=args.indent)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return EXIT_ERROR
    except (TreePathError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except RecursionError:
        # --max-depth bounds paths, not the nesting of the document
        print("Error: document is nested too deeply", file=sys.stderr)
        return EXIT_ERROR

    if args.output:
        try:
            Path(args.output).write_text(output + '\n', encoding='utf-8')
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return EXIT_ERROR
        logger.info("Result written to %s", args.output)
    else:
        print(output)
    return status


if __name__ == '__main__':
    sys.exit(main())
