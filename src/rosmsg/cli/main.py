"""Main CLI entry point for rosmsg."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..cli.analyze import analyze_file
from ..exceptions import RosmsgError
from ..header import decode_header


def main() -> int:
    """Main entry point for the rosmsg CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="rosmsg: ROSMSG Binary Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rosmsg --analyze messages.py          Show the wire layout of message classes
  rosmsg --header capture.bin           Decode a captured connection header
  rosmsg --version                      Show version
        """,
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze message classes and show their wire layout",
    )

    parser.add_argument(
        "--header",
        metavar="FILE",
        type=str,
        help="Decode a binary connection header capture and print its fields",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"rosmsg {__version__}",
    )

    args = parser.parse_args()

    if args.analyze:
        file_path = Path(args.analyze)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            analyze_file(file_path)
            return 0
        except Exception as e:
            print(f"Error analyzing file: {e}", file=sys.stderr)
            return 1

    if args.header:
        file_path = Path(args.header)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            header = decode_header(file_path.read_bytes())
        except RosmsgError as e:
            print(f"Error decoding header ({e.kind.name}): {e}", file=sys.stderr)
            return 1

        for key in sorted(header):
            print(f"{key}={header[key]!r}" if "\n" in header[key] else f"{key}={header[key]}")
        return 0

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
