"""
Command-line front end:

    ihexconv hex2bin <input.hex> <output.bin> [--fill 0xFF]
    ihexconv bin2hex <input.bin> <output.hex> [--address 0x0]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .convert import bin_to_ihex, ihex_to_bin


class ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors on one `*** ERROR:` line, followed by the usage."""

    def error(self, message):
        self.exit(2, f"*** ERROR: Invalid parameter(s): {message}\n{self.format_usage()}")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="ihexconv", description="Convert between Intel HEX and raw binary files."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Report what was written")
    sub = parser.add_subparsers(dest="command", required=True)

    h2b = sub.add_parser("hex2bin", help="Intel HEX to binary")
    h2b.add_argument("input", type=Path, help="Input .hex (Intel HEX)")
    h2b.add_argument("output", type=Path, help="Output .bin")
    h2b.add_argument("--fill", default="0xFF", help="Fill byte for gaps, default 0xFF")

    b2h = sub.add_parser("bin2hex", help="binary to Intel HEX")
    b2h.add_argument("input", type=Path, help="Input .bin")
    b2h.add_argument("output", type=Path, help="Output .hex (Intel HEX)")
    b2h.add_argument("--address", default="0", help="Address of the first byte, default 0")
    return parser


def parse_number(parser: ArgumentParser, text: str) -> int:
    try:
        return int(text, 0)
    except ValueError:
        parser.error(f"invalid number: {text!r}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "hex2bin":
        fill = parse_number(parser, args.fill) & 0xFF
        result = ihex_to_bin(args.input, args.output, fill)
    else:
        result = bin_to_ihex(args.input, args.output, parse_number(parser, args.address))

    if not result:
        print(f"*** ERROR: {result.message}", file=sys.stderr)
        return 1
    if args.verbose:
        print(result.message)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
