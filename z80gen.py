#!/usr/bin/env python3
"""
z80gen - Z80 opcode table and test generator CLI

Usage:
    python z80gen.py [listing] [-o output] [--log-file path] [--verbose]

The listing defaults to ./z80-opcodes. For every section of the listing the
output holds the descriptor table and then the round-trip test directives,
each followed by a separator line. Output goes to stdout unless -o is given;
log messages always go to stderr.

Examples:
    python z80gen.py z80-opcodes -o z80_tables.inc
    python z80gen.py -v --log-file logs/z80gen.log > z80_tables.inc
"""

import argparse
import logging
import sys
import os

# Allow running from project root or as module
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from z80tablegen import __version__, convert_file
from z80tablegen.errors import ClassificationError, Z80TableGenError
from z80tablegen.log_setup import setup_logging
from z80tablegen.source import DEFAULT_INPUT


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="z80gen",
        description="Generate Z80 disassembler descriptor tables and round-trip "
                    "tests from a reference opcode listing",
    )
    parser.add_argument("input", nargs="?", default=DEFAULT_INPUT,
                        help=f"Reference opcode listing (default: {DEFAULT_INPUT})")
    parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    parser.add_argument("--log-file", help="Also write a debug log to this file")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show per-section summaries and debug messages on stderr")
    parser.add_argument("--version", action="version",
                        version=f"z80gen {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    log = setup_logging(console_level=logging.DEBUG if args.verbose else logging.WARNING,
                        log_file=args.log_file)
    log.debug("Input: %s", args.input)

    try:
        result = convert_file(args.input)
    except OSError as e:
        log.error("Error reading %s: %s", args.input, e)
        return 1
    except ClassificationError as e:
        log.error("Corrupt opcode listing: %s", e)
        return 1
    except Z80TableGenError as e:
        log.error("%s", e)
        return 1
    except Exception as e:
        log.error("Internal error: %s", e, exc_info=args.verbose)
        return 2

    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(result)
        except OSError as e:
            log.error("Error writing %s: %s", args.output, e)
            return 1
        log.info("Output: %s", args.output)
    else:
        sys.stdout.write(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
