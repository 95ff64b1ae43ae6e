#!/usr/bin/env python3
"""
Command-line runner: bfi [--strict] <filepath>

Program output goes to stdout as raw bytes; warnings and fatal errors go to
stderr so they never mix with the program's byte stream.
"""

import argparse
import logging
import sys
from typing import List, Optional

from brainfuck import BrainfuckInterpreter, InterpreterConfig
from core.assembler import assemble
from core.faults import BrainfuckError
from core.tape_io import StreamOutput, TerminalInput, read_source_lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfi",
        allow_abbrev=False,
        description="Run a Brainfuck program on a 32768-cell byte tape",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat pointer and cell overflow/underflow as fatal instead of wrapping",
    )
    parser.add_argument("filepath", help="Program source file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        lines = read_source_lines(args.filepath)
    except (OSError, UnicodeDecodeError) as e:
        print(f"fatal: cannot read {args.filepath}: {e}", file=sys.stderr)
        return 1

    interpreter = BrainfuckInterpreter(InterpreterConfig(strict=args.strict))
    try:
        stream = assemble(lines)
        interpreter.run(stream, TerminalInput(sys.stdin), StreamOutput(sys.stdout))
    except BrainfuckError as e:
        sys.stdout.flush()
        print(f"\nfatal: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\ninterrupted", file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
