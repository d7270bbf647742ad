#!/usr/bin/env python3
"""
CLI for the BIT interpreter.

Usage:
    python -m bitlang run FILE [--strict]
    python -m bitlang check FILE [--strict]
    python -m bitlang list FILE [--strict]

Strict mode rejects programs that read THE JUMP REGISTER on the right-hand
side of EQUALS instead of warning about them. It defaults to on when the
BITLANG_STRICT environment variable is set to 1, true, yes or on.

Examples:
    # Run a program, reading bits from stdin
    echo "ONE ZERO ONE" | python -m bitlang run examples/echo.bit

    # Check a program for load errors
    python -m bitlang check --strict examples/echo.bit

    # Print a program in normalized form
    python -m bitlang list examples/echo.bit
"""

import argparse
import os
import sys
from pathlib import Path


TRUTHY = ('1', 'true', 'yes', 'on')


def strict_default() -> bool:
    """Read the default for --strict from the environment."""
    return os.environ.get('BITLANG_STRICT', '').strip().lower() in TRUTHY


def print_warnings(program) -> None:
    """Print load warnings to stderr."""
    for diag in program.warnings:
        print(diag.format(), file=sys.stderr)


def load_file(args):
    """Load the program named on the command line, or return None on error."""
    from . import load, BitError

    source_path = Path(args.file)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return None

    try:
        source = source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Cannot read {source_path}: {e}", file=sys.stderr)
        return None

    try:
        program = load(source, strict=args.strict, filename=str(source_path))
    except BitError as e:
        print(e, file=sys.stderr)
        return None

    print_warnings(program)
    return program


def cmd_check(args):
    """Check a program for load errors."""
    program = load_file(args)
    if program is None:
        return 1

    print(f"OK: {Path(args.file).name} - {len(program)} line(s), no errors")
    if program.warnings:
        print(f"  {len(program.warnings)} warning(s)")
    return 0


def cmd_list(args):
    """Print a program in normalized source form."""
    from . import format_program

    program = load_file(args)
    if program is None:
        return 1

    listing = format_program(program)
    if listing:
        print(listing)
    return 0


def cmd_run(args):
    """Run a program against stdin and stdout."""
    from . import Interpreter, BitError

    program = load_file(args)
    if program is None:
        return 1

    try:
        Interpreter(program, sys.stdin, sys.stdout).run()
    except BitError as e:
        sys.stdout.flush()
        print(e, file=sys.stderr)
        return 1
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='python -m bitlang',
        description='Interpreter for the BIT programming language',
    )

    subparsers = parser.add_subparsers(dest='action', required=True)

    for name, help_text in (
        ('run', 'Run a program'),
        ('check', 'Check a program for errors'),
        ('list', 'Print a program in normalized form'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('file', help='BIT source file')
        sub.add_argument('--strict', action='store_true', default=strict_default(),
                         help='Reject THE JUMP REGISTER on the right-hand side of EQUALS')

    args = parser.parse_args(argv)

    if args.action == 'check':
        return cmd_check(args)
    elif args.action == 'list':
        return cmd_list(args)
    elif args.action == 'run':
        return cmd_run(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
