#!/usr/bin/env python3
"""
intcodevm - Intcode interpreter CLI

Usage:
    python intcodevm.py <program.txt> [-i N ...] [--set ADDR=VALUE ...]
                        [--peek ADDR] [--max-steps N] [--trace] [--disasm] [--verbose]

Runs the program to completion and prints its outputs comma-separated.

Examples:
    python intcodevm.py day5.txt -i 1                 # diagnostic with input 1
    python intcodevm.py day2.txt --set 1=12 --set 2=2 --peek 0
    python intcodevm.py quine.txt --trace             # trace to stderr
    python intcodevm.py game.txt --disasm             # listing, no execution
"""

import argparse
import logging
import os
import sys

# Allow running from project root or as module
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from intcode import Computer, StopReason, __version__
from intcode.disasm import listing
from intcode.errors import IntcodeError
from intcode.loader import format_program, load_program

log = logging.getLogger('intcodevm')


def parse_poke(value: str):
    """Parse an ADDR=VALUE argument."""
    addr, sep, val = value.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected ADDR=VALUE, got {value!r}")
    try:
        return int(addr), int(val)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected integers in {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intcodevm",
        description="Run an Intcode program",
    )
    parser.add_argument("program", help="Program file (comma-separated integers)")
    parser.add_argument("-i", "--input", type=int, action="append", default=[],
                        dest="inputs", metavar="N",
                        help="Queue an input value (repeatable, consumed in order)")
    parser.add_argument("--set", type=parse_poke, action="append", default=[],
                        dest="pokes", metavar="ADDR=VALUE",
                        help="Overwrite a memory cell before running (repeatable)")
    parser.add_argument("--peek", type=int, action="append", default=[],
                        metavar="ADDR",
                        help="Print a memory cell after the run (repeatable)")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Stop after this many instructions")
    parser.add_argument("--trace", action="store_true",
                        help="Print an instruction trace to stderr")
    parser.add_argument("--disasm", action="store_true",
                        help="Print a disassembly listing and exit")
    parser.add_argument("--dump", action="store_true",
                        help="Print final memory as program text")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log run details to stderr")
    parser.add_argument("--version", action="version",
                        version=f"intcodevm {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        program = load_program(args.program)
    except FileNotFoundError:
        print(f"Error: File not found: {args.program}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {args.program}: {e}", file=sys.stderr)
        return 1
    except IntcodeError as e:
        print(f"Program format error: {e}", file=sys.stderr)
        return 1

    log.info(f"Loaded {args.program}: {len(program)} words")

    computer = None
    try:
        computer = Computer(program, inputs=args.inputs)
        for addr, value in args.pokes:
            computer[addr] = value

        if args.disasm:
            print(listing(computer.memory))
            return 0

        computer.enable_trace(args.trace)
        reason = computer.run(max_steps=args.max_steps)

        if args.trace:
            print(computer.get_trace(), file=sys.stderr)
        log.info(f"Stopped: {reason.value} after {computer.steps} steps")
        if reason is StopReason.TIMEOUT:
            print(f"Warning: stopped after {args.max_steps} steps without halting",
                  file=sys.stderr)

        outputs = computer.drain_outputs()
        if outputs:
            print(",".join(str(v) for v in outputs))
        for addr in args.peek:
            print(f"[{addr}] = {computer[addr]}")
        if args.dump:
            print(format_program(computer.memory))

    except IntcodeError as e:
        if args.trace and computer is not None:
            print(computer.get_trace(), file=sys.stderr)
        print(f"Program error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Internal error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
