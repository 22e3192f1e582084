"""
Intcode - a small memory-based instruction-set interpreter
===========================================================

Executes programs stored as a flat array of integers, with position,
immediate and relative addressing, and suspends on output so a driver can
interleave its own logic with the program.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌───────────┐
    │ "1,0,0,3"│───>│  Loader  │───>│  Memory  │<──>│ Computer  │<── inputs / source
    │  (text)  │    │  (ints)  │    │(growable)│    │ (decoder) │──> outputs
    └──────────┘    └──────────┘    └──────────┘    └───────────┘

    - loader.py:   comma-separated text <-> memory image
    - memory.py:   zero-initialised memory that grows on write
    - decoder.py:  opcode table, addressing modes, fetch/resolve
    - computer.py: execution engine and run control
    - inputs.py:   input sources consulted when the input queue is empty
    - disasm.py:   static listing of a memory image
    - network.py:  chains of independent computers passing values
"""

__version__ = "0.3.0"

from .errors import (
    IntcodeError, MalformedProgram, IllegalOpcode, IllegalMode,
    InputStarvation, OutputUnderflow, AddressUnderflow, AddressOutOfRange,
    ProgramFormatError,
)
from .memory import Memory
from .decoder import Instruction, OPCODES, decode_instruction
from .inputs import InputSource, QueueInput, ConstantInput, TrackingController
from .computer import Computer, StopReason
from .loader import parse_program, load_program, format_program
from .disasm import disassemble, listing


def run_program(source, inputs=(), **kwargs) -> Computer:
    """Parse (if given text) and run a program to completion.

    Returns the halted computer so callers can read outputs and memory:

        run_program("1,0,0,0,99")[0]   # 2
    """
    program = parse_program(source) if isinstance(source, str) else source
    computer = Computer(program, inputs=inputs, **kwargs)
    computer.run_until_halted()
    return computer
