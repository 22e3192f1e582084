"""
Intcode Decoder - opcode table, addressing modes, instruction decode

An instruction word packs the opcode into its two low decimal digits and
one addressing-mode digit per parameter above them, read least-significant
first:

    1002  ->  opcode 02 (MUL), modes: param1=0, param2=1, param3=0 (default)

Addressing modes:
  POSITION   (0)  operand is an address; the value lives in that cell
  IMMEDIATE  (1)  operand is the value itself (never legal for a write)
  RELATIVE   (2)  operand is an offset from the relative base

Missing leading mode digits mean POSITION. Write parameters (the last
parameter of ADD/MUL/LT/EQ and the only parameter of IN) resolve to a
destination address rather than a value.

Decode is split in two: fetch() reads the raw words without touching
anything else (the disassembler uses this), resolve() turns the raw
operands into values and addresses against live memory.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple

from .errors import AddressOutOfRange, AddressUnderflow, IllegalMode, IllegalOpcode

__all__ = [
    'ADD', 'MUL', 'IN', 'OUT', 'JT', 'JF', 'LT', 'EQ', 'ARB', 'HALT',
    'POSITION', 'IMMEDIATE', 'RELATIVE', 'MODE_NAMES',
    'OpcodeInfo', 'OPCODES', 'Instruction',
    'parameter_modes', 'fetch', 'resolve', 'decode_instruction',
]

# ──────────────────────────────────────────────
# Opcodes
# ──────────────────────────────────────────────

ADD  = 1
MUL  = 2
IN   = 3
OUT  = 4
JT   = 5   # jump-if-true
JF   = 6   # jump-if-false
LT   = 7
EQ   = 8
ARB  = 9   # adjust relative base
HALT = 99

# ──────────────────────────────────────────────
# Addressing modes
# ──────────────────────────────────────────────

POSITION  = 0
IMMEDIATE = 1
RELATIVE  = 2

MODE_NAMES = {
    POSITION:  'position',
    IMMEDIATE: 'immediate',
    RELATIVE:  'relative',
}


class OpcodeInfo(NamedTuple):
    name: str
    mnemonic: str
    reads: int    # leading parameters resolved to values
    writes: int   # trailing parameters resolved to addresses

    @property
    def param_count(self) -> int:
        return self.reads + self.writes


# Format: opcode -> (name, mnemonic, reads, writes)
OPCODES = {
    ADD:  OpcodeInfo('add',                  'ADD',  2, 1),
    MUL:  OpcodeInfo('multiply',             'MUL',  2, 1),
    IN:   OpcodeInfo('input',                'IN',   0, 1),
    OUT:  OpcodeInfo('output',               'OUT',  1, 0),
    JT:   OpcodeInfo('jump-if-true',         'JT',   2, 0),
    JF:   OpcodeInfo('jump-if-false',        'JF',   2, 0),
    LT:   OpcodeInfo('less-than',            'LT',   2, 1),
    EQ:   OpcodeInfo('equals',               'EQ',   2, 1),
    ARB:  OpcodeInfo('relative-base-offset', 'ARB',  1, 0),
    HALT: OpcodeInfo('halt',                 'HALT', 0, 0),
}


@dataclass
class Instruction:
    """One decoded instruction.

    args holds the raw operand words as stored in memory. params is filled
    by resolve(): values for read parameters, addresses for write ones.
    """
    opcode: int
    address: int
    modes: List[int]
    args: List[int]
    params: List[int] = field(default_factory=list)

    @property
    def info(self) -> OpcodeInfo:
        return OPCODES[self.opcode]

    @property
    def length(self) -> int:
        # +1 for the instruction word itself
        return len(self.args) + 1

    @property
    def word(self) -> int:
        return (self.opcode
                + sum(m * 10 ** (i + 2) for i, m in enumerate(self.modes)))


def parameter_modes(word: int, count: int) -> List[int]:
    """Extract `count` addressing modes from an instruction word."""
    # drop the two opcode digits
    mode_data = word // 100
    modes = []
    for i in range(count):
        mode = mode_data % 10
        if mode not in MODE_NAMES:
            raise IllegalMode(f"Unknown addressing mode {mode} for parameter {i + 1}", mode)
        modes.append(mode)
        mode_data //= 10
    return modes


def fetch(memory, ip: int) -> Instruction:
    """Read the instruction at ip without resolving its operands.

    Raises IllegalOpcode / IllegalMode for words that do not decode.
    """
    word = memory.read(ip)
    opcode = word % 100
    if word < 0 or opcode not in OPCODES:
        raise IllegalOpcode(word if word < 0 else opcode, ip)
    info = OPCODES[opcode]

    try:
        modes = parameter_modes(word, info.param_count)
    except IllegalMode as e:
        raise e.at(ip)

    for i in range(info.reads, info.param_count):
        if modes[i] == IMMEDIATE:
            raise IllegalMode(
                f"{info.mnemonic}: immediate mode on write parameter {i + 1}",
                IMMEDIATE, ip)

    args = [memory.read(ip + 1 + i) for i in range(info.param_count)]
    return Instruction(opcode=opcode, address=ip, modes=modes, args=args)


def resolve(instruction: Instruction, memory, relative_base: int) -> Instruction:
    """Fill instruction.params against the current memory and relative base."""
    info = instruction.info
    params = []
    for i, (mode, arg) in enumerate(zip(instruction.modes, instruction.args)):
        if mode == IMMEDIATE:
            params.append(arg)
            continue

        addr = arg if mode == POSITION else relative_base + arg
        if addr < 0:
            raise AddressUnderflow(addr, instruction.address)
        if i >= info.reads:
            # Write targets fault here, before the handler consumes any input
            if addr >= memory.max_size:
                raise AddressOutOfRange(addr, memory.max_size, instruction.address)
            params.append(addr)
        else:
            params.append(memory.read(addr))
    instruction.params = params
    return instruction


def decode_instruction(memory, ip: int, relative_base: int = 0) -> Instruction:
    """Fetch and resolve the instruction at ip."""
    return resolve(fetch(memory, ip), memory, relative_base)
