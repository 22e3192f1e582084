"""
Intcode Disassembler

Linear sweep over a memory image. Words that do not decode as an
instruction (or whose operands would run past the end of the image) are
listed as DATA, one word each, and the sweep carries on with the next word.

Usage:
    from intcode.disasm import disassemble

    for line in disassemble([1002, 4, 3, 4, 33]):
        print(line.format())
    # 0000: 1002,4,3,4        MUL [4], #3 -> [4]
    # 0004: 33                DATA 33

Operand syntax:
    [n]       position mode
    #n        immediate mode
    [rb+n]    relative mode
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from .decoder import IMMEDIATE, POSITION, Instruction, fetch
from .errors import MalformedProgram
from .memory import Memory


@dataclass
class DisassembledInstruction:
    """One listing line."""
    address: int
    words: List[int]
    mnemonic: str
    operand_str: str

    @property
    def length(self) -> int:
        return len(self.words)

    @property
    def words_str(self) -> str:
        return ",".join(str(w) for w in self.words)

    def format(self, words_width: int = 16) -> str:
        asm = f"{self.mnemonic} {self.operand_str}".strip()
        return f"{self.address:04d}: {self.words_str.ljust(words_width)}  {asm}"

    def __str__(self) -> str:
        return self.format()


def format_operand(mode: int, arg: int) -> str:
    if mode == IMMEDIATE:
        return f"#{arg}"
    if mode == POSITION:
        return f"[{arg}]"
    return f"[rb{arg:+d}]"


def format_operands(instruction: Instruction) -> str:
    """Render operands as 'a, b -> c' (reads, then the write target)."""
    info = instruction.info
    pairs = list(zip(instruction.modes, instruction.args))
    reads = ", ".join(format_operand(m, a) for m, a in pairs[:info.reads])
    writes = ", ".join(format_operand(m, a) for m, a in pairs[info.reads:])
    if writes:
        return f"{reads} -> {writes}".strip()
    return reads


def format_instruction(instruction: Instruction) -> str:
    """Mnemonic plus operands, e.g. 'ADD [rb+1], #5 -> [9]'."""
    return f"{instruction.info.mnemonic} {format_operands(instruction)}".strip()


def disassemble(memory: Union[Memory, Iterable[int]], start: int = 0,
                end: Optional[int] = None) -> List[DisassembledInstruction]:
    """Disassemble memory[start:end] into listing lines."""
    if not isinstance(memory, Memory):
        memory = Memory(memory)
    if end is None:
        end = len(memory)

    lines = []
    addr = start
    while addr < end:
        try:
            instr = fetch(memory, addr)
        except MalformedProgram:
            instr = None

        if instr is None or addr + instr.length > end:
            word = memory.read(addr)
            lines.append(DisassembledInstruction(addr, [word], "DATA", str(word)))
            addr += 1
            continue

        lines.append(DisassembledInstruction(
            address=addr,
            words=[memory.read(addr)] + instr.args,
            mnemonic=instr.info.mnemonic,
            operand_str=format_operands(instr),
        ))
        addr += instr.length
    return lines


def listing(memory, start: int = 0, end: Optional[int] = None) -> str:
    """Full listing as text."""
    return "\n".join(line.format() for line in disassemble(memory, start, end))
