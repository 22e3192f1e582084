"""
Intcode disassembler tests.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from intcode.decoder import fetch
from intcode.disasm import disassemble, format_instruction, listing
from intcode.memory import Memory


class TestDisassemble:

    def test_listing_lines(self):
        lines = disassemble([1002, 4, 3, 4, 33])
        assert [(l.address, l.mnemonic) for l in lines] == [(0, "MUL"), (4, "DATA")]
        assert lines[0].format() == "0000: 1002,4,3,4        MUL [4], #3 -> [4]"
        assert lines[1].format() == "0004: 33                DATA 33"

    def test_quine_head(self):
        lines = disassemble([109, 1, 204, -1, 1001, 100, 1, 100, 99])
        assert lines[0].operand_str == "#1"
        assert f"{lines[1].mnemonic} {lines[1].operand_str}" == "OUT [rb-1]"
        assert lines[2].operand_str == "[100], #1 -> [100]"
        assert lines[3].mnemonic == "HALT"

    def test_input_operand(self):
        line = disassemble([3, 0, 99])[0]
        assert f"{line.mnemonic} {line.operand_str}" == "IN -> [0]"

    def test_truncated_instruction_is_data(self):
        """ADD needs 3 operands; a 2-word image lists as data."""
        lines = disassemble([1, 0])
        assert [l.mnemonic for l in lines] == ["DATA", "DATA"]

    def test_range(self):
        lines = disassemble(Memory([99, 99, 104, 5, 99]), start=2)
        assert [l.address for l in lines] == [2, 4]
        assert lines[0].length == 2

    def test_listing_text(self):
        assert listing([99]) == "0000: 99                HALT"

    def test_format_instruction(self):
        instr = fetch(Memory([21101, 3, 4, 5]), 0)
        assert format_instruction(instr) == "ADD #3, #4 -> [rb+5]"
