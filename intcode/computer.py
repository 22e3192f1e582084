"""
Intcode Computer - Main Interpreter Class

Integrates:
  - Memory map (memory.py), growable and zero-initialised
  - Instruction decoder (decoder.py)
  - Input queue plus optional input source (inputs.py)
  - Output queue

Execution model:
  1. Fetch the instruction word at IP
  2. Decode addressing modes, resolve operands to values / addresses
  3. Execute the handler: update memory, relative base, queues
  4. Advance IP by the instruction length, unless the handler jumped

Run control:
  step()               exactly one instruction
  run_until_halted()   until HALT
  run_until_output()   until one output is produced (returned) or HALT (None)
  run()                the shared loop, with an optional step bound and
                       breakpoints

Stop reasons:
  HALT:     HALT executed (terminal, never cleared)
  OUTPUT:   an OUT instruction produced a value
  BREAK:    IP reached a breakpoint
  TIMEOUT:  caller-supplied max_steps exhausted
  END:      IP ran past the backed memory with nothing left to execute

Faults (IntcodeError subclasses) propagate to the caller with the IP of the
faulting instruction attached. The instruction that faulted has no effect
and IP is not advanced.
"""

import logging
from collections import deque
from enum import Enum
from typing import Iterable, List, Optional, Set

from .decoder import ADD, ARB, EQ, HALT, IN, JF, JT, LT, MUL, OUT, Instruction, decode_instruction
from .disasm import format_instruction
from .errors import AddressUnderflow, InputStarvation, IntcodeError, OutputUnderflow
from .inputs import InputSource
from .memory import Memory

log = logging.getLogger('intcode.computer')


class StopReason(Enum):
    HALT = 'HALT'
    OUTPUT = 'OUTPUT'
    BREAK = 'BREAK'
    TIMEOUT = 'TIMEOUT'
    END = 'END'


class Computer:
    """Intcode interpreter.

    Usage:
        computer = Computer(parse_program(text), inputs=[1])
        computer.run_until_halted()
        print(computer.outputs)

        # or interleave with caller logic
        while (value := computer.run_until_output()) is not None:
            computer.append_input(react(value))
    """

    def __init__(self, program: Iterable[int], inputs: Iterable[int] = (),
                 input_source: Optional[InputSource] = None, *,
                 max_memory: Optional[int] = None):
        if isinstance(program, Memory):
            program = program.snapshot()
        self.mem = Memory(program, max_size=max_memory)

        self.ip = 0
        self.relative_base = 0
        self.halted = False
        self.steps = 0

        self._inputs = deque(inputs)
        self._outputs = deque()
        self.input_source = input_source

        self._breakpoints: Set[int] = set()
        self._resume_from: Optional[int] = None

        self._trace = False
        self._trace_output: List[str] = []

        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # State access
    # ══════════════════════════════════════════════

    @property
    def memory(self) -> Memory:
        return self.mem

    def __getitem__(self, addr):
        return self.mem[addr]

    def __setitem__(self, addr: int, value: int):
        self.mem[addr] = value

    def is_halted(self) -> bool:
        return self.halted

    @property
    def inputs(self) -> List[int]:
        """Pending inputs, oldest first (a copy)."""
        return list(self._inputs)

    @property
    def outputs(self) -> List[int]:
        """Produced outputs not yet taken, oldest first (a copy)."""
        return list(self._outputs)

    def append_input(self, value: int):
        self._inputs.append(value)

    def extend_inputs(self, values: Iterable[int]):
        self._inputs.extend(values)

    def take_output(self) -> int:
        """Take the oldest output. Raises OutputUnderflow if none is queued."""
        if not self._outputs:
            raise OutputUnderflow("No output available", self.ip)
        return self._outputs.popleft()

    def drain_outputs(self) -> List[int]:
        """Take every queued output."""
        values = list(self._outputs)
        self._outputs.clear()
        return values

    def copy(self) -> 'Computer':
        """Fork an independent computer with identical state.

        Memory and queues are copied; the input source object is shared.
        Breakpoints and trace are not carried over.
        """
        other = Computer(self.mem.snapshot(), self._inputs, self.input_source,
                         max_memory=self.mem.max_size)
        other.ip = self.ip
        other.relative_base = self.relative_base
        other.halted = self.halted
        other.steps = self.steps
        other._outputs.extend(self._outputs)
        return other

    def __repr__(self):
        state = 'halted' if self.halted else f'ip={self.ip}'
        return (f"Computer({state}, rb={self.relative_base}, "
                f"{len(self.mem)} cells, {len(self._outputs)} outputs queued)")

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[StopReason]:
        """Execute one instruction.

        Returns HALT if the machine is (or just became) halted, OUTPUT if
        the instruction produced a value, END if IP is past the backed
        memory, else None.
        """
        if self.halted:
            return StopReason.HALT
        ip = self.ip
        if ip >= len(self.mem):
            return StopReason.END

        try:
            instr = decode_instruction(self.mem, ip, self.relative_base)
            if self._trace:
                self._trace_output.append(
                    f"{ip:04d}: {format_instruction(instr):28s} rb={self.relative_base}"
                )
            next_ip = self._dispatch[instr.opcode](instr)
        except IntcodeError as e:
            if self._trace:
                self._trace_output.append(f"  ERROR: {e}")
            raise e.at(ip)

        self.steps += 1
        self._resume_from = None

        if instr.opcode == HALT:
            log.debug(f"Halted at ip={ip} after {self.steps} steps")
            return StopReason.HALT

        # Jumps return their target; everything else falls through
        self.ip = next_ip if next_ip is not None else ip + instr.length

        if instr.opcode == OUT:
            return StopReason.OUTPUT
        return None

    def run(self, max_steps: Optional[int] = None,
            stop_on_output: bool = False) -> StopReason:
        """Run until a stop condition.

        Args:
            max_steps: Optional bound on instructions executed by this call
            stop_on_output: Return after the first OUT instruction

        Returns:
            StopReason indicating why execution stopped
        """
        count = 0
        while True:
            if self.halted:
                return StopReason.HALT
            if max_steps is not None and count >= max_steps:
                return StopReason.TIMEOUT
            if self.ip in self._breakpoints and self.ip != self._resume_from:
                log.debug(f"Breakpoint at ip={self.ip}")
                self._resume_from = self.ip
                return StopReason.BREAK

            reason = self.step()
            count += 1
            if reason in (StopReason.HALT, StopReason.END):
                return reason
            if reason is StopReason.OUTPUT and stop_on_output:
                return reason

    def run_until_halted(self, max_steps: Optional[int] = None) -> StopReason:
        """Run until HALT. Returns HALT unless a breakpoint or bound intervened."""
        return self.run(max_steps=max_steps)

    def run_until_output(self) -> Optional[int]:
        """Run until the next output and return it, or None once halted.

        An output already waiting in the queue is returned without stepping.
        """
        if not self._outputs:
            self.run(stop_on_output=True)
        if self._outputs:
            return self._outputs.popleft()
        return None

    def _next_input(self) -> int:
        if self._inputs:
            return self._inputs.popleft()
        if self.input_source is not None:
            value = self.input_source()
            log.debug(f"Input source {self.input_source!r} -> {value}")
            return value
        raise InputStarvation("Input required but the queue is empty and no input source is set")

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(instr) -> Optional[int]
    # A non-None return value is the jump target.

    def _build_dispatch(self) -> dict:
        return {
            ADD:  self._op_add,
            MUL:  self._op_mul,
            IN:   self._op_in,
            OUT:  self._op_out,
            JT:   self._op_jt,
            JF:   self._op_jf,
            LT:   self._op_lt,
            EQ:   self._op_eq,
            ARB:  self._op_arb,
            HALT: self._op_halt,
        }

    def _op_add(self, instr: Instruction):
        a, b, dest = instr.params
        self.mem.write(dest, a + b)

    def _op_mul(self, instr: Instruction):
        a, b, dest = instr.params
        self.mem.write(dest, a * b)

    def _op_in(self, instr: Instruction):
        dest, = instr.params
        self.mem.write(dest, self._next_input())

    def _op_out(self, instr: Instruction):
        self._outputs.append(instr.params[0])

    def _jump(self, target: int) -> int:
        if target < 0:
            raise AddressUnderflow(target)
        return target

    def _op_jt(self, instr: Instruction):
        value, target = instr.params
        if value != 0:
            return self._jump(target)

    def _op_jf(self, instr: Instruction):
        value, target = instr.params
        if value == 0:
            return self._jump(target)

    def _op_lt(self, instr: Instruction):
        a, b, dest = instr.params
        self.mem.write(dest, 1 if a < b else 0)

    def _op_eq(self, instr: Instruction):
        a, b, dest = instr.params
        self.mem.write(dest, 1 if a == b else 0)

    def _op_arb(self, instr: Instruction):
        self.relative_base += instr.params[0]

    def _op_halt(self, instr: Instruction):
        self.halted = True

    # ══════════════════════════════════════════════
    # Breakpoint API
    # ══════════════════════════════════════════════

    def add_breakpoint(self, addr: int):
        """Stop run() when IP reaches addr. The next run() resumes past it."""
        self._breakpoints.add(addr)

    def remove_breakpoint(self, addr: int):
        self._breakpoints.discard(addr)

    def clear_breakpoints(self):
        self._breakpoints.clear()

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Enable instruction trace logging."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()
