"""
Intcode error taxonomy.

Every fault the interpreter can raise derives from IntcodeError. None of
them are transient: the interpreter performs no I/O once constructed, so an
error always means a malformed program or a caller contract violation.

  MalformedProgram      unknown opcode / illegal addressing mode
  InputStarvation       input instruction with no queued value and no source
  OutputUnderflow       take_output() on an empty output queue
  AddressUnderflow      negative computed address
  AddressOutOfRange     address beyond the memory growth limit
  ProgramFormatError    program text that is not a comma-separated int list
"""

from typing import Optional

__all__ = [
    'IntcodeError', 'MalformedProgram', 'IllegalOpcode', 'IllegalMode',
    'InputStarvation', 'OutputUnderflow', 'AddressUnderflow',
    'AddressOutOfRange', 'ProgramFormatError',
]


class IntcodeError(Exception):
    """Base class for all interpreter faults."""
    def __init__(self, message: str, ip: Optional[int] = None):
        self.ip = ip
        self.message = message
        super().__init__(f"ip={ip}: {message}" if ip is not None else message)

    def at(self, ip: int) -> 'IntcodeError':
        """Attach the faulting instruction pointer if not already known."""
        if self.ip is None:
            self.ip = ip
            self.args = (f"ip={ip}: {self.message}",)
        return self


class MalformedProgram(IntcodeError):
    """The program contains something the decoder cannot execute."""


class IllegalOpcode(MalformedProgram):
    """Raised when an undefined opcode is encountered."""
    def __init__(self, opcode: int, ip: Optional[int] = None):
        self.opcode = opcode
        super().__init__(f"Unknown opcode {opcode}", ip)


class IllegalMode(MalformedProgram):
    """Unknown mode digit, or immediate mode on a write parameter."""
    def __init__(self, message: str, mode: int, ip: Optional[int] = None):
        self.mode = mode
        super().__init__(message, ip)


class InputStarvation(IntcodeError):
    """An input instruction ran with nothing to read."""


class OutputUnderflow(IntcodeError):
    """The caller asked for an output that was never produced."""


class AddressUnderflow(IntcodeError):
    def __init__(self, addr: int, ip: Optional[int] = None):
        self.addr = addr
        super().__init__(f"Negative address {addr}", ip)


class AddressOutOfRange(IntcodeError):
    def __init__(self, addr: int, limit: int, ip: Optional[int] = None):
        self.addr = addr
        self.limit = limit
        super().__init__(f"Address {addr} exceeds memory limit {limit}", ip)


class ProgramFormatError(IntcodeError):
    """Raised by the loader on text that is not an Intcode program."""
    def __init__(self, message: str, position: int = 0):
        # 1-based field index, 0 when not tied to a field
        self.position = position
        super().__init__(f"Field {position}: {message}" if position else message)
