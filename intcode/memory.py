"""
Intcode Memory - growable flat integer memory

Memory is logically infinite and zero-initialised. The backing list holds
the loaded program image and grows on demand:

  - reads past the end return 0 without growing
  - writes past the end extend the list with zeros up to the address
  - negative addresses are fatal (AddressUnderflow)
  - addresses at or beyond max_size are fatal (AddressOutOfRange)

Cells hold Python ints, so there is no word-size wraparound.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from .errors import AddressOutOfRange, AddressUnderflow

log = logging.getLogger('intcode.memory')


class Memory:
    """Auto-extending memory with write watchpoints.

    Usage:
        mem = Memory([1, 0, 0, 0, 99])
        mem.write(1000, 7)     # grows to 1001 cells
        mem.read(5000)         # 0, no growth
    """

    DEFAULT_MAX_SIZE = 2 ** 24

    def __init__(self, image: Iterable[int] = (), max_size: Optional[int] = None):
        self._cells: List[int] = [int(v) for v in image]
        self.max_size = max_size if max_size is not None else self.DEFAULT_MAX_SIZE
        if len(self._cells) > self.max_size:
            raise AddressOutOfRange(len(self._cells) - 1, self.max_size)

        # Watchpoints: addr -> [callback(addr, old_val, new_val)]
        self._watchpoints: Dict[int, List[Callable]] = {}

    # --- Core read/write ---

    def _check(self, addr: int):
        if addr < 0:
            raise AddressUnderflow(addr)
        if addr >= self.max_size:
            raise AddressOutOfRange(addr, self.max_size)

    def read(self, addr: int) -> int:
        """Read one cell. Unwritten cells read as 0."""
        self._check(addr)
        if addr < len(self._cells):
            return self._cells[addr]
        return 0

    def write(self, addr: int, value: int):
        """Write one cell, growing the backing list if needed."""
        self._check(addr)
        size = len(self._cells)
        if addr >= size:
            log.debug(f"Growing memory {size} -> {addr + 1} cells")
            self._cells.extend([0] * (addr + 1 - size))
        old = self._cells[addr]
        self._cells[addr] = value

        if addr in self._watchpoints:
            for cb in self._watchpoints[addr]:
                cb(addr, old, value)

    def __getitem__(self, addr):
        if isinstance(addr, slice):
            start = 0 if addr.start is None else addr.start
            stop = len(self._cells) if addr.stop is None else addr.stop
            step = 1 if addr.step is None else addr.step
            if start < 0 or stop < 0:
                raise AddressUnderflow(min(start, stop))
            return [self.read(a) for a in range(start, stop, step)]
        return self.read(addr)

    def __setitem__(self, addr: int, value: int):
        self.write(addr, value)

    def __len__(self) -> int:
        """Number of cells currently backed (loaded image plus growth)."""
        return len(self._cells)

    def __iter__(self):
        return iter(list(self._cells))

    def __eq__(self, other):
        if isinstance(other, Memory):
            return self._cells == other._cells
        if isinstance(other, (list, tuple)):
            return self._cells == list(other)
        return NotImplemented

    def __repr__(self):
        return f"Memory({len(self._cells)} cells)"

    # --- Watchpoints ---

    def add_watchpoint(self, addr: int, callback: Callable):
        """Add a write watchpoint on an address.

        callback(addr, old_val, new_val) is called on every write to that
        address, including writes that leave the value unchanged.
        """
        self._watchpoints.setdefault(addr, []).append(callback)

    def remove_watchpoint(self, addr: int, callback: Optional[Callable] = None):
        """Remove a watchpoint. If callback is None, removes all on that addr."""
        if addr in self._watchpoints:
            if callback is None:
                del self._watchpoints[addr]
            else:
                self._watchpoints[addr] = [
                    cb for cb in self._watchpoints[addr] if cb != callback
                ]

    # --- Snapshots ---

    def snapshot(self) -> List[int]:
        """Copy of every backed cell."""
        return list(self._cells)

    def copy(self) -> 'Memory':
        """Independent memory with the same cells and limit (no watchpoints)."""
        return Memory(self._cells, max_size=self.max_size)

    @staticmethod
    def diff_snapshots(snap_a: List[int], snap_b: List[int]) -> Dict[int, tuple]:
        """Compare two snapshots, return {addr: (old, new)} for changes.

        Cells missing from the shorter snapshot compare as 0.
        """
        changes = {}
        for addr in range(max(len(snap_a), len(snap_b))):
            a = snap_a[addr] if addr < len(snap_a) else 0
            b = snap_b[addr] if addr < len(snap_b) else 0
            if a != b:
                changes[addr] = (a, b)
        return changes

    # --- Dump ---

    def dump(self, start: int = 0, length: Optional[int] = None, width: int = 8) -> str:
        """Produce a tabular dump of memory for debugging."""
        if length is None:
            length = max(len(self._cells) - start, 0)
        lines = []
        for offset in range(0, length, width):
            addr = start + offset
            row = ' '.join(f'{self.read(addr + i):>6}'
                           for i in range(min(width, length - offset)))
            lines.append(f'{addr:06d}  {row}')
        return '\n'.join(lines)
