"""
Intcode input sources.

An input source is any zero-argument callable that returns the next int
for an IN instruction. The computer consults it only once its own input
queue is empty, and assumes nothing about how the value is produced.

Provided sources:
  QueueInput          fixed FIFO replay queue
  ConstantInput       the same value every time
  TrackingController  steers a position toward a target (-1 / 0 / 1)
"""

import logging
from collections import deque
from typing import Callable, Iterable

from .errors import InputStarvation

log = logging.getLogger('intcode.inputs')

# The capability the computer depends on.
InputSource = Callable[[], int]


class QueueInput:
    """FIFO-backed input source.

    Usage:
        source = QueueInput([5, 0])
        source()        # 5
        source.push(7)
    """

    def __init__(self, values: Iterable[int] = ()):
        self._queue = deque(values)

    def push(self, value: int):
        self._queue.append(value)

    def extend(self, values: Iterable[int]):
        self._queue.extend(values)

    def __len__(self) -> int:
        return len(self._queue)

    def __call__(self) -> int:
        if not self._queue:
            raise InputStarvation("Input queue source is empty")
        return self._queue.popleft()

    def __repr__(self):
        return f"QueueInput({list(self._queue)})"


class ConstantInput:
    """Returns the same value on every call."""

    def __init__(self, value: int):
        self.value = value

    def __call__(self) -> int:
        return self.value

    def __repr__(self):
        return f"ConstantInput({self.value})"


class TrackingController:
    """Reactive controller that steers `position` toward `target`.

    Returns -1 to move down, 1 to move up, 0 when aligned. The driver
    updates target and position from the program's output between calls;
    calling the controller never changes them.

    Typical use is a paddle following a ball:

        ctl = TrackingController(target=ball_x, position=paddle_x)
        computer = Computer(program, input_source=ctl)
        ...
        ctl.target = new_ball_x
    """

    def __init__(self, target: int = 0, position: int = 0):
        self.target = target
        self.position = position

    def __call__(self) -> int:
        if self.position == self.target:
            move = 0
        elif self.position < self.target:
            move = 1
        else:
            move = -1
        log.debug(f"Tracking {self.position} -> {self.target}: {move:+d}")
        return move

    def __repr__(self):
        return f"TrackingController(target={self.target}, position={self.position})"
