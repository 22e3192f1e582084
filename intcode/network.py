"""
Networks of Intcode computers.

Each computer in a network owns its memory and queues outright. They are
connected only by the host copying one computer's output into the next
computer's input queue; nothing is shared.

  run_chain          A -> B -> C ... each run to completion in turn
  run_feedback_loop  A -> B -> ... -> A, round-robin until one stops
  best_setting       try every ordering of the settings, keep the best

Every computer is seeded with its setting as the first input, then the
signal arriving from upstream.
"""

import logging
from itertools import permutations
from typing import Callable, List, Sequence, Tuple

from .computer import Computer

log = logging.getLogger('intcode.network')

Runner = Callable[[Sequence[int], Sequence[int], int], int]


def run_chain(program: Sequence[int], settings: Sequence[int], signal: int = 0) -> int:
    """Run one computer per setting in series; return the last signal.

    Raises OutputUnderflow if a computer halts without producing output.
    """
    for setting in settings:
        computer = Computer(program, inputs=[setting, signal])
        computer.run_until_halted()
        signal = computer.take_output()
    return signal


def run_feedback_loop(program: Sequence[int], settings: Sequence[int], signal: int = 0) -> int:
    """Run computers in a ring until one of them stops producing output.

    Each pass feeds the current signal to the next computer and waits for
    its next output. The loop ends when a computer halts or runs off the
    end of its memory; the last signal produced is returned.
    """
    if not settings:
        raise ValueError("No settings given")
    computers = [Computer(program, inputs=[s]) for s in settings]
    rounds = 0
    while True:
        for computer in computers:
            computer.append_input(signal)
            value = computer.run_until_output()
            if value is None:
                log.debug(f"Feedback loop {list(settings)} settled after {rounds} rounds: {signal}")
                return signal
            signal = value
        rounds += 1


def best_setting(program: Sequence[int], settings: Sequence[int],
                 runner: Runner = run_chain, signal: int = 0) -> Tuple[int, List[int]]:
    """Try every ordering of `settings`; return (best signal, ordering)."""
    if not settings:
        raise ValueError("No settings given")
    best = None
    for ordering in permutations(settings):
        result = runner(program, ordering, signal)
        if best is None or result > best[0]:
            best = (result, list(ordering))
    log.info(f"Best ordering {best[1]} -> {best[0]}")
    return best
