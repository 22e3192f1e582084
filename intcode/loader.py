"""
Intcode program loader.

Program text is a comma-separated list of optionally signed base-10
integers, e.g. "1002,4,3,4,33". Surrounding whitespace and line breaks
are ignored, so a file with a trailing newline loads as-is.
"""

import re
from pathlib import Path
from typing import Iterable, List, Union

from .errors import ProgramFormatError

__all__ = ['parse_program', 'load_program', 'format_program']

_INT_RE = re.compile(r'[+-]?[0-9]+')


def parse_program(text: str) -> List[int]:
    """Parse program text into a memory image."""
    text = text.strip()
    if not text:
        raise ProgramFormatError("Empty program")

    image = []
    for position, field in enumerate(text.split(','), start=1):
        field = field.strip()
        if not field:
            raise ProgramFormatError("Empty field", position)
        if not _INT_RE.fullmatch(field):
            raise ProgramFormatError(f"Not an integer: {field!r}", position)
        image.append(int(field))
    return image


def load_program(path: Union[str, Path]) -> List[int]:
    """Read and parse a program file."""
    return parse_program(Path(path).read_text(encoding='utf-8'))


def format_program(memory: Iterable[int]) -> str:
    """Render a memory image back to program text."""
    return ",".join(str(v) for v in memory)
