"""Reading the reference listing from disk."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Union

log = logging.getLogger(__name__)

DEFAULT_INPUT = "z80-opcodes"


def split_lines(text: str) -> List[str]:
    """Split on '\\n' only, dropping one trailing '\\r' per line.

    Other characters ``str.splitlines`` treats as breaks (form feed, the
    \\x1c-\\x1e separators, U+2028) stay inside the line.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_lines(path: Union[str, Path]) -> List[str]:
    """Read a whole file into a list of lines, untrimmed.

    Line terminators are dropped; nothing else is touched. Bytes that are
    not valid UTF-8 become U+FFFD rather than failing the read. ``OSError``
    propagates to the caller.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        lines = split_lines(f.read())
    log.debug("Read %d lines from %s", len(lines), path)
    return lines
