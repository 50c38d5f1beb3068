"""Exceptions raised by the table generator."""

from __future__ import annotations
from typing import List


class Z80TableGenError(Exception):
    """Base class for generator errors."""


class ClassificationError(Z80TableGenError):
    """Raised when a record cannot exist in a consistent reference table."""
    def __init__(self, message: str, byte_sequence: List[str], instruction: str = ""):
        self.byte_sequence = list(byte_sequence)
        self.instruction = instruction
        super().__init__(f"{message}: [{' '.join(byte_sequence)}] {instruction!r}")
