"""
Record types for the Z80 opcode table generator.

Defines the entities produced while reading a reference opcode listing:
prefix contexts, addressing (param) modes, parsed opcode records, the
sections that group them, and the classified instruction handed to the
emitters. Everything here lives for a single run.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import List

from .literals import fill


# ──────────────────────────────────────────────
# Enumerations
# ──────────────────────────────────────────────

class PrefixContext(enum.Enum):
    """Which 256-entry opcode table a record belongs to."""
    NONE = "NONE"
    CB = "CB"
    DD = "DD"
    ED = "ED"
    FD = "FD"
    DD_CB = "DD_CB"
    FD_CB = "FD_CB"

    @classmethod
    def from_bytes(cls, byte_sequence: List[str]) -> PrefixContext:
        """Derive the prefix from the leading byte token(s) of an encoding."""
        if not byte_sequence:
            return cls.NONE
        first = byte_sequence[0]
        if first == "CB":
            return cls.CB
        if first == "ED":
            return cls.ED
        if first in ("DD", "FD"):
            # DD CB / FD CB need at least the displacement after the CB
            if len(byte_sequence) > 2 and byte_sequence[1] == "CB":
                return cls.DD_CB if first == "DD" else cls.FD_CB
            return cls.DD if first == "DD" else cls.FD
        return cls.NONE


class ParamMode(enum.Enum):
    """Operand-encoding shape of an instruction."""
    NONE = "NONE"             # no operand
    REL = "REL"               # relative branch, rendered as a 16-bit target
    ABS8 = "ABS8"             # 8-bit absolute / immediate value
    ABS16 = "ABS16"           # 16-bit absolute value
    DISP = "DISP"             # signed displacement, (IX+d) / (IY+d)
    DISP_ABS8 = "DISP_ABS8"   # displacement followed by an 8-bit immediate


# ──────────────────────────────────────────────
# Parsed input
# ──────────────────────────────────────────────

ILLEGAL_MARKER = "*"


@dataclass
class OpcodeRecord:
    """One line of the reference listing."""
    address: str                  # 4 hex digits, verbatim
    byte_sequence: List[str]      # "DD", "CB", "06", "46"
    raw_instruction: str          # text with the illegal marker stripped
    illegal: bool = False
    position: int = 0             # index within the section = low opcode byte
    source_text: str = ""         # text exactly as listed

    @classmethod
    def from_listing(cls, address: str, byte_sequence: List[str],
                     text: str, position: int = 0) -> OpcodeRecord:
        illegal = text.startswith(ILLEGAL_MARKER)
        raw = text[len(ILLEGAL_MARKER):] if illegal else text
        return cls(address=address, byte_sequence=byte_sequence,
                   raw_instruction=raw, illegal=illegal,
                   position=position, source_text=text)

    @property
    def prefix(self) -> PrefixContext:
        return PrefixContext.from_bytes(self.byte_sequence)


@dataclass
class Section:
    """A run of records sharing one prefix context."""
    prefix_context: PrefixContext
    name: str
    records: List[OpcodeRecord] = field(default_factory=list)

    def add(self, record: OpcodeRecord) -> OpcodeRecord:
        record.position = len(self.records)
        self.records.append(record)
        return record

    def __len__(self) -> int:
        return len(self.records)


# ──────────────────────────────────────────────
# Classifier output
# ──────────────────────────────────────────────

@dataclass
class ClassifiedInstruction:
    template: str
    param_mode: ParamMode
    record: OpcodeRecord
    operands: List[str] = field(default_factory=list)   # removed literal text, in order

    @property
    def illegal(self) -> bool:
        return self.record.illegal

    @property
    def position(self) -> int:
        return self.record.position

    def render(self) -> str:
        """Substitute the operands back into the template."""
        return fill(self.template, self.operands)
