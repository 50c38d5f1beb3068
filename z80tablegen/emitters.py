"""
Output emitters.

TableEmitter renders a section as a C++ ``InstrDesc`` array initializer,
one entry per opcode position. TestEmitter renders the matching round-trip
checks for the disassembler test suite: load the bytes, disassemble one
line, verify address, bytes and the text exactly as the reference listing
printed it.

Both return lists of lines; framing (separators, ordering of sections) is
the caller's job.
"""

from __future__ import annotations
from typing import List

from .records import ClassifiedInstruction, ILLEGAL_MARKER, OpcodeRecord, Section

SEPARATOR = "=" * 62
UNRECOGNIZED_TEXT = "???"


def _c_bool(value: bool) -> str:
    return "true" if value else "false"


def byte_list(record: OpcodeRecord) -> str:
    """``0xDD,0xCB,0x06,0x46``"""
    return ",".join(f"0x{b}" for b in record.byte_sequence)


class TableEmitter:
    """Descriptor table for one section."""

    STRUCT_NAME = "InstrDesc"
    TABLE_SIZE = 256

    def header(self, section: Section) -> str:
        return f"{self.STRUCT_NAME} {section.name}[{self.TABLE_SIZE}] = {{"

    def entry(self, item: ClassifiedInstruction) -> str:
        return (f"  /* 0x{item.position:02x} */  "
                f"{{\"{item.template}\", {item.param_mode.value}, {_c_bool(item.illegal)}}},")

    def emit(self, section: Section, classified: List[ClassifiedInstruction]) -> List[str]:
        # Short sections are emitted as-is; the compiler zero-fills the rest.
        lines = [self.header(section)]
        lines.extend(self.entry(item) for item in classified)
        lines.append("};")
        return lines


class TestEmitter:
    """Three round-trip directives per record."""

    __test__ = False  # not a pytest class

    def expected_text(self, record: OpcodeRecord) -> str:
        if record.source_text == ILLEGAL_MARKER:
            return UNRECOGNIZED_TEXT
        return record.source_text

    def directives(self, record: OpcodeRecord) -> List[str]:
        addr = f"0x{record.address}"
        data = byte_list(record)
        return [
            f"initMem({addr}, {{ {data} }});",
            f"lines = disassembler_.disassembleForward({addr}, memory_, 1);",
            f"verifyLine(lines[0], {addr}, {{ {data} }}, \"{self.expected_text(record)}\");",
        ]

    def emit(self, section: Section) -> List[str]:
        lines: List[str] = []
        for record in section.records:
            lines.extend(self.directives(record))
        return lines
