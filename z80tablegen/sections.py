"""
Section parser for the reference opcode listing.

The listing is a series of sections, each introduced by a marker line and
followed by one record line per opcode in that table::

    ---- prefix dd cb
    .C:0000  DD CB 06 00 RLC (IX+$06)
    .C:0004  DD CB 06 01 *RLC (IX+$06),C
    ...

Record lines have a fixed column layout: address in columns 3-6, byte tokens
in 9-19, instruction text from column 21. A section ends at the first line
that is not a record line; anything between sections is ignored.
"""

from __future__ import annotations
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .records import OpcodeRecord, PrefixContext, Section

log = logging.getLogger(__name__)

SECTION_MARKER = "----"
RECORD_MARKER = ".C:"

ADDRESS_COLUMNS = slice(3, 7)
BYTE_COLUMNS = slice(9, 20)
TEXT_COLUMNS = slice(21, None)

# marker suffix -> (prefix context, table name)
SECTION_TYPES: Dict[str, Tuple[PrefixContext, str]] = {
    "plain":        (PrefixContext.NONE, "opcodes"),
    "prefix cb":    (PrefixContext.CB, "opcodes_cb"),
    "prefix dd":    (PrefixContext.DD, "opcodes_dd"),
    "prefix ed":    (PrefixContext.ED, "opcodes_ed"),
    "prefix fd":    (PrefixContext.FD, "opcodes_fd"),
    "prefix dd cb": (PrefixContext.DD_CB, "opcodes_ddcb"),
    "prefix fd cb": (PrefixContext.FD_CB, "opcodes_fdcb"),
}
DEFAULT_SECTION_TYPE = "plain"


def is_section_marker(line: str) -> bool:
    return line.startswith(SECTION_MARKER)


def is_record_line(line: str) -> bool:
    return line.startswith(RECORD_MARKER)


def section_type(marker_line: str) -> Tuple[PrefixContext, str]:
    """Look up the prefix context and table name for a marker line."""
    suffix = marker_line[len(SECTION_MARKER):].strip()
    if suffix not in SECTION_TYPES:
        log.warning("Unknown section marker %r, treating as %r",
                    marker_line, DEFAULT_SECTION_TYPE)
        suffix = DEFAULT_SECTION_TYPE
    return SECTION_TYPES[suffix]


def parse_record(line: str, position: int = 0) -> OpcodeRecord:
    """Parse one fixed-column record line. The layout is not validated."""
    return OpcodeRecord.from_listing(
        address=line[ADDRESS_COLUMNS],
        byte_sequence=line[BYTE_COLUMNS].split(),
        text=line[TEXT_COLUMNS].strip(),
        position=position,
    )


class SectionParser:
    """Splits listing lines into :class:`Section` objects."""

    def __init__(self, lines: Iterable[str]):
        self.lines: List[str] = list(lines)
        self.pos = 0

    def _cur(self) -> Optional[str]:
        return self.lines[self.pos] if self.pos < len(self.lines) else None

    def _skip_to_marker(self) -> Optional[str]:
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            self.pos += 1
            if is_section_marker(line):
                return line
        return None

    def _parse_section(self, marker_line: str) -> Section:
        prefix, name = section_type(marker_line)
        section = Section(prefix_context=prefix, name=name)
        while True:
            line = self._cur()
            if line is None or not is_record_line(line):
                break
            section.add(parse_record(line))
            self.pos += 1
        log.debug("Section %s: %d records", name, len(section))
        return section

    def sections(self) -> Iterator[Section]:
        """Yield sections in listing order."""
        while True:
            marker = self._skip_to_marker()
            if marker is None:
                return
            yield self._parse_section(marker)

    def parse(self) -> List[Section]:
        return list(self.sections())
