"""
Z80 opcode table generator
==========================
Turns a reference disassembler's opcode listing (one section per prefix
table, one ``.C:`` line per opcode) into:

  - ``InstrDesc`` descriptor tables for a table-driven Z80 disassembler, and
  - round-trip test directives checking that disassembler against the
    listing, instruction by instruction.

Pipeline:
    ┌──────────┐    ┌───────────────┐    ┌────────────┐    ┌──────────┐
    │ listing  │───>│ SectionParser │───>│ Classifier │───>│ Emitters │
    │ (lines)  │    │ (records)     │    │ (templates)│    │ (text)   │
    └──────────┘    └───────────────┘    └────────────┘    └──────────┘

    - source.py:     whole-file read
    - sections.py:   marker / fixed-column record parsing
    - literals.py:   '$' hex literal scanner + splicing
    - classifier.py: (prefix, length) dispatch to addressing-mode strategies
    - emitters.py:   C++ table and test fragments
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, List, Union

__version__ = "0.1.0"

from .records import ClassifiedInstruction, OpcodeRecord, ParamMode, PrefixContext, Section
from .errors import ClassificationError, Z80TableGenError
from .literals import scan_literals, splice
from .classifier import ParamModeClassifier, UNKNOWN_TEMPLATE, determine_param_mode
from .sections import SectionParser
from .source import read_lines
from .emitters import SEPARATOR, TableEmitter, TestEmitter

log = logging.getLogger(__name__)


def _log_summary(section: Section, classifier: ParamModeClassifier):
    illegal = sum(1 for record in section.records if record.illegal)
    modes = " ".join(f"{mode.value}={n}" for mode, n in classifier.counts.items() if n)
    log.info("%-13s %3d opcodes, %3d illegal  %s", section.name, len(section), illegal, modes)


def convert_listing(lines: Iterable[str]) -> str:
    """Convert listing lines to generated text.

    Each section yields its descriptor table and its test directives, each
    followed by a separator line.

    Returns:
        The complete output text. Nothing is produced if any record fails
        classification.
    """
    classifier = ParamModeClassifier()
    tables = TableEmitter()
    tests = TestEmitter()
    out: List[str] = []
    unknown = 0

    for section in SectionParser(lines).sections():
        classifier.reset()
        classified = classifier.classify_all(section.records)
        _log_summary(section, classifier)
        unknown += classifier.unknown

        out.extend(tables.emit(section, classified))
        out.append(SEPARATOR)
        out.extend(tests.emit(section))
        out.append(SEPARATOR)

    if unknown:
        log.warning("%d opcode(s) left as %s", unknown, UNKNOWN_TEMPLATE)

    return "\n".join(out) + ("\n" if out else "")


def convert_file(path: Union[str, Path]) -> str:
    """Read a listing file and convert it. See :func:`convert_listing`."""
    return convert_listing(read_lines(path))
