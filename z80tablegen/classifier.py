"""
Addressing-mode classifier for Z80 reference-listing records.

Given the byte encoding of an opcode and the text the reference disassembler
printed for it, decide which operand shape (:class:`ParamMode`) the
instruction has and turn the text into a template with the literal operand
value(s) replaced by ``%s``:

    C3 00 80       JP $8000           ->  ABS16      "JP %s"
    18 05          JR $0007           ->  REL        "JR %s"
    DD CB 06 46    BIT 0,(IX+$06)     ->  DISP       "BIT 0,(IX%s)"
    DD 36 05 20    LD (IX+$05),#$20   ->  DISP_ABS8  "LD (IX%s),#%s"

Dispatch is a table keyed by (prefix, byte count). Each entry is a small
strategy that scans the text for ``$`` literals and picks one (or two) to
replace. Ambiguous renderings are settled by the heuristics documented on
each strategy:

  REL vs ABS8      a relative branch target is printed as a 4-digit address,
                   an 8-bit value as 2 digits (or after '#').
  ABS8 vs DISP     the operand byte appears verbatim for ABS8; a displacement
                   is shown signed, so a negative one never matches.
  ABS16 vs DISP_ABS8
                   a 4-digit literal means ABS16, otherwise a signed byte
                   followed by '#$nn' at the end of the text.

A strategy that cannot find the literal it needs returns ``None`` and the
record degrades to the ``<unknown>`` template. The only hard failure is an
unprefixed opcode whose length is outside 1..3.
"""

from __future__ import annotations
import logging
from typing import Callable, Dict, List, Optional, Tuple

from .errors import ClassificationError
from .literals import HexLiteral, Span, find_literal, scan_literals, splice
from .records import ClassifiedInstruction, OpcodeRecord, ParamMode, PrefixContext

log = logging.getLogger(__name__)

UNKNOWN_TEMPLATE = "<unknown>"

# (mode, template, removed operand text)
Classification = Tuple[ParamMode, str, List[str]]
Strategy = Callable[[List[str], str], Optional[Classification]]


def _replace(mode: ParamMode, text: str, spans: List[Span]) -> Classification:
    operands = [text[start:end] for start, end in sorted(spans)]
    return mode, splice(text, spans), operands


# ──────────────────────────────────────────────
# Strategies
# ──────────────────────────────────────────────

def _no_operand(byte_sequence: List[str], text: str) -> Classification:
    return ParamMode.NONE, text, []


def _displacement(operand_index: int) -> Strategy:
    """DD CB d op / FD CB d op: the displacement byte, sign included."""
    def strategy(byte_sequence: List[str], text: str) -> Optional[Classification]:
        lit = find_literal(scan_literals(text), digits=byte_sequence[operand_index])
        if lit is None:
            return None
        return _replace(ParamMode.DISP, text, [lit.byte_span])
    return strategy


def _abs8_rel_or_disp(operand_index: int) -> Strategy:
    """Three-byte index-register opcodes.

    1. the operand byte printed verbatim        -> ABS8
    2. first literal has exactly four digits    -> REL
    3. otherwise a signed one-byte displacement -> DISP
    """
    def strategy(byte_sequence: List[str], text: str) -> Optional[Classification]:
        literals = scan_literals(text)
        lit = find_literal(literals, digits=byte_sequence[operand_index])
        if lit is not None:
            return _replace(ParamMode.ABS8, text, [lit.span])
        if not literals:
            return None
        first = literals[0]
        if first.width == 4:
            return _replace(ParamMode.REL, text, [first.span])
        return _replace(ParamMode.DISP, text, [first.byte_span])
    return strategy


def _disp_abs8(literals: List[HexLiteral], text: str) -> Optional[Classification]:
    """Signed byte somewhere before a '#$nn' immediate that ends the text."""
    if not literals:
        return None
    imm = literals[-1]
    if not imm.immediate or imm.width != 2 or imm.end != len(text):
        return None
    for disp in reversed(literals[:-1]):
        if disp.sign and disp.width == 2:
            return _replace(ParamMode.DISP_ABS8, text, [disp.signed_span, imm.span])
    return None


def _abs16_or_disp_abs8(byte_sequence: List[str], text: str) -> Optional[Classification]:
    literals = scan_literals(text)
    lit = find_literal(literals, width=4)
    if lit is not None:
        return _replace(ParamMode.ABS16, text, [lit.span])
    return _disp_abs8(literals, text)


def _abs16(byte_sequence: List[str], text: str) -> Optional[Classification]:
    """First literal, taken as a 16-bit value."""
    literals = scan_literals(text)
    if not literals:
        return None
    return _replace(ParamMode.ABS16, text, [literals[0].span])


def _rel_or_abs8(byte_sequence: List[str], text: str) -> Optional[Classification]:
    """Two-byte unprefixed opcodes.

    An explicit '#$' immediate is ABS8. Otherwise two digits after the first
    '$' is ABS8 and anything else (a relative target widened to 16 bits) is
    REL.
    """
    literals = scan_literals(text)
    for lit in literals:
        if lit.immediate:
            return _replace(ParamMode.ABS8, text, [lit.span])
    if not literals:
        return None
    first = literals[0]
    mode = ParamMode.ABS8 if first.width == 2 else ParamMode.REL
    return _replace(mode, text, [first.span])


# (prefix, byte count) -> strategy. A count of None matches any length.
STRATEGIES: Dict[Tuple[PrefixContext, Optional[int]], Strategy] = {
    (PrefixContext.NONE, 1): _no_operand,
    (PrefixContext.NONE, 2): _rel_or_abs8,
    (PrefixContext.NONE, 3): _abs16,

    (PrefixContext.CB, None): _no_operand,

    (PrefixContext.DD, 2): _no_operand,
    (PrefixContext.DD, 3): _abs8_rel_or_disp(2),
    (PrefixContext.DD, 4): _abs16_or_disp_abs8,
    (PrefixContext.DD_CB, None): _displacement(2),

    (PrefixContext.ED, 2): _no_operand,
    (PrefixContext.ED, 4): _abs16,

    # The reference table lists FD's no-operand opcodes as a single byte
    # and its 3-byte operand right after the prefix, unlike DD. Kept as
    # listed; it looks like a transcription artifact of that table.
    (PrefixContext.FD, 1): _no_operand,
    (PrefixContext.FD, 3): _abs8_rel_or_disp(1),
    (PrefixContext.FD, 4): _abs16_or_disp_abs8,
    (PrefixContext.FD_CB, None): _displacement(2),
}


def classify_bytes(byte_sequence: List[str], instruction: str,
                   prefix: Optional[PrefixContext] = None) -> Classification:
    """Classify one encoding, returning (mode, template, operands).

    The prefix is derived from the bytes unless the caller already has it.
    """
    if not instruction:
        return ParamMode.NONE, UNKNOWN_TEMPLATE, []

    if prefix is None:
        prefix = PrefixContext.from_bytes(byte_sequence)
    count = len(byte_sequence)
    strategy = STRATEGIES.get((prefix, count)) or STRATEGIES.get((prefix, None))
    if strategy is None:
        if prefix is PrefixContext.NONE:
            raise ClassificationError(
                f"unprefixed opcode with {count} bytes", byte_sequence, instruction)
        log.debug("No strategy for %s with %d bytes: %r", prefix.name, count, instruction)
        return ParamMode.NONE, UNKNOWN_TEMPLATE, []

    result = strategy(byte_sequence, instruction)
    if result is None:
        log.debug("Operand literal not found in %r for [%s]",
                  instruction, " ".join(byte_sequence))
        return ParamMode.NONE, UNKNOWN_TEMPLATE, []
    return result


def determine_param_mode(byte_sequence: List[str], instruction: str) -> Tuple[ParamMode, str]:
    """Return (ParamMode, template) for an encoding and its rendered text."""
    mode, template, _ = classify_bytes(byte_sequence, instruction)
    return mode, template


class ParamModeClassifier:
    """Classifies records and keeps a per-mode tally for reporting."""

    def __init__(self):
        self.counts: Dict[ParamMode, int] = {mode: 0 for mode in ParamMode}
        self.unknown = 0

    def classify(self, record: OpcodeRecord) -> ClassifiedInstruction:
        mode, template, operands = classify_bytes(record.byte_sequence,
                                                  record.raw_instruction,
                                                  prefix=record.prefix)
        self.counts[mode] += 1
        if template == UNKNOWN_TEMPLATE:
            self.unknown += 1
        return ClassifiedInstruction(template=template, param_mode=mode,
                                     record=record, operands=operands)

    def classify_all(self, records: List[OpcodeRecord]) -> List[ClassifiedInstruction]:
        return [self.classify(r) for r in records]

    def reset(self):
        for mode in self.counts:
            self.counts[mode] = 0
        self.unknown = 0
