"""
Hex literal scanner for reference-listing instruction text.

The reference disassembler renders every operand value as a ``$``-prefixed
hex literal: ``JP $8000``, ``LD A,#$2A``, ``LD (IX+$05),#$20``. The
classifier never edits that text with index arithmetic. It scans the text
once into :class:`HexLiteral` spans (with the sign or ``#`` that precedes
each one) and then performs a single substitution with :func:`splice`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

HEX_DIGITS = "0123456789ABCDEFabcdef"
SIGNS = "+-"
IMMEDIATE_MARKER = "#"
PLACEHOLDER = "%s"

Span = Tuple[int, int]


@dataclass(frozen=True)
class HexLiteral:
    """One ``$`` literal inside an instruction string."""
    start: int          # index of '$'
    end: int            # one past the last hex digit
    digits: str
    sign: str = ""      # '+' or '-' directly before '$', else ''
    immediate: bool = False

    @property
    def width(self) -> int:
        return len(self.digits)

    @property
    def span(self) -> Span:
        """'$' through the last digit."""
        return (self.start, self.end)

    @property
    def signed_span(self) -> Span:
        """Sign (when present) through the last digit."""
        return (self.start - len(self.sign), self.end)

    @property
    def byte_span(self) -> Span:
        """Sign, '$' and exactly two digits: a one-byte displacement."""
        return (self.start - len(self.sign), self.start + 3)

    def matches(self, token: str) -> bool:
        return self.digits == token


def scan_literals(text: str) -> List[HexLiteral]:
    """Return every ``$`` literal in ``text``, left to right.

    A bare ``$`` with no digits after it still yields a literal of width 0.
    """
    literals: List[HexLiteral] = []
    pos = 0
    while True:
        start = text.find("$", pos)
        if start < 0:
            return literals
        end = start + 1
        while end < len(text) and text[end] in HEX_DIGITS:
            end += 1
        before = text[start - 1] if start > 0 else ""
        literals.append(HexLiteral(
            start=start,
            end=end,
            digits=text[start + 1:end],
            sign=before if before and before in SIGNS else "",
            immediate=before == IMMEDIATE_MARKER,
        ))
        pos = end


def find_literal(literals: Iterable[HexLiteral], *, digits: Optional[str] = None,
                 width: Optional[int] = None) -> Optional[HexLiteral]:
    """First literal matching the given digits and/or width."""
    for lit in literals:
        if digits is not None and not lit.matches(digits):
            continue
        if width is not None and lit.width != width:
            continue
        return lit
    return None


def splice(text: str, spans: List[Span], placeholder: str = PLACEHOLDER) -> str:
    """Replace each span of ``text`` with ``placeholder``.

    Spans are applied in text order and must not overlap.
    """
    out = []
    pos = 0
    for start, end in sorted(spans):
        if start < pos:
            raise ValueError(f"overlapping spans in {text!r}: {spans}")
        out.append(text[pos:start])
        out.append(placeholder)
        pos = end
    out.append(text[pos:])
    return "".join(out)


def fill(template: str, values: List[str], placeholder: str = PLACEHOLDER) -> str:
    """Inverse of :func:`splice`: substitute operand text back, in order."""
    parts = template.split(placeholder)
    if len(parts) != len(values) + 1:
        raise ValueError(
            f"template {template!r} has {len(parts) - 1} placeholders, "
            f"got {len(values)} values")
    out = [parts[0]]
    for value, tail in zip(values, parts[1:]):
        out.append(value)
        out.append(tail)
    return "".join(out)
