"""
Hex literal scanner tests.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from z80tablegen.literals import HexLiteral, fill, find_literal, scan_literals, splice


class TestScanLiterals:
    def test_no_literals(self):
        assert scan_literals("NOP") == []

    def test_single_literal(self):
        (lit,) = scan_literals("JP $8000")
        assert lit == HexLiteral(start=3, end=8, digits="8000")
        assert lit.width == 4
        assert lit.span == (3, 8)

    def test_sign_and_immediate(self):
        disp, imm = scan_literals("LD (IX+$05),#$20")
        assert (disp.start, disp.end, disp.digits, disp.sign) == (7, 10, "05", "+")
        assert not disp.immediate
        assert (imm.start, imm.end, imm.digits, imm.sign) == (13, 16, "20", "")
        assert imm.immediate

    def test_negative_sign_spans(self):
        (lit,) = scan_literals("LD A,(IX-$05)")
        assert lit.sign == "-"
        assert lit.signed_span == (8, 12)
        assert lit.byte_span == (8, 12)

    def test_byte_span_without_sign(self):
        (lit,) = scan_literals("IN A,($05)")
        assert lit.byte_span == lit.span == (6, 9)

    def test_bare_dollar(self):
        (lit,) = scan_literals("DB $")
        assert lit.width == 0
        assert lit.end == len("DB $")

    def test_literal_at_end_of_text(self):
        (lit,) = scan_literals("JR $0007")
        assert lit.end == len("JR $0007")


class TestFindLiteral:
    def test_by_digits_requires_exact_match(self):
        literals = scan_literals("JR $0600")
        assert find_literal(literals, digits="06") is None
        assert find_literal(literals, digits="0600") is literals[0]

    def test_by_width(self):
        literals = scan_literals("LD (IX+$05),$1234")
        assert find_literal(literals, width=4).digits == "1234"
        assert find_literal(literals, width=3) is None

    def test_first_match_wins(self):
        literals = scan_literals("EX ($05),$05")
        assert find_literal(literals, digits="05").start == 4


class TestSplice:
    def test_single(self):
        assert splice("JP $8000", [(3, 8)]) == "JP %s"

    def test_two_spans_any_order(self):
        assert splice("LD (IX+$05),#$20", [(13, 16), (6, 10)]) == "LD (IX%s),#%s"

    def test_overlap_rejected(self):
        with pytest.raises(ValueError):
            splice("JP $8000", [(3, 8), (4, 6)])

    def test_custom_placeholder(self):
        assert splice("JP $8000", [(3, 8)], placeholder="{}") == "JP {}"


class TestFill:
    def test_restores_text(self):
        assert fill("LD (IX%s),#%s", ["+$05", "$20"]) == "LD (IX+$05),#$20"

    def test_no_placeholders(self):
        assert fill("NOP", []) == "NOP"

    def test_count_mismatch(self):
        with pytest.raises(ValueError):
            fill("JP %s", [])
