# =============================================================================
# test_rpn.py - Intermediate Representation Tests
# =============================================================================
# Tests for the token model, the append/backpatch RPN program, the
# intermediate code listing and the RPN file reader.
# =============================================================================

import pytest

from lycc.errors import BackpatchRangeError, RPNFormatError
from lycc.rpn import (
    ArithmeticOp,
    BranchKind,
    RPNProgram,
    Token,
    TokenKind,
    read_rpn,
    read_rpn_file,
)
from lycc.rpn.program import LISTING_RULE, LISTING_TITLE


# =============================================================================
# Token Classification
# =============================================================================

class TestTokenClassification:
    """Token.from_text must map every text form onto the closed kind set."""

    def test_arithmetic_operators(self):
        for text, op in [("+", ArithmeticOp.ADD), ("-", ArithmeticOp.SUB),
                         ("*", ArithmeticOp.MUL), ("/", ArithmeticOp.DIV)]:
            token = Token.from_text(text)
            assert token.kind is TokenKind.ARITHMETIC
            assert token.op is op

    def test_branches(self):
        for kind in BranchKind:
            token = Token.from_text(kind.value)
            assert token.kind is TokenKind.BRANCH
            assert token.branch is kind

    def test_keywords(self):
        assert Token.from_text(":=").kind is TokenKind.ASSIGN
        assert Token.from_text("CMP").kind is TokenKind.COMPARE
        assert Token.from_text("NEG").kind is TokenKind.NEGATE
        assert Token.from_text("WRITE").kind is TokenKind.WRITE
        assert Token.from_text("READ").kind is TokenKind.READ
        assert Token.from_text("_PLHDR").kind is TokenKind.PLACEHOLDER

    def test_number_shapes(self):
        for text in ["5", "3.14", ".99", "99.", "-3.2", "-7"]:
            assert Token.from_text(text).kind is TokenKind.NUMBER, text

    def test_string_literal(self):
        token = Token.from_text('"hola mundo"')
        assert token.kind is TokenKind.STRING
        assert token.string_content == "hola mundo"

    def test_identifiers(self):
        for text in ["x", "total", "my_var", "a1", "cmp"]:
            assert Token.from_text(text).kind is TokenKind.IDENTIFIER, text

    def test_lone_quote_is_identifier(self):
        """A single quote character is not a string literal."""
        assert Token.from_text('"').kind is TokenKind.IDENTIFIER

    def test_empty_text_rejected(self):
        with pytest.raises(ValueError):
            Token.from_text("")

    def test_operand_and_operator_helpers(self):
        assert Token.from_text("x").is_operand()
        assert Token.from_text("3").is_operand()
        assert Token.from_text('"s"').is_operand()
        assert Token.from_text("+").is_operator()
        assert Token.from_text("WRITE").is_operator()
        assert Token.from_text("BLT").is_control()
        assert Token.placeholder().is_control()


class TestDestinations:
    """Destination tokens are plain non-negative integers."""

    def test_integer_is_destination(self):
        assert Token.from_text("12").as_destination() == 12
        assert Token.destination(0).as_destination() == 0

    def test_non_integer_is_not_destination(self):
        assert Token.from_text("3.0").as_destination() is None
        assert Token.from_text("-1").as_destination() is None
        assert Token.from_text("x").as_destination() is None
        assert Token.placeholder().as_destination() is None

    def test_negative_destination_rejected(self):
        with pytest.raises(ValueError):
            Token.destination(-1)


# =============================================================================
# RPN Program
# =============================================================================

class TestRPNProgram:
    """Append and backpatch behaviour."""

    def test_append_returns_index(self):
        program = RPNProgram()
        assert program.append("a") == 0
        assert program.append("b") == 1
        assert program.append(Token.from_text("+")) == 2
        assert len(program) == 3
        assert program.next_index == 3

    def test_from_texts(self):
        program = RPNProgram.from_texts(["3", "4", "+"])
        assert [t.kind for t in program] == [
            TokenKind.NUMBER, TokenKind.NUMBER, TokenKind.ARITHMETIC,
        ]

    def test_forward_branch_backpatch(self):
        """IF-style forward jump: placeholder resolved once the target is known."""
        program = RPNProgram()
        for text in ["x", "0", "CMP", "BLE"]:
            program.append(text)
        hole = program.append(Token.placeholder())
        program.append('"positive"')
        program.append("WRITE")

        assert not program.is_finished()
        assert program.placeholders() == [hole]

        program.backpatch(hole, program.next_index)

        assert program.is_finished()
        assert program[hole].as_destination() == 7
        assert program.warnings.count() == 0

    def test_backpatch_non_placeholder_warns(self):
        program = RPNProgram.from_texts(["x"])
        program.backpatch(0, 3)
        assert program.warnings.count() == 1
        assert "not a placeholder" in program.warnings.report()
        assert program[0].text == "3"

    def test_backpatch_non_destination_warns(self):
        program = RPNProgram.from_texts(["BI", "_PLHDR"])
        program.backpatch(1, "y")
        assert program.warnings.count() == 1
        assert "not a destination index" in program.warnings.report()

    def test_backpatch_out_of_range(self):
        program = RPNProgram.from_texts(["x"])
        with pytest.raises(BackpatchRangeError):
            program.backpatch(5, 0)
        with pytest.raises(BackpatchRangeError):
            program.backpatch(-1, 0)

    def test_listing_format(self):
        program = RPNProgram.from_texts(["a", "b", ":="])
        lines = program.listing().splitlines()
        assert lines[0] == LISTING_TITLE
        assert lines[1] == LISTING_RULE
        assert lines[2:5] == ["[0] a", "[1] b", "[2] :="]
        assert lines[5] == LISTING_RULE
        assert len(lines) == 6


# =============================================================================
# Reader
# =============================================================================

class TestReader:
    """Reading token-per-line and listing files."""

    def test_one_token_per_line(self):
        program = read_rpn('x\n\n5\nCMP\n"hello world"\nWRITE\n')
        assert [t.text for t in program] == ["x", "5", "CMP", '"hello world"', "WRITE"]

    def test_reads_listing(self):
        original = RPNProgram.from_texts(["a", "1", "+", "b", ":=", "BI", "0"])
        program = read_rpn(original.listing())
        assert program.tokens == original.tokens

    def test_minus_operator_kept(self):
        program = read_rpn("a\nb\n-\nc\n:=\n")
        assert [t.text for t in program] == ["a", "b", "-", "c", ":="]
        assert program[2].op is ArithmeticOp.SUB

    def test_listing_with_minus_round_trips(self):
        original = RPNProgram.from_texts(["a", "-", "b", ":="])
        program = read_rpn(original.listing())
        assert program.tokens == original.tokens

    def test_listing_index_out_of_sequence(self):
        with pytest.raises(RPNFormatError) as exc_info:
            read_rpn("[0] a\n[2] b\n", "prog.txt")
        assert exc_info.value.line == 2
        assert "prog.txt:2" in str(exc_info.value)

    def test_read_file(self, tmp_path):
        path = tmp_path / "prog.rpn"
        path.write_text("a\nb\n:=\n", encoding="utf-8")
        program = read_rpn_file(path)
        assert len(program) == 3
