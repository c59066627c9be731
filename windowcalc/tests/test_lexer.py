"""Tests for the operand/expression lexer and the character source."""

import io

import pytest

from windowcalc.lexer import Lexer
from windowcalc.models import ParseStatus, SyntaxErrorKind, Window
from windowcalc.source import CharSource


def _lex(text, window=None):
    """Run one lex step over text; returns (status, window, lexer)."""
    window = window or Window()
    lexer = Lexer(CharSource(text))
    return lexer.lex(window), window, lexer


# --- Operands ---

def test_integer_then_operator():
    status, window, _ = _lex("12 +")
    assert status is ParseStatus.CONTINUE
    assert window.operands[0] == 12.0
    assert window.operators[0] == "+"
    assert window.at == 1


@pytest.mark.parametrize(
    "text, expected",
    [
        ("12.5\n", 12.5),
        (".12\n", 0.12),
        ("-.5\n", -0.5),
        ("+3\n", 3.0),
        ("0.1\n", 0.1),
        ("7.\n", 7.0),
    ],
)
def test_operand_literals(text, expected):
    status, window, _ = _lex(text)
    assert status is ParseStatus.END
    assert window.operands[0] == expected


def test_leading_blanks_skipped():
    status, window, _ = _lex(" \t 4 *")
    assert status is ParseStatus.CONTINUE
    assert window.operands[0] == 4.0
    assert window.operators[0] == "*"


def test_bare_sign_before_group_is_pending():
    status, window, _ = _lex("-(")
    assert status is ParseStatus.OPEN
    assert window.group_sign == -1.0
    assert window.operands[0] == 0.0
    assert not window.has_group_marker()


def test_plus_sign_before_group():
    status, window, _ = _lex("+(")
    assert status is ParseStatus.OPEN
    assert window.group_sign == 1.0


# --- Operator dispatch ---

def test_window_fills_to_compute():
    window = Window()
    lexer = Lexer(CharSource("1 + 2 * 3 - "))
    assert lexer.lex(window) is ParseStatus.CONTINUE
    assert lexer.lex(window) is ParseStatus.CONTINUE
    assert lexer.lex(window) is ParseStatus.COMPUTE
    assert window.operands == [1.0, 2.0, 3.0]
    assert window.operators == ["+", "*", "-"]
    assert window.full


def test_open_in_operand_position():
    status, window, _ = _lex("(1")
    assert status is ParseStatus.OPEN
    assert window.operands[0] == 0.0
    assert window.operators[0] == "+"
    assert not window.has_group_marker()


def test_open_in_operator_position():
    status, window, _ = _lex("3(")
    assert status is ParseStatus.OPEN
    assert window.operands[0] == 3.0
    assert window.operators[0] == "("
    assert window.at == 0
    assert window.has_group_marker()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5)", ParseStatus.CLOSE),
        ("5\n", ParseStatus.END),
        ("5", ParseStatus.END),
        ("\n", ParseStatus.END),
    ],
)
def test_terminators(text, expected):
    status, _, _ = _lex(text)
    assert status is expected


def test_held_operand_reads_operator_only():
    window = Window()
    window.operands[0] = 5.0
    window.held = True
    status, window, _ = _lex(" * 2", window)
    assert status is ParseStatus.CONTINUE
    assert window.operands[0] == 5.0
    assert window.operators[0] == "*"
    assert window.at == 1
    assert not window.held


# --- Syntax errors ---

@pytest.mark.parametrize(
    "text, kind",
    [
        ("* 4", SyntaxErrorKind.CONSECUTIVE_OPERATORS),
        ("/4", SyntaxErrorKind.CONSECUTIVE_OPERATORS),
        ("^4", SyntaxErrorKind.CONSECUTIVE_OPERATORS),
        ("1.2.3", SyntaxErrorKind.SECOND_DECIMAL_POINT),
        (".9.", SyntaxErrorKind.SECOND_DECIMAL_POINT),
        ("3 @", SyntaxErrorKind.UNEXPECTED_CHARACTER),
        ("- 3", SyntaxErrorKind.UNEXPECTED_CHARACTER),
        ("3 4", SyntaxErrorKind.UNEXPECTED_CHARACTER),
        ("3\r\n", SyntaxErrorKind.UNEXPECTED_CHARACTER),
    ],
)
def test_syntax_errors(text, kind):
    status, _, lexer = _lex(text)
    assert status is ParseStatus.SYNTAX_ERROR
    assert lexer.error is kind


def test_error_cleared_on_next_step():
    window = Window()
    lexer = Lexer(CharSource("3 @ 4 +"))
    assert lexer.lex(window) is ParseStatus.SYNTAX_ERROR
    assert lexer.lex(window) is ParseStatus.CONTINUE
    assert lexer.error is None


# --- Character source ---

def test_source_reads_one_char_at_a_time():
    source = CharSource(io.StringIO("ab"))
    assert source.read() == "a"
    assert source.position == 1
    assert source.read() == "b"
    assert source.read() == ""
    assert source.position == 2


def test_source_accepts_plain_text():
    source = CharSource("x")
    assert source.read() == "x"
