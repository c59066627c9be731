"""Operand/expression lexer.

Each lex step pulls characters from the shared CharSource and appends one
(operand, operator) pair to the window:

    [sign] digits [. digits]   <blanks>   operator | ( | ) | newline

The outcome is reported as a ParseStatus. A "(" seen where an operand was
expected returns OPEN with the operator slot untouched; a "(" seen where an
operator was expected is written as the group marker, which the evaluator
turns into implicit multiplication. A bare sign directly before "(" is
recorded in window.group_sign and also returns OPEN.
"""

from __future__ import annotations

from typing import Optional

from windowcalc.arithmetic import OPERATORS
from windowcalc.models import GROUP_MARKER, ParseStatus, SyntaxErrorKind, Window
from windowcalc.source import CharSource

_DIGITS = frozenset("0123456789")
_BLANKS = frozenset(" \t")
_SIGNS = frozenset("+-")

# An operand may not start with these: "3 + * 4" has two operators in a row.
_NOT_A_SIGN = frozenset("*/^")


class Lexer:
    def __init__(self, source: CharSource) -> None:
        self.source = source
        # Sub-kind of the most recent SYNTAX_ERROR, for reporting
        self.error: Optional[SyntaxErrorKind] = None

    def _fail(self, kind: SyntaxErrorKind) -> ParseStatus:
        self.error = kind
        return ParseStatus.SYNTAX_ERROR

    def _skip_blanks(self, c: str) -> str:
        while c in _BLANKS:
            c = self.source.read()
        return c

    def lex(self, window: Window) -> ParseStatus:
        """Append one (operand, operator) pair at window.at.

        When window.held is set the operand slot was already filled by a
        closed group, so only the following operator is read.
        """
        self.error = None
        if window.held:
            window.held = False
            c = self.source.read()
        else:
            c = self._skip_blanks(self.source.read())
            status, c = self._operand(c, window)
            if status is not None:
                return status
        return self._dispatch(self._skip_blanks(c), window)

    def _operand(self, c: str, window: Window) -> tuple[Optional[ParseStatus], str]:
        """Parse an operand starting at c into operands[window.at].

        Returns (status, next_char). status is None when parsing should go
        on to operator dispatch with next_char.
        """
        window.operands[window.at] = 0.0
        sign = 1.0
        literal: list[str] = []
        has_fraction = False

        if c in _SIGNS:
            if c == "-":
                sign = -1.0
        elif c in _DIGITS:
            literal.append(c)
        elif c == ".":
            literal.append(c)
            has_fraction = True
        elif c in _NOT_A_SIGN:
            return self._fail(SyntaxErrorKind.CONSECUTIVE_OPERATORS), c
        elif c == "(":
            return ParseStatus.OPEN, c
        else:
            # Not an operand at all; let dispatch classify it ("\n", ")", ...)
            return None, c

        c = self.source.read()
        while c in _DIGITS or c == ".":
            if c == ".":
                if has_fraction:
                    return self._fail(SyntaxErrorKind.SECOND_DECIMAL_POINT), c
                has_fraction = True
            literal.append(c)
            c = self.source.read()

        if not literal and c == "(":
            # "-(2 + 3)": the evaluator applies the sign to the group's value
            window.group_sign = sign
            return ParseStatus.OPEN, c

        text = "".join(literal)
        value = float(text) if text.strip(".") else 0.0
        window.operands[window.at] = sign * value
        return None, c

    def _dispatch(self, c: str, window: Window) -> ParseStatus:
        """Classify the character following an operand."""
        if c in OPERATORS:
            window.operators[window.at] = c
            window.at += 1
            return ParseStatus.COMPUTE if window.full else ParseStatus.CONTINUE
        if c == "(":
            window.operators[window.at] = GROUP_MARKER
            return ParseStatus.OPEN
        if c == ")":
            return ParseStatus.CLOSE
        if c == "\n" or c == "":
            return ParseStatus.END
        return self._fail(SyntaxErrorKind.UNEXPECTED_CHARACTER)
