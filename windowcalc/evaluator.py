"""Window evaluator: folds lexed (operand, operator) pairs into a result.

Data flow per (sub)expression:
1. Start with an empty Window (three operands, three operator slots)
2. Lex one pair at a time into the window
3. When the window fills, collapse it: apply the operator(s) that can be
   applied given the trailing operator, then shift what is left
4. On "(" re-enter _evaluate() for the group and hold its value as the
   next operand; after "-(" the group and any "^" chain behind it are
   folded first, then negated
5. On newline or ")" flush the window and return operands[0]

Working memory is one Window per nesting level; no tree is built.
"""

from __future__ import annotations

import math
from typing import Optional

from windowcalc.arithmetic import ADDITIVE, MULTIPLICATIVE, POWER, apply, precedence
from windowcalc.config import EvaluatorConfig
from windowcalc.lexer import Lexer
from windowcalc.models import (
    GROUP_MARKER,
    PAD_OPERAND,
    PAD_OPERATOR,
    EvalResult,
    ParseStatus,
    SyntaxErrorKind,
    Window,
)
from windowcalc.source import CharSource
from windowcalc.trace import Tracer


def _highest_order_op(operators: list[str]) -> int:
    """Index (0 or 1) of the live operator that binds tightest; ties go left."""
    return 1 if precedence(operators[1]) > precedence(operators[0]) else 0


def shift_window(mode: int, window: Window) -> None:
    """Re-establish the window invariants after a collapse.

    Mode 1: everything folded into operands[0]; only the trailing operator
            survives.
    Mode 2: one reduction into operands[0]; slots 1 and 2 slide left.
    Mode 3: reduction into operands[1]; the trailing operator slides into
            slot 1.
    """
    operands, operators = window.operands, window.operators
    if mode == 1:
        operands[1] = PAD_OPERAND
        operators[0] = operators[2]
        operators[1] = PAD_OPERATOR
        window.at = 1
    elif mode == 2:
        operands[1] = operands[2]
        operators[0] = operators[1]
        operators[1] = operators[2]
        window.at = 2
    elif mode == 3:
        operators[1] = operators[2]
        window.at = 2
    else:
        raise ValueError(f"Undefined shift mode: {mode}")
    operands[2] = PAD_OPERAND
    operators[2] = PAD_OPERATOR


def absorb_carry(window: Window) -> None:
    """Fold a parked additive prefix into operands[0]."""
    if window.carry is None:
        return
    value, op = window.carry
    window.operands[0] = apply(op, value, window.operands[0])
    window.carry = None


def collapse(window: Window) -> None:
    """Apply the window's operators in precedence order and compact it.

    operators[2] is the trailing operator that made the window full (or
    padding during a flush). It decides how much of the window can be
    folded now: an additive trailing operator closes both terms, a tighter
    one keeps its left operand in the window.
    """
    o, ops = window.operands, window.operators

    # Everything right of an additive operators[0] is a complete term
    if window.carry is not None and ops[0] in ADDITIVE:
        absorb_carry(window)

    p = _highest_order_op(ops)
    trailing = ops[2]

    if trailing in ADDITIVE:
        if p == 0:
            o[0] = apply(ops[0], o[0], o[1])
            o[0] = apply(ops[1], o[0], o[2])
        else:
            o[1] = apply(ops[1], o[1], o[2])
            o[0] = apply(ops[0], o[0], o[1])
        shift_window(1, window)
    elif p == 0 and ops[0] in MULTIPLICATIVE:
        o[0] = apply(ops[0], o[0], o[1])
        # With a trailing "^", o[2] is the base of a power and must wait
        if ops[1] in MULTIPLICATIVE and trailing in MULTIPLICATIVE:
            o[0] = apply(ops[1], o[0], o[2])
            shift_window(1, window)
        else:
            shift_window(2, window)
    elif p == 1 and precedence(ops[1]) >= precedence(trailing):
        o[1] = apply(ops[1], o[1], o[2])
        shift_window(3, window)
    elif p == 1:
        # a + b * c ^ ...: nothing is reducible yet, park "a +" outside
        window.carry = (o[0], ops[0])
        o[0] = o[1]
        shift_window(2, window)
    else:
        o[0] = apply(ops[p], o[0], o[1])
        shift_window(2, window)


def flush(window: Window) -> float:
    """Collapse whatever is left and return the expression value."""
    collapse(window)
    absorb_carry(window)
    return window.operands[0]


class Evaluator:
    """Evaluates one expression from a CharSource.

    Nested groups re-enter _evaluate() with a fresh Window; recursion depth
    follows parenthesis depth and is capped by config.max_depth. A cap set
    beyond the interpreter stack still ends in NESTING_TOO_DEEP.
    """

    def __init__(
        self,
        source: CharSource,
        config: Optional[EvaluatorConfig] = None,
        tracer: Optional[Tracer] = None,
    ) -> None:
        self.source = source
        self.config = config or EvaluatorConfig()
        if tracer is None and self.config.trace:
            tracer = Tracer(live=True)
        self.tracer = tracer
        self.lexer = Lexer(source)
        self.error: Optional[SyntaxErrorKind] = None

    def evaluate(self) -> EvalResult:
        """Evaluate the next expression and report value, status and error."""
        self.error = None
        try:
            value, status = self._evaluate(0)
        except RecursionError:
            # max_depth set above what the interpreter stack allows
            value, status = math.nan, self._fail(SyntaxErrorKind.NESTING_TOO_DEEP)

        if status is ParseStatus.CLOSE and self.config.strict:
            # ")" with no matching "("
            status = self._fail(SyntaxErrorKind.UNBALANCED_PARENTHESES)

        return EvalResult(
            value=value,
            status=status,
            error=self.error if status is ParseStatus.SYNTAX_ERROR else None,
            position=self.source.position,
        )

    def _fail(self, kind: Optional[SyntaxErrorKind]) -> ParseStatus:
        self.error = kind
        return ParseStatus.SYNTAX_ERROR

    def _trace(
        self,
        window: Window,
        depth: int,
        action: str,
        status: Optional[ParseStatus] = None,
    ) -> None:
        if self.tracer is not None:
            self.tracer.record(window, depth, action, status)

    def _collapse(self, window: Window, depth: int) -> None:
        collapse(window)
        self._trace(window, depth, "collapse")

    def _lex(self, window: Window, depth: int) -> ParseStatus:
        """One lex step; a signed group comes back as a finished operand."""
        status = self.lexer.lex(window)
        self._trace(window, depth, "lex", status)
        if status is ParseStatus.SYNTAX_ERROR:
            return self._fail(self.lexer.error)
        if status is ParseStatus.OPEN and window.group_sign is not None:
            return self._signed_group(window, depth)
        return status

    def _evaluate(self, depth: int) -> tuple[float, ParseStatus]:
        window = Window()

        while True:
            status = self._lex(window, depth)

            if status is ParseStatus.CONTINUE:
                continue

            if status is ParseStatus.COMPUTE:
                self._collapse(window, depth)
                continue

            if status is ParseStatus.SYNTAX_ERROR:
                return window.operands[0], status

            if status in (ParseStatus.END, ParseStatus.CLOSE):
                value = flush(window)
                self._trace(window, depth, "flush", status)
                return value, status

            # ParseStatus.OPEN
            status = self._open_group(window, depth)
            if status is ParseStatus.SYNTAX_ERROR:
                return window.operands[0], status
            if status is ParseStatus.END:
                # Input ended inside the group; nothing left to read here either
                value = flush(window)
                self._trace(window, depth, "flush", status)
                return value, status

    def _group_value(self, depth: int) -> tuple[float, ParseStatus]:
        """Evaluate the group just opened at `depth`, enforcing the limits."""
        if depth + 1 > self.config.max_depth:
            return math.nan, self._fail(SyntaxErrorKind.NESTING_TOO_DEEP)

        value, status = self._evaluate(depth + 1)
        if status is ParseStatus.END and self.config.strict:
            # "(" never closed
            return value, self._fail(SyntaxErrorKind.UNBALANCED_PARENTHESES)
        return value, status

    def _open_group(self, window: Window, depth: int) -> ParseStatus:
        """Evaluate a parenthesized group and hold its value in the window.

        Returns the group's terminal status: CLOSE on a matched ")", END when
        input ran out first (an error in strict mode), or SYNTAX_ERROR.
        """
        if window.has_group_marker():
            # "3(4 + 1)": the marker stands for an implicit "*"
            window.operators[window.marker_index()] = "*"
            window.at += 1
            if window.full:
                self._collapse(window, depth)

        value, status = self._group_value(depth)
        if status is ParseStatus.SYNTAX_ERROR:
            return status

        window.operands[window.at] = value
        window.held = True
        self._trace(window, depth, "group", status)
        return status

    def _signed_group(self, window: Window, depth: int) -> ParseStatus:
        """Evaluate "-(...)" as one operand and dispatch what follows it.

        The sign binds looser than a following "^" and tighter than anything
        before it: 2 / -(4) == -0.5, 2 ^ -(2) == 0.25, -(3) ^ 2 == -9.
        Returns the status the lexer would have reported for the operator
        after the signed term.
        """
        sign = window.group_sign
        window.group_sign = None

        value, status = self._group_value(depth)
        if status is ParseStatus.CLOSE:
            value, status, op = self._power_term(value, depth + 1)
        else:
            op = None
        if status is ParseStatus.SYNTAX_ERROR:
            return status

        window.operands[window.at] = sign * value
        self._trace(window, depth, "group", status)

        if op is None:
            # ")" or end of input already consumed for this level
            return status
        window.operators[window.at] = op
        if op == GROUP_MARKER:
            return ParseStatus.OPEN
        window.at += 1
        return ParseStatus.COMPUTE if window.full else ParseStatus.CONTINUE

    def _power_term(
        self, base: float, depth: int
    ) -> tuple[float, ParseStatus, Optional[str]]:
        """Fold the "^" chain after `base`, stopping at the first other operator.

        Returns the folded value, the terminal status, and the operator (or
        group marker) that ended the chain; the operator is None when the chain
        ended on ")" or end of input.
        """
        window = Window(held=True)
        window.operands[0] = base

        while True:
            status = self._lex(window, depth)

            if status in (ParseStatus.CONTINUE, ParseStatus.COMPUTE):
                op = window.operators[window.at - 1]
                if op == POWER:
                    if status is ParseStatus.COMPUTE:
                        self._collapse(window, depth)
                    continue
                window.at -= 1
                window.operators[window.at] = PAD_OPERATOR
                return flush(window), status, op

            if status is ParseStatus.SYNTAX_ERROR:
                return window.operands[0], status, None

            if status is ParseStatus.OPEN and window.has_group_marker():
                # "-(2)(3)": implicit "*" ends the term
                window.operators[window.marker_index()] = PAD_OPERATOR
                return flush(window), status, GROUP_MARKER

            if status is ParseStatus.OPEN:
                # Parenthesized exponent, "-(2) ^ (1 + 1)"
                status = self._open_group(window, depth)
                if status is ParseStatus.SYNTAX_ERROR:
                    return window.operands[0], status, None
                if status is ParseStatus.CLOSE:
                    continue

            value = flush(window)
            self._trace(window, depth, "flush", status)
            return value, status, None
