"""Data models for the windowcalc evaluator.

ParseStatus, SyntaxErrorKind, Window, EvalResult, TraceStep: the typed
structures that flow through lexer → evaluator → caller.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

WINDOW_SIZE = 3

# Padding for unused window slots: "+ 0" is the identity for a flush.
PAD_OPERAND = 0.0
PAD_OPERATOR = "+"

# Marks an operator slot whose right operand comes from a nested group.
GROUP_MARKER = "("


class ParseStatus(str, Enum):
    """Outcome of a single lex step."""

    CONTINUE = "continue"
    COMPUTE = "compute"
    OPEN = "open"
    CLOSE = "close"
    END = "end"
    SYNTAX_ERROR = "syntax-error"


class SyntaxErrorKind(str, Enum):
    """Why an expression was rejected."""

    CONSECUTIVE_OPERATORS = "consecutive-operators"
    SECOND_DECIMAL_POINT = "second-decimal-point"
    UNEXPECTED_CHARACTER = "unexpected-character"
    UNBALANCED_PARENTHESES = "unbalanced-parentheses"
    NESTING_TOO_DEEP = "nesting-too-deep"


class ExpressionSyntaxError(ValueError):
    """Raised by the convenience API when an expression does not parse."""

    def __init__(self, kind: Optional[SyntaxErrorKind], position: int) -> None:
        self.kind = kind
        self.position = position
        label = kind.value if kind else "syntax-error"
        super().__init__(f"{label} at character {position}")


@dataclass
class Window:
    """The un-collapsed prefix of the expression at one nesting level.

    Operator slot i separates operand i from operand i + 1. `at` is the
    next empty operand slot; at == WINDOW_SIZE means the window is full.
    """

    operands: list[float] = field(default_factory=lambda: [PAD_OPERAND] * WINDOW_SIZE)
    operators: list[str] = field(default_factory=lambda: [PAD_OPERATOR] * WINDOW_SIZE)
    at: int = 0

    # operands[at] was filled by a closed group; only its operator is pending
    held: bool = False

    # Additive prefix (value, operator) parked while a "* ... ^" term completes
    carry: Optional[tuple[float, str]] = None

    # Sign read directly before "(" in operand position, e.g. "-(2 + 3)"
    group_sign: Optional[float] = None

    @property
    def full(self) -> bool:
        return self.at >= WINDOW_SIZE

    def has_group_marker(self) -> bool:
        """True when some operator slot holds the nested-group marker."""
        return GROUP_MARKER in self.operators

    def marker_index(self) -> int:
        return self.operators.index(GROUP_MARKER)


@dataclass
class TraceStep:
    """Snapshot of a window after one lex or collapse step."""

    depth: int
    action: str
    status: Optional[ParseStatus]
    operands: tuple[float, ...]
    operators: tuple[str, ...]
    at: int
    carry: Optional[tuple[float, str]] = None

    @classmethod
    def capture(
        cls,
        window: Window,
        depth: int,
        action: str,
        status: Optional[ParseStatus] = None,
    ) -> TraceStep:
        return cls(
            depth=depth,
            action=action,
            status=status,
            operands=tuple(window.operands),
            operators=tuple(window.operators),
            at=window.at,
            carry=window.carry,
        )


@dataclass
class EvalResult:
    """Final value and terminal status of one expression."""

    value: float
    status: ParseStatus
    error: Optional[SyntaxErrorKind] = None
    position: int = 0

    @property
    def ok(self) -> bool:
        return self.status is not ParseStatus.SYNTAX_ERROR

    @property
    def verdict(self) -> str:
        if not self.ok:
            return "syntax-error"
        if math.isnan(self.value):
            return "nan"
        if math.isinf(self.value):
            return "infinite"
        return "ok"

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "value": self.value if math.isfinite(self.value) else repr(self.value),
            "status": self.status.value,
            "error": self.error.value if self.error else None,
            "position": self.position,
            "verdict": self.verdict,
        }
