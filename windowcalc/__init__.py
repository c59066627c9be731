"""windowcalc: streaming infix arithmetic with a bounded evaluation window.

Reads one expression a character at a time and folds it into a result as
soon as enough context is visible; parsing and evaluation are interleaved
and no syntax tree is built.

Usage:
    from windowcalc import calc, evaluate_stream

    calc("1 + 2 * 3")                  # 7.0
    calc("3(4+1)")                     # 15.0, implicit multiplication
    evaluate_stream(sys.stdin)         # EvalResult(value, status, error, ...)
"""

from windowcalc.calculator import calc, evaluate_stream, evaluate_text
from windowcalc.config import EvaluatorConfig
from windowcalc.evaluator import Evaluator
from windowcalc.lexer import Lexer
from windowcalc.models import (
    EvalResult,
    ExpressionSyntaxError,
    ParseStatus,
    SyntaxErrorKind,
    TraceStep,
    Window,
)
from windowcalc.source import CharSource
from windowcalc.trace import Tracer, render_trace

__all__ = [
    "CharSource",
    "EvalResult",
    "Evaluator",
    "EvaluatorConfig",
    "ExpressionSyntaxError",
    "Lexer",
    "ParseStatus",
    "SyntaxErrorKind",
    "TraceStep",
    "Tracer",
    "Window",
    "calc",
    "evaluate_stream",
    "evaluate_text",
    "render_trace",
]
