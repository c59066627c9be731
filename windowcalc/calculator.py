"""Convenience entry points over Evaluator.

evaluate_stream() and evaluate_text() return an EvalResult and never raise
for bad input; calc() returns a plain float and raises ExpressionSyntaxError
(a ValueError) instead.
"""

from __future__ import annotations

from typing import Optional, TextIO

from windowcalc.config import EvaluatorConfig
from windowcalc.evaluator import Evaluator
from windowcalc.models import EvalResult, ExpressionSyntaxError
from windowcalc.source import CharSource
from windowcalc.trace import Tracer


def evaluate_stream(
    stream: TextIO,
    config: Optional[EvaluatorConfig] = None,
    tracer: Optional[Tracer] = None,
) -> EvalResult:
    """Evaluate one newline-terminated expression read from a text stream.

    The stream is left positioned right after the terminating newline (or
    wherever evaluation stopped on an error).
    """
    return Evaluator(CharSource(stream), config=config, tracer=tracer).evaluate()


def evaluate_text(
    text: str,
    config: Optional[EvaluatorConfig] = None,
    tracer: Optional[Tracer] = None,
) -> EvalResult:
    """Evaluate the expression at the start of text."""
    return Evaluator(CharSource(text), config=config, tracer=tracer).evaluate()


def calc(expr: str, config: Optional[EvaluatorConfig] = None) -> float:
    """Evaluate expr and return its value.

    A trailing newline is optional. Division by zero and similar cases give
    inf/nan; only malformed input raises.

    Raises:
        ExpressionSyntaxError: expr is not a well-formed expression.
    """
    if not expr.endswith("\n"):
        expr += "\n"
    result = evaluate_text(expr, config=config)
    if not result.ok:
        raise ExpressionSyntaxError(result.error, result.position)
    return result.value
