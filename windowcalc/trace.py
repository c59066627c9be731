"""Window tracing: records evaluator steps and renders them as Rich tables.

A Tracer is handed to the Evaluator. Each lex and collapse step appends a
TraceStep; with live=True every step is also printed as it happens.
"""

from __future__ import annotations

import math
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from windowcalc.models import ParseStatus, TraceStep, Window

_STATUS_STYLES = {
    ParseStatus.CONTINUE: "dim",
    ParseStatus.COMPUTE: "cyan",
    ParseStatus.OPEN: "magenta",
    ParseStatus.CLOSE: "magenta",
    ParseStatus.END: "green",
    ParseStatus.SYNTAX_ERROR: "red",
}


def _fmt_number(x: float) -> str:
    """Compact operand display: integers without a trailing .0."""
    if math.isfinite(x) and float(x).is_integer():
        return str(int(x))
    return repr(x)


def _fmt_window(step: TraceStep) -> str:
    """Render operands and operators interleaved, e.g. 1 + 2 * [3]."""
    parts = []
    for i, value in enumerate(step.operands):
        text = _fmt_number(value)
        parts.append(f"[{text}]" if i == step.at else text)
        if i < len(step.operators):
            parts.append(step.operators[i])
    return escape(" ".join(parts))


def _fmt_carry(step: TraceStep) -> str:
    if step.carry is None:
        return "--"
    value, op = step.carry
    return f"{_fmt_number(value)} {op}"


def _fmt_status(status: Optional[ParseStatus]) -> str:
    if status is None:
        return ""
    style = _STATUS_STYLES.get(status, "white")
    return f"[{style}]{status.value}[/{style}]"


class Tracer:
    """Collects TraceSteps, optionally echoing them to a console."""

    def __init__(self, console: Optional[Console] = None, live: bool = False) -> None:
        self.console = console or Console(stderr=True)
        self.live = live
        self.steps: list[TraceStep] = []

    def record(
        self,
        window: Window,
        depth: int,
        action: str,
        status: Optional[ParseStatus] = None,
    ) -> None:
        step = TraceStep.capture(window, depth, action, status)
        self.steps.append(step)
        if self.live:
            indent = "  " * depth
            self.console.print(
                f"[dim]{indent}{action:<8}[/dim] {_fmt_window(step)}  {_fmt_status(status)}"
            )


def render_trace(steps: list[TraceStep], console: Console) -> None:
    """Render a Rich table of recorded evaluator steps."""
    if not steps:
        console.print("[yellow]No steps recorded.[/yellow]")
        return

    table = Table(title="Window trace", show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Action", min_width=8)
    table.add_column("Window", min_width=20)
    table.add_column("Carry", justify="right")
    table.add_column("Status")

    for i, step in enumerate(steps, 1):
        table.add_row(
            str(i),
            str(step.depth),
            step.action,
            _fmt_window(step),
            _fmt_carry(step),
            _fmt_status(step.status),
        )

    console.print()
    console.print(table)
    console.print()
