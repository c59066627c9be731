"""Tests for environment-driven configuration and Rich trace rendering."""

import io
import math

from rich.console import Console

from windowcalc import EvalResult, ParseStatus, evaluate_text
from windowcalc.config import DEFAULT_MAX_DEPTH, MIN_MAX_DEPTH, EvaluatorConfig
from windowcalc.evaluator import Evaluator
from windowcalc.source import CharSource
from windowcalc.trace import Tracer, render_trace


def _console():
    buf = io.StringIO()
    return Console(file=buf, width=120, force_terminal=False), buf


# --- Configuration ---

def test_defaults():
    config = EvaluatorConfig.from_env({})
    assert config.max_depth == DEFAULT_MAX_DEPTH
    assert config.strict is False
    assert config.trace is False


def test_env_overrides():
    config = EvaluatorConfig.from_env({
        "WINDOWCALC_MAX_DEPTH": "500",
        "WINDOWCALC_STRICT": "true",
        "WINDOWCALC_TRACE": "1",
    })
    assert config.max_depth == 500
    assert config.strict is True
    assert config.trace is True


def test_max_depth_never_below_minimum():
    assert EvaluatorConfig.from_env({"WINDOWCALC_MAX_DEPTH": "10"}).max_depth == MIN_MAX_DEPTH
    assert EvaluatorConfig(max_depth=1).max_depth == MIN_MAX_DEPTH


def test_invalid_depth_falls_back():
    config = EvaluatorConfig.from_env({"WINDOWCALC_MAX_DEPTH": "deep"})
    assert config.max_depth == DEFAULT_MAX_DEPTH


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("WINDOWCALC_STRICT", "yes")
    assert EvaluatorConfig.from_env().strict is True


def test_trace_flag_installs_live_tracer():
    evaluator = Evaluator(CharSource("1\n"), EvaluatorConfig(trace=True))
    assert evaluator.tracer is not None
    assert evaluator.tracer.live


# --- Tracing ---

def test_tracer_records_steps():
    console, _ = _console()
    tracer = Tracer(console=console)
    result = evaluate_text("1 + 2 * 3\n", tracer=tracer)
    assert result.value == 7.0
    assert [s.action for s in tracer.steps] == ["lex", "lex", "lex", "flush"]
    assert tracer.steps[-1].status is ParseStatus.END
    assert tracer.steps[-1].operands[0] == 7.0


def test_live_tracer_prints_each_step():
    console, buf = _console()
    tracer = Tracer(console=console, live=True)
    evaluate_text("2 * (3)\n", tracer=tracer)
    output = buf.getvalue()
    assert "lex" in output
    assert "group" in output
    assert "end" in output


def test_render_trace_table():
    console, buf = _console()
    tracer = Tracer(console=console)
    evaluate_text("1 + 2 * 3 ^ 2\n", tracer=tracer)
    render_trace(tracer.steps, console)
    output = buf.getvalue()
    assert "Window trace" in output
    assert "collapse" in output
    # the spilled "1 +" shows up in the carry column
    assert "1 +" in output


def test_render_empty_trace():
    console, buf = _console()
    render_trace([], console)
    assert "No steps recorded" in buf.getvalue()


# --- Result model ---

def test_result_verdicts():
    assert EvalResult(value=1.0, status=ParseStatus.END).verdict == "ok"
    assert EvalResult(value=math.nan, status=ParseStatus.END).verdict == "nan"
    assert EvalResult(value=0.0, status=ParseStatus.SYNTAX_ERROR).verdict == "syntax-error"


def test_result_dict_special_value():
    d = EvalResult(value=math.inf, status=ParseStatus.END).to_dict()
    assert d["value"] == "inf"
    assert d["verdict"] == "infinite"
