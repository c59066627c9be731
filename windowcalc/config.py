"""Evaluator configuration.

Defaults can be overridden from the environment:

    WINDOWCALC_MAX_DEPTH   maximum parenthesis nesting (default 256, min 64)
    WINDOWCALC_STRICT      "1" to reject unbalanced parentheses
    WINDOWCALC_TRACE       "1" to print every window step to stderr
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MAX_DEPTH = 256
MIN_MAX_DEPTH = 64

_TRUTHY = ("1", "true", "yes", "on")


def _env_flag(env: Mapping[str, str], key: str) -> bool:
    return env.get(key, "").strip().lower() in _TRUTHY


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, default))
    except (TypeError, ValueError):
        return default


@dataclass
class EvaluatorConfig:
    """Tunables for one Evaluator."""

    max_depth: int = DEFAULT_MAX_DEPTH
    strict: bool = False
    trace: bool = False

    def __post_init__(self) -> None:
        self.max_depth = max(self.max_depth, MIN_MAX_DEPTH)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> EvaluatorConfig:
        """Build a config from WINDOWCALC_* variables, falling back to defaults."""
        env = os.environ if env is None else env
        return cls(
            max_depth=_env_int(env, "WINDOWCALC_MAX_DEPTH", DEFAULT_MAX_DEPTH),
            strict=_env_flag(env, "WINDOWCALC_STRICT"),
            trace=_env_flag(env, "WINDOWCALC_TRACE"),
        )
