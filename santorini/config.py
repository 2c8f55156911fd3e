"""
Runtime configuration read from environment variables.

    SANTORINI_SEARCH_DEPTH   Minimax depth in full turns (default 2)
    SANTORINI_MCTS_BUDGET    MCTS iterations per move (default 200)
    SANTORINI_SEED           Seed for bot randomness (default: unseeded)
    SANTORINI_LOG_LEVEL      Logging level name (default WARNING)
    SANTORINI_LOG_FILE       Optional log file path

Command-line flags take precedence over these values.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping
import os


@dataclass
class Settings:
    search_depth: int = 2
    mcts_budget: int = 200
    seed: int | None = None
    log_level: str = "WARNING"
    log_file: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        seed = env.get("SANTORINI_SEED")
        return cls(
            search_depth=_positive_int(env, "SANTORINI_SEARCH_DEPTH", cls.search_depth),
            mcts_budget=_positive_int(env, "SANTORINI_MCTS_BUDGET", cls.mcts_budget),
            seed=int(seed) if seed else None,
            log_level=env.get("SANTORINI_LOG_LEVEL", cls.log_level).upper(),
            log_file=env.get("SANTORINI_LOG_FILE") or None,
        )


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    value = int(raw)
    if value < 1:
        raise ValueError(f"{name} must be a positive integer, got {raw}")
    return value
