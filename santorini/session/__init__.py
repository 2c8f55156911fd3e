"""
Session Module - Runs games.

A session represents one play-through of a game:
- Created when a game starts
- Holds the current game state
- Accepts actions from humans and bots
- Destroyed when the game ends

Sessions are EPHEMERAL: nothing is persisted.
"""

from .manager import GameSession, SessionState
from .game_loop import GameLoop, LoopState, TurnResult, MatchResult
from .tournament import Tournament, Contestant, EloConfig, default_contestants, play_match

__all__ = [
    "GameSession",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
    "MatchResult",
    "Tournament",
    "Contestant",
    "EloConfig",
    "default_contestants",
    "play_match",
]
