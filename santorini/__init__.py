"""
Santorini - Rules Engine and Computer Opponents

A deterministic rules engine for the board game Santorini with AI opponents.
The package provides:
- Board and game state modelling
- Legal move generation
- A phase-driven reducer that applies actions
- Heuristic lookahead, random and MCTS bots
"""

__version__ = "0.1.0"
