"""
Bots module - Computer opponents.

Provides:
- BotPolicy: Interface for bot decision-making
- HeuristicEvaluator: Scores game states
- HeuristicBot / choose_move: Minimax lookahead over complete turns
- MctsBot: Monte Carlo tree search
- RandomPolicy / FirstLegalPolicy: Baselines
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .evaluator import HeuristicEvaluator, EvaluationWeights, StateEvaluation, evaluate
from .heuristic_ai import HeuristicBot, MinimaxSearch, NoLegalMove, choose_move
from .mcts import MctsBot, UCB1, PUCT, TREE_POLICIES

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "StateEvaluation",
    "evaluate",
    "HeuristicBot",
    "MinimaxSearch",
    "NoLegalMove",
    "choose_move",
    "MctsBot",
    "UCB1",
    "PUCT",
    "TREE_POLICIES",
]
