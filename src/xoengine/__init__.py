"""XOEngine package exposing the board model, minimax AI, match sessions and the web app."""

from .ai import Difficulty, MinimaxAI, best_move
from .errors import InvalidMove, InvalidPlayer, NoLegalMove, UnsupportedDifficulty
from .game import Mark, Outcome
from .session import MatchSession
from .ui import app

__all__ = [
    "Difficulty",
    "InvalidMove",
    "InvalidPlayer",
    "Mark",
    "MatchSession",
    "MinimaxAI",
    "NoLegalMove",
    "Outcome",
    "UnsupportedDifficulty",
    "app",
    "best_move",
]
