"""Negamax search, with optional alpha-beta pruning, for choosing the computer's move."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional
import logging
import random

from .errors import NoLegalMove, UnsupportedDifficulty
from .game import Board, Mark, available_moves, ensure_player, opponent, winner, with_move

logger = logging.getLogger(__name__)


class Difficulty(IntEnum):
    EASY = 0
    FAIR = 1
    IMPOSSIBLE = 2


# Plies searched on FAIR. Enough to take a win and block one, not to see forks.
FAIR_DEPTH = 2

# Scores live in {-1, 0, +1}; the search window sits just outside them.
_BOUND = 2


@dataclass
class SearchStats:
    """Counters for a single search call."""

    nodes: int = 0


def coerce_difficulty(difficulty: int) -> Difficulty:
    if isinstance(difficulty, bool):
        raise UnsupportedDifficulty(f"Unsupported difficulty {difficulty!r}")
    try:
        return Difficulty(difficulty)
    except ValueError as exc:
        raise UnsupportedDifficulty(f"Unsupported difficulty {difficulty!r}") from exc


# ---- core search ----


def _negamax(
    board: Board, player: Mark, depth: Optional[int], stats: Optional[SearchStats]
) -> int:
    if stats is not None:
        stats.nodes += 1

    w = winner(board)
    if w is not None:
        return w * player

    moves = available_moves(board)
    if not moves or depth == 0:
        return 0

    child_depth = None if depth is None else depth - 1
    other = opponent(player)
    best = -_BOUND
    for move in moves:
        score = -_negamax(with_move(board, move, player), other, child_depth, stats)
        if score > best:
            best = score
    return best


def _alphabeta(
    board: Board,
    player: Mark,
    depth: Optional[int],
    alpha: int,
    beta: int,
    stats: Optional[SearchStats],
) -> int:
    if stats is not None:
        stats.nodes += 1

    w = winner(board)
    if w is not None:
        return w * player

    moves = available_moves(board)
    if not moves or depth == 0:
        return 0

    child_depth = None if depth is None else depth - 1
    other = opponent(player)
    best = -_BOUND
    for move in moves:
        child = with_move(board, move, player)
        score = -_alphabeta(child, other, child_depth, -beta, -alpha, stats)
        if score > best:
            best = score
        alpha = max(alpha, best)
        if beta <= alpha:
            break
    return best


def value(
    board: Board,
    player: int,
    *,
    pruning: bool = True,
    depth: Optional[int] = None,
    stats: Optional[SearchStats] = None,
) -> int:
    """Negamax value of ``board`` for ``player``, who is the side to move.

    +1 means the side to move wins with best play, -1 that it loses and 0 a
    draw. ``depth`` limits the plies searched; positions at the horizon that
    are not terminal score 0.
    """
    mover = ensure_player(player)
    if pruning:
        return _alphabeta(board, mover, depth, -_BOUND, _BOUND, stats)
    return _negamax(board, mover, depth, stats)


def best_move(
    board: Board,
    mover: int,
    difficulty: int = Difficulty.IMPOSSIBLE,
    *,
    pruning: bool = True,
    rng: Optional[random.Random] = None,
    stats: Optional[SearchStats] = None,
) -> int:
    """Return the cell index ``mover`` should play on ``board``.

    IMPOSSIBLE runs the full search and never loses. EASY picks a uniformly
    random legal move and FAIR searches only ``FAIR_DEPTH`` plies. Ties go to
    the lowest cell index.
    """
    player = ensure_player(mover)
    level = coerce_difficulty(difficulty)
    moves = available_moves(board)
    if not moves:
        raise NoLegalMove("No blank cell left on the board")

    if level == Difficulty.EASY:
        return (rng or random.Random()).choice(moves)

    depth = FAIR_DEPTH if level == Difficulty.FAIR else None
    child_depth = None if depth is None else depth - 1
    other = opponent(player)

    best_score, chosen = -_BOUND, moves[0]
    alpha = -_BOUND
    for move in moves:
        child = with_move(board, move, player)
        if pruning:
            # Later siblings only need to prove they beat the current best.
            score = -_alphabeta(child, other, child_depth, -_BOUND, -alpha, stats)
        else:
            score = -_negamax(child, other, child_depth, stats)
        logger.debug("move=%d score=%d best=%d", move, score, best_score)
        if score > best_score:
            best_score, chosen = score, move
        alpha = max(alpha, best_score)
    return chosen


@dataclass
class MinimaxAI:
    """Computer player that picks its moves with :func:`best_move`.

    ``last_stats`` holds the node count of the most recent search.
    """

    player: Mark = Mark.COMPUTER
    difficulty: Difficulty = Difficulty.IMPOSSIBLE
    pruning: bool = True
    rng: random.Random = field(default_factory=random.Random, repr=False)
    last_stats: SearchStats = field(default_factory=SearchStats, repr=False)

    def __post_init__(self) -> None:
        self.player = ensure_player(self.player)
        self.difficulty = coerce_difficulty(self.difficulty)

    def choose(self, board: Board) -> int:
        stats = SearchStats()
        move = best_move(
            board,
            self.player,
            self.difficulty,
            pruning=self.pruning,
            rng=self.rng,
            stats=stats,
        )
        self.last_stats = stats
        logger.debug(
            "%s (%s) chose cell %d after %d nodes",
            self.player.name,
            self.difficulty.name,
            move,
            stats.nodes,
        )
        return move
