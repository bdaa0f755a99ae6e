"""Per-match state for a human playing the computer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import logging
import random

from .ai import Difficulty, MinimaxAI, coerce_difficulty
from .errors import InvalidMove
from .game import Board, Mark, Outcome, empty_board, ensure_player, opponent, outcome, with_move

logger = logging.getLogger(__name__)


class MatchObserver:
    """Receives match results. Every hook is a no-op unless overridden.

    Hooks run synchronously, after the session state has been updated, and
    at most once per finished match.
    """

    def on_win(self, player: Mark) -> None:
        pass

    def on_draw(self) -> None:
        pass

    def on_score(self, human_wins: int, computer_wins: int) -> None:
        pass


@dataclass
class CallbackObserver(MatchObserver):
    """Observer built from optional plain callables."""

    win: Optional[Callable[[Mark], None]] = None
    draw: Optional[Callable[[], None]] = None
    score: Optional[Callable[[int, int], None]] = None

    def on_win(self, player: Mark) -> None:
        if self.win is not None:
            self.win(player)

    def on_draw(self) -> None:
        if self.draw is not None:
            self.draw()

    def on_score(self, human_wins: int, computer_wins: int) -> None:
        if self.score is not None:
            self.score(human_wins, computer_wins)


@dataclass
class MatchSession:
    """Board, turn, score and difficulty for one human vs computer series.

    Sessions share nothing, so any number of them can run side by side. The
    winner of a match starts the next one; after a draw the last mover does.
    """

    difficulty: Difficulty = Difficulty.IMPOSSIBLE
    first_player: Mark = Mark.HUMAN
    observer: MatchObserver = field(default_factory=MatchObserver)
    rng: random.Random = field(default_factory=random.Random, repr=False)
    board: Board = field(default_factory=empty_board, init=False)
    current_player: Mark = field(default=Mark.HUMAN, init=False)
    human_wins: int = field(default=0, init=False)
    computer_wins: int = field(default=0, init=False)
    move_log: List[Dict[str, int]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.difficulty = coerce_difficulty(self.difficulty)
        self.first_player = ensure_player(self.first_player)
        self._ai = MinimaxAI(
            player=Mark.COMPUTER, difficulty=self.difficulty, rng=self.rng
        )
        self.current_player = self.first_player

    # ---- derived state ----

    @property
    def outcome(self) -> Outcome:
        return outcome(self.board)

    @property
    def finished(self) -> bool:
        return self.outcome != Outcome.IN_PROGRESS

    @property
    def computer_to_move(self) -> bool:
        return not self.finished and self.current_player == Mark.COMPUTER

    # ---- moves ----

    def play_human(self, index: int) -> None:
        self._play(Mark.HUMAN, index)

    def play_computer(self) -> int:
        if self.finished:
            raise InvalidMove("Match already finished")
        if self.current_player != Mark.COMPUTER:
            raise InvalidMove("It is not the computer's turn")
        move = self._ai.choose(self.board)
        self._play(Mark.COMPUTER, move)
        return move

    def _play(self, player: Mark, index: int) -> None:
        if self.finished:
            raise InvalidMove("Match already finished")
        if self.current_player != player:
            raise InvalidMove(f"It is not the {player.name.lower()}'s turn")
        self.board = with_move(self.board, index, player)
        self.move_log.append({"player": int(player), "cell": index})
        self._conclude(player)

    def _conclude(self, mover: Mark) -> None:
        result = self.outcome
        if result == Outcome.IN_PROGRESS:
            self.current_player = opponent(mover)
            return

        # The next match opens with whoever made the final move.
        self.first_player = mover
        if result == Outcome.DRAW:
            logger.info("Draw")
            self.observer.on_draw()
            return

        if mover == Mark.HUMAN:
            self.human_wins += 1
        else:
            self.computer_wins += 1
        logger.info("Player %s wins", mover.name.capitalize())
        self.observer.on_win(mover)
        self.observer.on_score(self.human_wins, self.computer_wins)

    # ---- match control ----

    def new_match(self) -> None:
        self.board = empty_board()
        self.move_log = []
        self.current_player = self.first_player

    def set_difficulty(self, difficulty: int) -> None:
        """Switch difficulty, clearing the score and handing the human the first move."""
        level = coerce_difficulty(difficulty)
        self.difficulty = level
        self._ai.difficulty = level
        self.human_wins = 0
        self.computer_wins = 0
        self.first_player = Mark.HUMAN
        self.observer.on_score(self.human_wins, self.computer_wins)
        self.new_match()
