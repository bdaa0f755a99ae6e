"""Board model for 3x3 tic-tac-toe: cells, winning lines and outcomes."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Tuple

from .errors import InvalidMove, InvalidPlayer


class Mark(IntEnum):
    """Cell contents. The two players are additive inverses of each other."""

    HUMAN = -1
    BLANK = 0
    COMPUTER = 1


class Outcome(str, Enum):
    IN_PROGRESS = "in_progress"
    HUMAN_WIN = "human_win"
    COMPUTER_WIN = "computer_win"
    DRAW = "draw"


Board = Tuple[Mark, ...]

BOARD_SIZE = 9

# Rows, then columns, then diagonals.
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

PLAYERS: Tuple[Mark, Mark] = (Mark.HUMAN, Mark.COMPUTER)

# Text form used by the web UI.
SYMBOLS = {Mark.HUMAN: "X", Mark.COMPUTER: "O", Mark.BLANK: ""}
_PARSE = {"X": Mark.HUMAN, "O": Mark.COMPUTER, "": Mark.BLANK, " ": Mark.BLANK, ".": Mark.BLANK}


def empty_board() -> Board:
    return (Mark.BLANK,) * BOARD_SIZE


def _check_index(index: int) -> None:
    if not 0 <= index < BOARD_SIZE:
        raise InvalidMove(f"Cell index {index} is outside the board")


def is_blank(board: Board, index: int) -> bool:
    _check_index(index)
    return board[index] == Mark.BLANK


def is_full(board: Board) -> bool:
    return all(cell != Mark.BLANK for cell in board)


def available_moves(board: Board) -> List[int]:
    """Blank cell indices in ascending order."""
    return [i for i, cell in enumerate(board) if cell == Mark.BLANK]


def winner(board: Board) -> Optional[Mark]:
    """Return the owner of the first fully occupied winning line, if any."""
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != Mark.BLANK and v == board[b] == board[c]:
            return Mark(v)
    return None


def is_draw(board: Board) -> bool:
    return is_full(board) and winner(board) is None


def outcome(board: Board) -> Outcome:
    w = winner(board)
    if w == Mark.HUMAN:
        return Outcome.HUMAN_WIN
    if w == Mark.COMPUTER:
        return Outcome.COMPUTER_WIN
    if is_full(board):
        return Outcome.DRAW
    return Outcome.IN_PROGRESS


def ensure_player(player: int) -> Mark:
    """Validate ``player`` as one of the two players and return it as a Mark."""
    if isinstance(player, bool) or player not in PLAYERS:
        raise InvalidPlayer(f"{player!r} is not a player")
    return Mark(player)


def opponent(player: int) -> Mark:
    return Mark(-ensure_player(player))


def with_move(board: Board, index: int, player: int) -> Board:
    """Return a copy of ``board`` with ``player`` placed at ``index``."""
    mark = ensure_player(player)
    if not is_blank(board, index):
        raise InvalidMove(f"Cell {index} is already occupied")
    cells = list(board)
    cells[index] = mark
    return tuple(cells)


def parse_board(cells: Iterable[str]) -> Board:
    """Build a board from its text form ("X" human, "O" computer, blank otherwise)."""
    values = list(cells)
    if len(values) != BOARD_SIZE:
        raise ValueError(f"A board needs {BOARD_SIZE} cells, got {len(values)}")
    try:
        return tuple(_PARSE[v.upper()] for v in values)
    except KeyError as exc:
        raise ValueError(f"Unknown cell value {exc.args[0]!r}") from exc


def format_board(board: Board) -> str:
    rows = []
    for r in range(3):
        row = board[r * 3 : r * 3 + 3]
        rows.append("|".join(SYMBOLS[Mark(c)] or " " for c in row))
    return "\n".join(rows)
