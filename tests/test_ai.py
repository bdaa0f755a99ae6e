"""Tests for the negamax / alpha-beta move search."""

import random

import pytest

from xoengine.ai import Difficulty, MinimaxAI, SearchStats, best_move, value
from xoengine.errors import InvalidPlayer, NoLegalMove, UnsupportedDifficulty
from xoengine.game import (
    PLAYERS,
    Mark,
    available_moves,
    empty_board,
    is_full,
    opponent,
    parse_board,
    winner,
    with_move,
)

H, C = Mark.HUMAN, Mark.COMPUTER


def _sample_positions(count, seed=7):
    """Distinct unfinished positions reached by random play, with the side to move."""
    rng = random.Random(seed)
    seen = set()
    positions = []
    while len(positions) < count:
        board = empty_board()
        player = rng.choice(PLAYERS)
        for _ in range(rng.randint(2, 6)):
            board = with_move(board, rng.choice(available_moves(board)), player)
            player = opponent(player)
            if winner(board) is not None:
                break
        if winner(board) is None and board not in seen:
            seen.add(board)
            positions.append((board, player))
    return positions


def test_takes_immediate_win():
    board = parse_board(["O", "O", "", "X", "X", "", "", "", ""])
    assert best_move(board, C) == 2


def test_blocks_forced_loss():
    board = parse_board(["X", "O", "X", "O", "X", "O", "", "", "O"])
    assert best_move(board, C) == 6


def test_human_as_mover_takes_win():
    board = parse_board(["", "", "", "X", "X", "", "O", "O", ""])
    assert best_move(board, H) == 5


def test_full_board_has_no_legal_move():
    board = parse_board(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
    assert is_full(board)
    with pytest.raises(NoLegalMove):
        best_move(board, C)


def test_unknown_difficulty_is_rejected():
    with pytest.raises(UnsupportedDifficulty):
        best_move(empty_board(), C, 3)


def test_blank_is_not_a_mover():
    with pytest.raises(InvalidPlayer):
        best_move(empty_board(), Mark.BLANK)


def test_terminal_values():
    won = parse_board(["O", "O", "O", "X", "X", "", "", "", ""])
    assert value(won, H) == -1
    assert value(won, C) == 1
    drawn = parse_board(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
    assert value(drawn, H) == 0


def test_self_play_ends_in_draw():
    board = empty_board()
    player = C
    while winner(board) is None and not is_full(board):
        board = with_move(board, best_move(board, player), player)
        player = opponent(player)
    assert winner(board) is None


def _assert_computer_never_loses(board, to_move):
    w = winner(board)
    assert w != H, f"computer lost on\n{board}"
    if w is not None or is_full(board):
        return
    if to_move == C:
        move = best_move(board, C)
        _assert_computer_never_loses(with_move(board, move, C), H)
    else:
        for move in available_moves(board):
            _assert_computer_never_loses(with_move(board, move, H), C)


@pytest.mark.parametrize("first", [H, C])
def test_impossible_never_loses_to_any_human_line(first):
    _assert_computer_never_loses(empty_board(), first)


def test_chosen_move_keeps_position_value():
    for board, player in _sample_positions(40, seed=11):
        move = best_move(board, player)
        expected = value(board, player, pruning=False)
        assert -value(with_move(board, move, player), opponent(player)) == expected


def test_pruned_and_unpruned_agree():
    positions = _sample_positions(25)
    assert len(positions) >= 20
    for board, player in positions:
        pruned = best_move(board, player, pruning=True)
        plain = best_move(board, player, pruning=False)
        assert pruned == plain
        assert value(board, player, pruning=True) == value(board, player, pruning=False)


def test_pruning_visits_fewer_nodes():
    board = with_move(with_move(empty_board(), 4, H), 0, C)
    pruned, plain = SearchStats(), SearchStats()
    assert best_move(board, H, stats=pruned) == best_move(
        board, H, pruning=False, stats=plain
    )
    assert 0 < pruned.nodes < plain.nodes


def test_easy_plays_a_legal_move_reproducibly():
    board = parse_board(["X", "", "O", "", "X", "", "", "", ""])
    first = best_move(board, C, Difficulty.EASY, rng=random.Random(3))
    again = best_move(board, C, Difficulty.EASY, rng=random.Random(3))
    assert first == again
    assert first in available_moves(board)


def test_fair_takes_wins_and_blocks():
    win = parse_board(["X", "X", "", "O", "O", "", "", "", ""])
    assert best_move(win, C, Difficulty.FAIR) == 5
    block = parse_board(["", "O", "", "X", "X", "", "", "", ""])
    assert best_move(block, C, Difficulty.FAIR) == 5


def test_fair_search_is_shallower():
    board = with_move(empty_board(), 0, H)
    fair, full = SearchStats(), SearchStats()
    best_move(board, C, Difficulty.FAIR, stats=fair)
    best_move(board, C, Difficulty.IMPOSSIBLE, stats=full)
    assert fair.nodes < full.nodes


def test_minimax_ai_records_stats():
    ai = MinimaxAI()
    board = parse_board(["O", "O", "", "X", "X", "", "", "", ""])
    assert ai.choose(board) == 2
    assert ai.last_stats.nodes > 0


def test_minimax_ai_rejects_bad_configuration():
    with pytest.raises(InvalidPlayer):
        MinimaxAI(player=Mark.BLANK)
    with pytest.raises(UnsupportedDifficulty):
        MinimaxAI(difficulty=7)
