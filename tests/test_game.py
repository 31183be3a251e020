"""Unit tests for Tic-Tac-Toe game logic."""

import itertools

import pytest

from tictactoe.game import (
    EMPTY_BOARD,
    WINNING_LINES,
    GameState,
    Mark,
    apply_move,
    detect_winner,
    history_labels,
    initial_state,
    is_draw,
    jump_to,
    status_text,
    winning_line,
)

X, O, _ = Mark.X, Mark.O, None


def play(*cells: int) -> GameState:
    state = initial_state()
    for cell in cells:
        state = apply_move(state, cell)
    return state


def test_initial_state():
    state = initial_state()
    assert state.history == (EMPTY_BOARD,)
    assert state.current_step == 0
    assert state.x_is_next is True
    assert state.current == EMPTY_BOARD
    assert status_text(state) == "Next player: X"


def test_empty_board_has_no_winner():
    assert detect_winner(EMPTY_BOARD) is None


def test_boards_without_triple_have_no_winner():
    boards = [
        (X, O, X, X, O, O, O, X, X),
        (X, X, O, O, O, X, X, _, _),
        (X, _, _, _, O, _, _, _, X),
    ]
    for board in boards:
        assert detect_winner(board) is None


def test_detect_winner_matches_uniform_triples_on_every_board():
    for board in itertools.product((_, X, O), repeat=9):
        uniform = {
            board[a]
            for a, b, c in WINNING_LINES
            if board[a] is not None and board[a] == board[b] == board[c]
        }
        if uniform:
            assert detect_winner(board) in uniform
        else:
            assert detect_winner(board) is None


@pytest.mark.parametrize("line", WINNING_LINES)
@pytest.mark.parametrize("mark", [X, O])
@pytest.mark.parametrize(
    "filler",
    ["______", "mmmmmm", "o_o___", "m_m_m_", "momo_m", "_mo_om"],
)
def test_every_winning_line_detected(line, mark, filler):
    other = mark.other
    symbols = {"m": mark, "o": other, "_": _}
    board = [_] * 9
    # At most two opposing marks, so only ``mark`` can own a line
    for i, symbol in zip([i for i in range(9) if i not in line], filler):
        board[i] = symbols[symbol]
    for i in line:
        board[i] = mark
    assert detect_winner(board) is mark
    found = winning_line(board)
    assert all(board[i] is mark for i in found)
    if filler == "______":
        assert found == line


def test_multiple_lines_returns_first_in_order():
    board = (O, O, O, X, X, X, _, _, _)
    assert detect_winner(board) is O
    assert winning_line(board) == (0, 1, 2)


def test_detect_winner_rejects_wrong_board_size():
    with pytest.raises(ValueError):
        detect_winner([X, X, X])


def test_accepted_move_appends_history_and_flips_turn():
    state = initial_state()
    after = apply_move(state, 4)
    assert len(after.history) == len(state.history) + 1
    assert after.x_is_next is False
    assert after.current_step == 1
    assert after.current[4] is X
    # Original snapshot is untouched
    assert state.history == (EMPTY_BOARD,)
    assert state.x_is_next is True


def test_history_entries_differ_by_one_cell():
    state = play(0, 1, 4, 2)
    for prev, nxt in zip(state.history, state.history[1:]):
        changed = [i for i in range(9) if prev[i] != nxt[i]]
        assert len(changed) == 1
        assert prev[changed[0]] is None


def test_move_on_occupied_cell_is_noop():
    state = play(0)
    after = apply_move(state, 0)
    assert after == state
    assert after.x_is_next is False


def test_move_out_of_range_is_noop():
    state = play(0)
    assert apply_move(state, 9) == state
    assert apply_move(state, -1) == state


def test_jump_to_selects_past_board():
    state = play(0, 1, 4)
    for k in range(len(state.history)):
        jumped = jump_to(state, k)
        assert jumped.current == state.history[k]
        assert jumped.x_is_next == (k % 2 == 0)
        assert jumped.history == state.history


def test_jump_to_out_of_range_raises():
    state = play(0, 1)
    with pytest.raises(ValueError):
        jump_to(state, 3)
    with pytest.raises(ValueError):
        jump_to(state, -1)


def test_move_after_jump_truncates_future():
    state = play(0, 1, 4, 2)
    jumped = jump_to(state, 1)
    after = apply_move(jumped, 8)
    assert len(after.history) == 1 + 2
    assert after.current_step == 2
    assert after.current == (X, _, _, _, _, _, _, _, O)
    assert after.x_is_next is True


def test_diagonal_win_ends_game():
    state = play(0, 1, 4, 2, 8)
    assert detect_winner(state.current) is X
    assert status_text(state) == "Winner: X"
    assert apply_move(state, 3) == state
    assert apply_move(state, 5) == state


def test_row_win():
    state = play(0, 3, 1, 4, 2)
    assert detect_winner(state.current) is X
    assert winning_line(state.current) == (0, 1, 2)


def test_draw_game():
    # X,O,X / X,O,O / O,X,X
    state = play(0, 1, 2, 4, 3, 5, 7, 6, 8)
    assert state.current == (X, O, X, X, O, O, O, X, X)
    assert detect_winner(state.current) is None
    assert all(c is not None for c in state.current)
    assert is_draw(state.current)
    assert status_text(state) == "Next player: O"
    for cell in range(9):
        assert apply_move(state, cell) == state


def test_jump_back_from_won_game_allows_moves():
    state = play(0, 1, 4, 2, 8)
    rewound = jump_to(state, 4)
    assert rewound.winner is None
    assert status_text(rewound) == "Next player: X"
    after = apply_move(rewound, 6)
    assert len(after.history) == 6
    assert after.winner is None


def test_history_labels():
    state = play(0, 1)
    assert history_labels(state) == [
        "Go to game start",
        "Go to move #1",
        "Go to move #2",
    ]


def test_state_rejects_turn_out_of_step_with_history():
    with pytest.raises(ValueError):
        GameState(history=(EMPTY_BOARD,), current_step=0, x_is_next=False)
    state = play(0)
    with pytest.raises(ValueError):
        GameState(history=state.history, current_step=1, x_is_next=True)


def test_state_rejects_nonempty_first_board():
    with pytest.raises(ValueError):
        GameState(history=((X,) + (_,) * 8,))


def test_state_rejects_step_outside_history():
    with pytest.raises(ValueError):
        GameState(current_step=1, x_is_next=False)
    with pytest.raises(ValueError):
        GameState(history=())


def test_state_accepts_consistent_snapshot():
    state = play(0, 1)
    rebuilt = GameState(history=state.history, current_step=2, x_is_next=True)
    assert rebuilt == state
    assert apply_move(rebuilt, 4).current[4] is X
