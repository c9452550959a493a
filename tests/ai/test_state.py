"""
Tests for connect4_minimax.ai.state

Covers tree expansion, minimax evaluation and preferred-move selection.
"""

import pytest

from connect4_minimax.ai.state import GameState, Expanded, UNEXPANDED, board_value
from connect4_minimax.game.board import Board, Move
from connect4_minimax.utils import (COLS, Player, InvalidMoveError,
                                    WIN_SCORE, LOSS_SCORE)


def x_state(board: Board, player: Player = Player.ONE) -> GameState:
    """Node with X as the designated side."""
    return GameState(Player.ONE, board, player)


def all_nodes(state: GameState):
    yield state
    for child in state.children.values():
        yield from all_nodes(child)


class TestConstruction:
    """Fresh nodes."""

    def test_new_state_is_unexpanded_and_unevaluated(self, empty_board: Board):
        state = x_state(empty_board)
        assert state.expansion is UNEXPANDED
        assert not state.is_expanded
        assert state.value is None
        assert len(state.children) == 0

    def test_empty_player_rejected(self, empty_board: Board):
        with pytest.raises(ValueError):
            GameState(Player.EMPTY, empty_board, Player.ONE)


class TestExpansion:
    """expand_up_to()."""

    def test_depth_zero_is_noop(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(0)
        assert not state.is_expanded

    def test_depth_zero_does_not_collapse(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(2)
        before = state.node_count()
        state.expand_up_to(0)
        assert state.is_expanded
        assert state.node_count() == before

    def test_negative_depth_raises(self, empty_board: Board):
        with pytest.raises(ValueError):
            x_state(empty_board).expand_up_to(-1)

    def test_one_child_per_legal_move(self):
        board = Board.from_moves([0] * 6)
        state = x_state(board)
        state.expand_up_to(1)

        assert list(state.children) == board.get_possible_moves()
        for move, child in state.children.items():
            assert child.board == board.apply(Player.ONE, move)
            assert child.player == Player.TWO
            assert child.ai == Player.ONE
            assert not child.is_expanded

    def test_children_in_column_order(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(1)
        assert [m.column for m, _ in state.expansion.children] == list(range(COLS))

    def test_depth_bound_is_exact(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(3)

        depths = {depth for depth, _ in state.iter_leaves()}
        assert depths == {3}
        assert sum(1 for _ in state.iter_leaves()) == COLS ** 3
        assert state.node_count() == 1 + COLS + COLS ** 2 + COLS ** 3

    def test_existing_children_are_reused(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(1)
        child = state.get_child(Move(3))

        state.expand_up_to(2)
        assert state.get_child(Move(3)) is child
        assert child.is_expanded
        assert len(child.children) == COLS

    def test_terminal_board_expands_to_no_children(self, drawn_board: Board):
        state = x_state(drawn_board)
        state.expand_up_to(3)
        assert state.is_expanded
        assert state.expansion == Expanded(())
        assert len(state.children) == 0

    def test_expansion_stops_at_won_boards(self, x_wins_next_board: Board):
        state = x_state(x_wins_next_board)
        state.expand_up_to(2)
        winning = state.get_child(Move(3))
        assert winning.is_expanded
        assert len(winning.children) == 0
        assert len(state.get_child(Move(4)).children) == COLS


class TestChildLookup:
    """get_child() preconditions."""

    def test_unexpanded_lookup_raises(self, empty_board: Board):
        with pytest.raises(InvalidMoveError):
            x_state(empty_board).get_child(Move(0))

    def test_lookup_of_full_column_raises(self):
        state = x_state(Board.from_moves([0] * 6))
        state.expand_up_to(1)
        with pytest.raises(InvalidMoveError):
            state.get_child(Move(0))


class TestBoardValue:
    """Static heuristic."""

    def test_empty_board_is_zero(self, empty_board: Board):
        assert board_value(empty_board, Player.ONE) == 0

    def test_centre_bottom_cell_is_on_seven_lines(self):
        board = Board.from_string("...X...")
        assert board_value(board, Player.ONE) == 7
        assert board_value(board, Player.TWO) == -7

    def test_bottom_row_weights(self):
        values = [board_value(Board.from_moves([c]), Player.ONE) for c in range(COLS)]
        assert values == [3, 4, 5, 7, 5, 4, 3]


class TestTerminalScoring:
    """Exact values for won, lost and drawn boards."""

    @pytest.mark.parametrize("depth", [0, 1, 2])
    def test_ai_win_is_max(self, depth: int):
        board = Board.from_moves([0, 1, 0, 1, 0, 1, 0])
        state = GameState(Player.ONE, board, Player.TWO)
        state.expand_up_to(depth)
        assert state.compute_minimax() == WIN_SCORE

    @pytest.mark.parametrize("depth", [0, 1, 2])
    def test_opponent_win_is_min(self, depth: int):
        board = Board.from_moves([0, 1, 0, 1, 0, 1, 0])
        state = GameState(Player.TWO, board, Player.TWO)
        state.expand_up_to(depth)
        assert state.compute_minimax() == LOSS_SCORE

    @pytest.mark.parametrize("depth", [0, 1])
    def test_full_board_is_draw(self, drawn_board: Board, depth: int):
        state = x_state(drawn_board)
        state.expand_up_to(depth)
        assert state.compute_minimax() == 0

    def test_win_beats_full_board(self, full_winning_board: Board):
        assert full_winning_board.is_full()
        assert x_state(full_winning_board).compute_minimax() == WIN_SCORE
        assert GameState(Player.TWO, full_winning_board, Player.ONE).compute_minimax() == LOSS_SCORE


class TestMinimax:
    """compute_minimax() backup."""

    def test_unexpanded_uses_board_value(self):
        board = Board.from_moves([3, 2])
        state = x_state(board)
        assert state.compute_minimax() == board_value(board, Player.ONE)

    def test_max_for_ai_min_for_opponent(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(2)
        state.compute_minimax()

        assert state.value == max(c.value for c in state.children.values())
        for child in state.children.values():
            assert child.player == Player.TWO
            assert child.value == min(g.value for g in child.children.values())

    def test_opponent_root_minimizes(self, empty_board: Board):
        state = x_state(empty_board, Player.TWO)
        state.expand_up_to(1)
        assert state.compute_minimax() == -7

    def test_every_node_is_evaluated(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(2)
        state.compute_minimax()
        assert all(node.value is not None for node in all_nodes(state))

    def test_idempotent(self):
        state = x_state(Board.from_moves([3, 3, 2]), Player.TWO)
        state.expand_up_to(3)
        state.compute_minimax()
        first = [node.value for node in all_nodes(state)]
        state.compute_minimax()
        assert [node.value for node in all_nodes(state)] == first

    def test_reevaluation_after_deeper_expansion(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(1)
        assert state.compute_minimax() == 7
        state.expand_up_to(2)
        assert state.compute_minimax() == max(c.compute_minimax() for c in state.children.values())


class TestPreferredMove:
    """get_preferred_move()."""

    def test_empty_board_prefers_centre(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(1)

        assert state.get_preferred_move() == Move(3)
        values = [state.get_child(Move(c)).value for c in range(COLS)]
        centre = values[3]
        assert all(v < centre for i, v in enumerate(values) if i != 3)
        assert values == values[::-1]

    def test_takes_immediate_win(self, x_wins_next_board: Board):
        state = x_state(x_wins_next_board)
        state.expand_up_to(1)
        assert state.get_preferred_move() == Move(3)
        assert state.value == WIN_SCORE

    def test_blocks_immediate_loss(self, x_must_block_board: Board):
        state = x_state(x_must_block_board)
        state.expand_up_to(2)
        assert state.get_preferred_move() == Move(3)
        assert state.value > LOSS_SCORE
        assert state.get_child(Move(0)).value == LOSS_SCORE

    def test_ties_go_to_leftmost_column(self, x_two_wins_board: Board):
        state = x_state(x_two_wins_board)
        state.expand_up_to(1)
        assert state.get_preferred_move() == Move(0)
        assert state.get_child(Move(0)).value == WIN_SCORE
        assert state.get_child(Move(4)).value == WIN_SCORE

    def test_recomputes_stale_values(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(1)
        state.compute_minimax()
        state.expand_up_to(2)
        # values are stale until the preferred move is asked for
        move = state.get_preferred_move()
        assert state.get_child(move).value == state.value

    def test_unexpanded_falls_back_to_first_move(self):
        state = x_state(Board.from_moves([0] * 6))
        assert state.get_preferred_move() == Move(1)
        assert state.value is None

    def test_no_moves_raises(self, drawn_board: Board):
        state = x_state(drawn_board)
        state.expand_up_to(1)
        with pytest.raises(InvalidMoveError):
            state.get_preferred_move()


class TestTreeDump:
    """Diagnostic string form."""

    def test_dump_lists_children_indented(self, empty_board: Board):
        state = x_state(empty_board)
        state.expand_up_to(1)
        state.compute_minimax()
        text = str(state)

        assert text.startswith("AI will play next on the board below as X")
        assert "Value: 7" in text
        assert "Children at depth 1:" in text
        assert text.count("   Opponent will play next") == COLS

    def test_unexpanded_dump_has_no_children(self, empty_board: Board):
        assert "Children" not in str(x_state(empty_board))
