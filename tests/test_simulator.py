import unittest
import sys
import os

import numpy as np

# Allow direct imports from the project root
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
sys.path.insert(0, project_root)

from connect4sim.game.board import Board
from connect4sim.game.simulator import (MatchSimulator, MatchState, MoveRecord,
                                        SimulationInvariantError, simulate_match)
from connect4sim.utils import ROWS, COLS, MAX_TURNS, Player

Y = Player.YELLOW
R = Player.RED

# Fills the board with no four-in-a-row anywhere: rows alternate
# "YYRRYYR" and "RRYYRRY" from the bottom up.
DRAW_COLUMNS = [0, 2, 1, 3, 4, 6, 5] * ROWS


class ScriptedRng:
    """Random source that picks predetermined columns."""

    def __init__(self, columns):
        self.columns = list(columns)
        self.heights = [0] * COLS

    def integers(self, low, high):
        col = self.columns.pop(0)
        playable = [c for c in range(COLS) if self.heights[c] < ROWS]
        assert len(playable) == high, "simulator offered unexpected columns"
        self.heights[col] += 1
        return playable.index(col)


class BrokenBoard(Board):
    def place(self, column, player):
        return None


class TestScriptedMatches(unittest.TestCase):

    def test_vertical_win_ends_match(self):
        sim = MatchSimulator(ScriptedRng([0, 1, 0, 1, 0, 1, 0]))
        moves = sim.run()

        self.assertEqual(sim.state, MatchState.WON)
        self.assertEqual(sim.winner, Y)
        self.assertEqual(len(moves), 7)
        self.assertEqual([m.player for m in moves], [Y, R, Y, R, Y, R, Y])
        self.assertEqual([m.column for m in moves], [0, 1, 0, 1, 0, 1, 0])

        # Only the final turn had a winning option, and it was taken
        self.assertEqual([m.has_immediate_win for m in moves], [False] * 6 + [True])
        self.assertEqual(moves[-1].immediate_win_positions, ((2, 0),))
        self.assertFalse(moves[-1].missed_immediate_win)

    def test_missed_win_is_recorded(self):
        sim = MatchSimulator(ScriptedRng([0, 1, 0, 1, 0, 1, 6, 1]))
        moves = sim.run()

        self.assertEqual(sim.winner, R)
        self.assertEqual(len(moves), 8)
        missed = moves[6]
        self.assertEqual(missed, MoveRecord(6, Y, True, ((2, 0),)))
        self.assertTrue(missed.missed_immediate_win)
        self.assertEqual(moves[7].immediate_win_positions, ((2, 1),))

    def test_full_board_is_exhausted(self):
        sim = MatchSimulator(ScriptedRng(DRAW_COLUMNS))
        moves = sim.run()

        self.assertEqual(sim.state, MatchState.EXHAUSTED)
        self.assertIsNone(sim.winner)
        self.assertEqual(len(moves), MAX_TURNS)
        self.assertEqual(sim.board.playable_columns(), [])

    def test_step_after_terminal_state_is_a_no_op(self):
        sim = MatchSimulator(ScriptedRng([0, 1, 0, 1, 0, 1, 0]))
        sim.run()
        self.assertEqual(sim.step(), MatchState.WON)
        self.assertEqual(len(sim.moves), 7)

    def test_failed_placement_is_fatal(self):
        sim = MatchSimulator(np.random.default_rng(0))
        sim.board = BrokenBoard()
        with self.assertRaises(SimulationInvariantError):
            sim.run()


class TestRandomMatches(unittest.TestCase):

    def test_matches_terminate_consistently(self):
        for seed in range(200):
            moves = simulate_match(np.random.default_rng(seed))
            self.assertTrue(1 <= len(moves) <= MAX_TURNS)

            # Players alternate starting with yellow
            for i, move in enumerate(moves):
                self.assertEqual(move.player, Y if i % 2 == 0 else R)

            board = Board.replay(moves[:-1])
            last = moves[-1]
            landing = board.place(last.column, last.player)
            won = board.is_winning_move(landing[0], landing[1], last.player)

            if won:
                self.assertTrue(last.has_immediate_win)
                self.assertIn(landing, last.immediate_win_positions)
            else:
                self.assertEqual(len(moves), MAX_TURNS)
                self.assertEqual(board.playable_columns(), [])

            # No earlier move ended the match
            replay = Board()
            for move in moves[:-1]:
                row, col = replay.place(move.column, move.player)
                self.assertFalse(replay.is_winning_move(row, col, move.player))

    def test_recorded_positions_match_board_analysis(self):
        moves = simulate_match(np.random.default_rng(42))
        board = Board()
        for move in moves:
            has_win, positions = board.immediate_wins(move.player)
            self.assertEqual(move.has_immediate_win, has_win)
            self.assertEqual(list(move.immediate_win_positions), positions)
            board.place(move.column, move.player)

    def test_same_seed_same_match(self):
        first = simulate_match(np.random.default_rng(1234))
        second = simulate_match(np.random.default_rng(1234))
        self.assertEqual(first, second)

    def test_records_are_immutable(self):
        move = simulate_match(np.random.default_rng(3))[0]
        with self.assertRaises(AttributeError):
            move.column = 5


if __name__ == '__main__':
    unittest.main()
