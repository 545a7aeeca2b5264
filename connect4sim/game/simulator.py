"""
simulator.py - Random match simulation for Connect Four

This module drives one full match between two uniformly random players and
records, for every turn, the chosen column together with the winning moves the
mover had available before moving.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple

import numpy as np

from connect4sim.debug import debug
from connect4sim.game.board import Board
from connect4sim.utils import MAX_TURNS, Player, Position


class SimulationInvariantError(RuntimeError):
    """Raised when the simulator's own bookkeeping is inconsistent."""


class MatchState(Enum):
    """Enumeration representing the simulator's state."""
    IN_PROGRESS = auto()
    WON = auto()
    EXHAUSTED = auto()  # Board full, no winner

    def is_terminal(self) -> bool:
        return self != MatchState.IN_PROGRESS


@dataclass(frozen=True)
class MoveRecord:
    """One turn of a match."""
    column: int
    player: Player
    has_immediate_win: bool
    immediate_win_positions: Tuple[Position, ...] = ()

    @property
    def missed_immediate_win(self) -> bool:
        """True when a winning column existed and a different one was chosen."""
        if not self.has_immediate_win or not self.immediate_win_positions:
            return False
        return all(col != self.column for _, col in self.immediate_win_positions)

    def without_positions(self) -> 'MoveRecord':
        return MoveRecord(self.column, self.player, self.has_immediate_win)


@dataclass(frozen=True)
class Match:
    """A simulated match: 1-based identifier plus its ordered moves."""
    match_id: int
    moves: Tuple[MoveRecord, ...]

    def __len__(self) -> int:
        return len(self.moves)

    def without_positions(self) -> 'Match':
        return Match(self.match_id, tuple(m.without_positions() for m in self.moves))


class MatchSimulator:
    """
    Plays one match of random moves on a private board.

    The random source only needs ``integers(low, high)`` returning a uniform
    integer in [low, high), as ``numpy.random.Generator`` does.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.board = Board()
        self.moves: List[MoveRecord] = []
        self.current_player = Player.YELLOW
        self.state = MatchState.IN_PROGRESS
        self.winner: Optional[Player] = None

    def step(self) -> MatchState:
        """
        Play a single turn.

        Returns:
            The state after the turn
        """
        if self.state.is_terminal():
            return self.state

        player = self.current_player
        has_immediate_win, positions = self.board.immediate_wins(player)

        valid_cols = self.board.playable_columns()
        if not valid_cols:
            debug.debug(f"Board full after {len(self.moves)} moves", "sim")
            self.state = MatchState.EXHAUSTED
            return self.state

        col = valid_cols[int(self.rng.integers(0, len(valid_cols)))]

        landing = self.board.place(col, player)
        if landing is None:
            debug.error(f"Column {col} reported playable but placement failed", "sim")
            raise SimulationInvariantError(f"placement into playable column {col} failed")

        self.moves.append(MoveRecord(col, player, has_immediate_win, tuple(positions)))

        if self.board.is_winning_move(landing[0], landing[1], player):
            debug.debug(f"{player.tag} wins on move {len(self.moves)}", "sim")
            self.state = MatchState.WON
            self.winner = player
            return self.state

        self.current_player = player.other()
        return self.state

    def run(self) -> List[MoveRecord]:
        """Play until the match is won or the board is exhausted."""
        # One extra step is needed to observe a full board
        for _ in range(MAX_TURNS + 1):
            if self.step().is_terminal():
                return self.moves

        raise SimulationInvariantError(f"match did not terminate within {MAX_TURNS} turns")


def simulate_match(rng: Optional[np.random.Generator] = None) -> List[MoveRecord]:
    """
    Simulate one random match.

    Args:
        rng: Random source owned by this match (a fresh unseeded one if omitted)

    Returns:
        The ordered move records of the match
    """
    return MatchSimulator(rng).run()
