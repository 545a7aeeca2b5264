"""
board.py - Board representation and core game mechanics for Connect Four

This module implements the Board class which owns the 6x7 grid and provides
column legality checks, gravity placement, win detection for the most recently
placed piece, and the "immediate winning moves" scan used by the simulator.
"""

import numpy as np
from typing import Iterable, Iterator, List, Optional, Tuple, TYPE_CHECKING

from connect4sim.debug import debug
from connect4sim.utils import (ROWS, COLS, CONNECT_N, WIN_AXES, Player, Position,
                               is_valid_position, render_board_ascii, render_board_emoji)

if TYPE_CHECKING:
    from connect4sim.game.simulator import MoveRecord


class Board:
    """
    Represents a Connect Four game board.

    Cells hold ``Player.EMPTY.value`` or a player's value. A cell, once
    occupied, is never cleared: the only mutation is ``place``.
    """

    def __init__(self):
        """Initialize an empty Connect Four board."""
        debug.trace("Initializing new Board", "board")
        self.grid = np.zeros((ROWS, COLS), dtype=np.int8)

    def copy(self) -> 'Board':
        """
        Create a value copy of the current board.

        Returns:
            A new Board instance with the same grid
        """
        new_board = Board.__new__(Board)
        new_board.grid = self.grid.copy()
        return new_board

    @staticmethod
    def _check_column(column: int) -> None:
        if not (0 <= column < COLS):
            raise IndexError(f"column {column} out of range [0, {COLS})")

    def can_play(self, column: int) -> bool:
        """
        Check if a piece can be dropped into a column.

        Args:
            column: The column to check (0-indexed, must be in [0, 7))

        Returns:
            True if the top cell of the column is empty
        """
        self._check_column(column)
        return self.grid[0, column] == Player.EMPTY.value

    def playable_columns(self) -> List[int]:
        """Columns that still have room, in ascending order."""
        return [col for col in range(COLS) if self.can_play(col)]

    def place(self, column: int, player: Player) -> Optional[Position]:
        """
        Drop a piece for ``player`` into ``column``.

        Args:
            column: The column to place a piece (0-indexed)
            player: The player owning the piece

        Returns:
            The (row, column) the piece landed on, or None if the column is full
        """
        if not self.can_play(column):
            debug.debug(f"Column {column} is full", "board")
            return None

        # Find the lowest empty row in the column
        for row in range(ROWS - 1, -1, -1):
            if self.grid[row, column] == Player.EMPTY.value:
                self.grid[row, column] = player.value
                return row, column

        return None

    def _run_length(self, row: int, col: int, dr: int, dc: int, value: int) -> int:
        """Count same-valued cells starting one step from (row, col) along (dr, dc)."""
        count = 0
        r, c = row + dr, col + dc
        while is_valid_position(r, c) and self.grid[r, c] == value:
            count += 1
            r += dr
            c += dc
        return count

    def is_winning_move(self, row: int, column: int, player: Player) -> bool:
        """
        Check if the piece just placed at (row, column) wins for ``player``.

        Only meaningful for the most recently placed piece: the vertical axis
        is scanned downward from the placed cell and never upward.

        Args:
            row: Row index where the piece landed
            column: Column index where the piece landed
            player: The player who placed it

        Returns:
            True if any axis holds CONNECT_N or more of the player's pieces
        """
        self._check_column(column)
        if not (0 <= row < ROWS):
            raise IndexError(f"row {row} out of range [0, {ROWS})")

        value = player.value
        for (dr, dc), both_ways in WIN_AXES.values():
            count = 1  # Start with 1 for the piece just placed
            count += self._run_length(row, column, dr, dc, value)
            if both_ways:
                count += self._run_length(row, column, -dr, -dc, value)

            if count >= CONNECT_N:
                return True

        return False

    def immediate_wins(self, player: Player) -> Tuple[bool, List[Position]]:
        """
        Find every landing position that would win for ``player`` this turn.

        Each playable column is tried on a throwaway copy of the board, so the
        receiver is never modified.

        Args:
            player: The player about to move

        Returns:
            (has_immediate_win, positions) with positions in ascending column order
        """
        positions = []
        for col in self.playable_columns():
            temp = self.copy()
            landing = temp.place(col, player)
            if landing is not None and temp.is_winning_move(landing[0], landing[1], player):
                positions.append(landing)

        return bool(positions), positions

    @classmethod
    def replay_states(cls, moves: Iterable['MoveRecord']) -> Iterator[Tuple[int, 'MoveRecord', 'Board']]:
        """
        Re-play recorded moves onto a fresh board.

        Yields (index, record, board) after each move. The yielded board is the
        live replay board; copy it if it has to outlive the iteration step.
        Wins are not re-derived: the recorded sequence is trusted as-is.
        """
        board = cls()
        for index, record in enumerate(moves):
            if board.place(record.column, record.player) is None:
                debug.warning(f"Replay move #{index} into full column {record.column} ignored", "board")
            yield index, record, board

    @classmethod
    def replay(cls, moves: Iterable['MoveRecord']) -> 'Board':
        """Reconstruct the board after the whole move sequence."""
        board = cls()
        for _, _, board in cls.replay_states(moves):
            pass
        return board

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.grid, other.grid)

    __hash__ = None

    def render(self) -> str:
        """
        Render the board as a string.

        Returns:
            String representation of the board
        """
        return render_board_ascii(self.grid)

    def render_emoji(self) -> str:
        return render_board_emoji(self.grid)

    def __str__(self) -> str:
        """String representation of the board."""
        return self.render()
