"""
utils.py - Constants, enumerations and helper functions for the match simulator

This module provides the board dimensions, the Player tag, the win-scan axes
and the text renderers used throughout the simulator.
"""

from enum import Enum, auto
from typing import Tuple
import numpy as np

# Game constants
ROWS = 6
COLS = 7
CONNECT_N = 4  # Number of pieces in a row to win
MAX_TURNS = ROWS * COLS

Position = Tuple[int, int]  # (row, col)


class Player(Enum):
    """Enumeration representing players and cell states."""
    EMPTY = 0
    YELLOW = 1    # First player
    RED = 2       # Second player

    def other(self) -> 'Player':
        """Get the other player."""
        if self == Player.YELLOW:
            return Player.RED
        elif self == Player.RED:
            return Player.YELLOW
        return Player.EMPTY

    @property
    def tag(self) -> str:
        """Name used in serialized corpora ("Yellow" / "Red")."""
        return self.name.capitalize()

    @classmethod
    def from_tag(cls, tag: str) -> 'Player':
        player = cls[tag.upper()]
        if player == cls.EMPTY:
            raise ValueError("EMPTY is not a player tag")
        return player

    def __str__(self):
        if self == Player.EMPTY:
            return " "
        elif self == Player.YELLOW:
            return "Y"
        else:
            return "R"


class Direction(Enum):
    """Enumeration representing the axes scanned for a win."""
    HORIZONTAL = auto()
    VERTICAL = auto()
    DIAGONAL_DOWN = auto()  # "\" from top-left to bottom-right
    DIAGONAL_UP = auto()  # "/" from bottom-left to top-right


# Direction vectors (row, col) and whether the opposite direction is scanned too.
# Vertical only counts downward: pieces fall with gravity, so nothing can sit
# above the most recently placed piece in its column.
WIN_AXES = {
    Direction.HORIZONTAL: ((0, 1), True),
    Direction.VERTICAL: ((1, 0), False),
    Direction.DIAGONAL_DOWN: ((1, 1), True),
    Direction.DIAGONAL_UP: ((-1, 1), True),
}

EMOJI = {
    Player.EMPTY.value: "⚪",
    Player.YELLOW.value: "\U0001f7e1",
    Player.RED.value: "\U0001f534",
}


def is_valid_position(row: int, col: int) -> bool:
    """
    Check if a position is within the board boundaries.

    Args:
        row: Row index
        col: Column index

    Returns:
        True if position is valid, False otherwise
    """
    return 0 <= row < ROWS and 0 <= col < COLS


def render_board_ascii(board: np.ndarray) -> str:
    """
    Render the board as ASCII art.

    Args:
        board: The game grid

    Returns:
        ASCII representation of the board
    """
    result = ["|" + "-" * (COLS * 2 - 1) + "|"]

    for row in range(ROWS):
        cells = [str(Player(int(board[row, col]))) for col in range(COLS)]
        result.append("|" + " ".join(cells) + "|")

    result.append("|" + "-" * (COLS * 2 - 1) + "|")
    result.append("|" + " ".join(str(i) for i in range(COLS)) + "|")

    return "\n".join(result)


def render_board_emoji(board: np.ndarray) -> str:
    """Render the board with coloured circles, one line per row."""
    lines = []
    for row in range(ROWS):
        lines.append("|" + "|".join(EMOJI[int(board[row, col])] for col in range(COLS)) + "|")
    lines.append("-" * 29)
    return "\n".join(lines)
