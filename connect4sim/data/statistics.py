"""
statistics.py - Summary statistics over a match corpus
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from connect4sim.game.simulator import Match
from connect4sim.utils import MAX_TURNS, Player


@dataclass(frozen=True)
class CorpusSummary:
    matches: int
    total_moves: int
    yellow_wins: int
    red_wins: int
    draws: int
    unknown_outcomes: int
    immediate_win_turns: int
    missed_immediate_wins: int

    @property
    def average_length(self) -> float:
        return self.total_moves / self.matches if self.matches else 0.0

    @property
    def missed_rate(self) -> float:
        """Share of turns with a winning option where the mover chose another column."""
        if not self.immediate_win_turns:
            return 0.0
        return self.missed_immediate_wins / self.immediate_win_turns


def match_winner(match: Match) -> Optional[Player]:
    """
    Read the winner from the recorded sequence.

    The last move won if its column is one of its own recorded winning
    positions. A full-length match without such a move is a draw.

    Returns:
        The winning player, Player.EMPTY for a draw, or None when the
        outcome cannot be read (positions were stripped)
    """
    if not match.moves:
        return None

    last = match.moves[-1]
    if any(col == last.column for _, col in last.immediate_win_positions):
        return last.player
    if last.has_immediate_win and not last.immediate_win_positions:
        return None
    if len(match.moves) == MAX_TURNS:
        return Player.EMPTY
    return None


def summarize_corpus(matches: Iterable[Match]) -> CorpusSummary:
    counts = {Player.YELLOW: 0, Player.RED: 0, Player.EMPTY: 0, None: 0}
    n_matches = total_moves = win_turns = missed = 0

    for match in matches:
        n_matches += 1
        total_moves += len(match.moves)
        counts[match_winner(match)] += 1
        for move in match.moves:
            if move.has_immediate_win:
                win_turns += 1
            if move.missed_immediate_win:
                missed += 1

    return CorpusSummary(
        matches=n_matches,
        total_moves=total_moves,
        yellow_wins=counts[Player.YELLOW],
        red_wins=counts[Player.RED],
        draws=counts[Player.EMPTY],
        unknown_outcomes=counts[None],
        immediate_win_turns=win_turns,
        missed_immediate_wins=missed,
    )


def format_summary(summary: CorpusSummary) -> str:
    lines = [
        f"Matches:               {summary.matches}",
        f"Total moves:           {summary.total_moves}",
        f"Average length:        {summary.average_length:.2f}",
        f"Yellow wins:           {summary.yellow_wins}",
        f"Red wins:              {summary.red_wins}",
        f"Draws:                 {summary.draws}",
    ]
    if summary.unknown_outcomes:
        lines.append(f"Unknown outcomes:      {summary.unknown_outcomes}")
    lines.append(f"Turns with a win:      {summary.immediate_win_turns}")
    lines.append(f"Missed immediate wins: {summary.missed_immediate_wins} "
                 f"({summary.missed_rate:.1%})")
    return "\n".join(lines)
