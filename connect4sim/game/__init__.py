"""
connect4sim.game - Core game mechanics for the match simulator

This package contains the board representation, win detection and the
random match simulator.
"""

from connect4sim.game.board import Board
from connect4sim.game.simulator import (Match, MatchSimulator, MatchState, MoveRecord,
                                        SimulationInvariantError, simulate_match)

__all__ = ['Board', 'Match', 'MatchSimulator', 'MatchState', 'MoveRecord',
           'SimulationInvariantError', 'simulate_match']
