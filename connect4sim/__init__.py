"""
connect4sim - Random Connect Four match simulator

This package simulates random Connect Four matches, records for every turn
whether the mover had an immediate winning move, stores the resulting match
corpus, and replays any recorded match by identifier.
"""

# Version number
__version__ = '0.1.0'
