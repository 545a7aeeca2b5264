"""
connect4sim.interfaces - User interfaces for the match simulator

This package contains the command-line interface and its interactive prompt.
"""

# Don't import anything here to avoid circular imports
__all__ = []
