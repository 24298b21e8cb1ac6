"""
Lobby coordination and initial deal for the Thirteen card game.
"""

__version__ = "1.0.0"
