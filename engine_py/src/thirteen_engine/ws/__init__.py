"""
WebSocket transport and event models for Thirteen lobbies.
"""

from .events import *
