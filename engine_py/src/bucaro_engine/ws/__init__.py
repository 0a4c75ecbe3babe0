"""
WebSocket server and event handling for the Bucaro game.
"""

from .server import app

__all__ = ["app"]
