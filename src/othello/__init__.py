"""Othello package exposing board rules, rooms, the AI opponent, and the web application."""

from .ai import MinimaxAI
from .registry import SessionRegistry
from .session import GameSession, Mode, Status
from .server import app

__all__ = ["GameSession", "MinimaxAI", "Mode", "SessionRegistry", "Status", "app"]
