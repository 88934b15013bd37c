"""Tic-tac-toe package exposing the game state machine and the web application."""

from .game import GameState, calculate_winner
from .ui import app

__all__ = ["GameState", "app", "calculate_winner"]
