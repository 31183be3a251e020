"""Tic-Tac-Toe package exposing the game state engine and the web application."""

from .game import (
    GameState,
    Mark,
    apply_move,
    detect_winner,
    history_labels,
    initial_state,
    jump_to,
    status_text,
)
from .ui import app

__all__ = [
    "GameState",
    "Mark",
    "app",
    "apply_move",
    "detect_winner",
    "history_labels",
    "initial_state",
    "jump_to",
    "status_text",
]
