"""Game engine for brandchain."""

from .models import (
    PlayerId,
    PLAYERS,
    WordEntry,
    SubmitResult,
    GameConfig,
    other_player,
)
from .game import Game, GAME_OVER, BUSY, STALE

__all__ = [
    "PlayerId",
    "PLAYERS",
    "WordEntry",
    "SubmitResult",
    "GameConfig",
    "other_player",
    "Game",
    "GAME_OVER",
    "BUSY",
    "STALE",
]
