"""
Pydantic models for the game engine.

This module contains the data models (configuration, history entries, submit
results) used by the game state machine. The state machine itself lives in
game.py.
"""

from typing import Dict, List, Optional, Literal
from pydantic import BaseModel, Field

from ..validation.lookup import WIKIPEDIA_API_URL, DEFAULT_LIMIT, DEFAULT_TIMEOUT
from ..validation.matching import MAX_DISTANCE, FUZZY_RATIO
from ..validation.models import MatchSource


# Type aliases
PlayerId = Literal[1, 2]
PLAYERS: List[int] = [1, 2]


def other_player(player: int) -> int:
    """Return the opponent of `player`."""
    return 2 if player == 1 else 1


def default_player_names() -> Dict[int, str]:
    return {p: f"Player {p}" for p in PLAYERS}


class WordEntry(BaseModel):
    """One accepted word in the chain."""
    player: PlayerId
    word: str = Field(..., min_length=1)
    source: MatchSource = "database"


class SubmitResult(BaseModel):
    """Outcome of a submission, as reported back to the caller."""
    success: bool
    code: Optional[str] = None
    error: Optional[str] = None
    suggestion: Optional[str] = None
    source: Optional[MatchSource] = None
    brand: Optional[str] = None
    player: Optional[PlayerId] = None
    points: int = 0


class GameConfig(BaseModel):
    """Configuration for a game session."""
    player_names: Dict[int, str] = Field(default_factory=default_player_names)
    max_fuzzy_distance: int = Field(default=MAX_DISTANCE, ge=0)
    fuzzy_ratio: float = Field(default=FUZZY_RATIO, ge=0)
    use_external_lookup: bool = True
    lookup_endpoint: str = WIKIPEDIA_API_URL
    lookup_limit: int = Field(default=DEFAULT_LIMIT, ge=1)
    lookup_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    brands_file: Optional[str] = None
