import asyncio
import logging
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .models import (
    GameConfig,
    PlayerId,
    SubmitResult,
    WordEntry,
    default_player_names,
    other_player,
)
from ..validation import Brand, LookupResult, ValidationResult, validate, validate_async
from ..validation.chain import last_letter
from ..validation.data import get_brands, load_brands
from ..validation.lookup import lookup_exists_async
from ..validation.validate import Lookup

logger = logging.getLogger(__name__)


# Submission rejection codes raised by the engine itself
GAME_OVER = "GAME_OVER"
BUSY = "BUSY"
STALE = "STALE"


class Game(BaseModel):
    """
    Manages the state of one two-player brand chain game.

    Players alternate naming brands; each word must start with the last
    letter of the previous one. An accepted word scores its length for the
    player who played it and passes the turn. A rejected word leaves the
    state untouched so the same player can try again. The game ends when
    the player to move forfeits, and the opponent wins.

    Attributes:
        brands: The brand dictionary (read-only during a game)
        config: Session configuration
        current_player: Player to move (1 or 2)
        words: Accepted words in play order
        scores: Points per player
        last_word: Most recently accepted word ("" before the first move)
        is_game_over: Whether the game has ended
        winner: Winning player once the game is over
        player_names: Display names per player
        session: Token incremented on every start, used to drop stale results
        is_validating: Whether an async submission is in flight
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    brands: List[Brand] = Field(default_factory=list)
    config: GameConfig = Field(default_factory=GameConfig)
    current_player: PlayerId = 1
    words: List[WordEntry] = Field(default_factory=list)
    scores: Dict[int, int] = Field(default_factory=lambda: {1: 0, 2: 0})
    last_word: str = ""
    is_game_over: bool = False
    winner: Optional[PlayerId] = None
    player_names: Dict[int, str] = Field(default_factory=default_player_names)
    session: int = 0
    is_validating: bool = False
    _lookup: Optional[Lookup] = None

    def model_post_init(self, __context) -> None:
        """Apply configured player names."""
        self.player_names = self._merge_names(self.config.player_names)

    @classmethod
    def create(
        cls,
        config: Optional[GameConfig] = None,
        brands: Optional[List[Brand]] = None,
        lookup: Optional[Lookup] = None,
        **config_kwargs: Any
    ) -> "Game":
        """
        Factory method to create a game with its dictionary and lookup.

        Args:
            config: Optional GameConfig instance
            brands: Optional brand dictionary (defaults to the configured
                file, or the bundled one)
            lookup: Optional async external lookup replacing the default
            **config_kwargs: Config parameters if config not provided

        Returns:
            A new Game, ready for the first move
        """
        if config is None:
            config = GameConfig(**config_kwargs)

        if brands is None:
            brands = load_brands(config.brands_file) if config.brands_file else get_brands()

        game = cls(brands=brands, config=config)
        game._lookup = lookup
        return game

    @staticmethod
    def _merge_names(names: Optional[Dict[int, str]]) -> Dict[int, str]:
        """Fill blank or missing player names with defaults."""
        merged = default_player_names()
        for player, name in (names or {}).items():
            player = int(player)
            if player in merged and isinstance(name, str) and name.strip():
                merged[player] = name.strip()
        return merged

    @property
    def current_player_name(self) -> str:
        """Display name of the player to move."""
        return self.player_names[self.current_player]

    @property
    def winner_name(self) -> Optional[str]:
        """Display name of the winner, if any."""
        return self.player_names[self.winner] if self.winner else None

    def start(self, player_names: Optional[Dict[int, str]] = None) -> None:
        """
        Reset to a fresh game. Also abandons a game in progress.

        Args:
            player_names: Optional new display names; keeps the current ones if None
        """
        self.current_player = 1
        self.words = []
        self.scores = {1: 0, 2: 0}
        self.last_word = ""
        self.is_game_over = False
        self.winner = None
        self.is_validating = False
        self.session += 1
        if player_names is not None:
            self.player_names = self._merge_names(player_names)
        logger.debug(f"Started game session {self.session}")

    def next_required_letter(self) -> str:
        """Letter the next word must start with, or "" before the first move."""
        if not self.last_word:
            return ""
        return last_letter(self.last_word)

    def validate_word(self, word: str) -> ValidationResult:
        """Check a word against the local dictionary without playing it."""
        return validate(
            word,
            self.brands,
            self.last_word,
            max_distance=self.config.max_fuzzy_distance,
            ratio=self.config.fuzzy_ratio,
        )

    def submit(self, word: str) -> SubmitResult:
        """
        Play a word for the current player using the local dictionary only.

        Returns:
            SubmitResult; on failure the game state is unchanged
        """
        if self.is_game_over:
            return self._game_over_result()
        if self.is_validating:
            return self._busy_result()

        return self._apply(word, self.validate_word(word))

    async def submit_async(self, word: str) -> SubmitResult:
        """
        Play a word, consulting the external lookup on a local miss.

        Only one submission may be in flight; a second one is rejected with
        BUSY. If the game is restarted while the lookup is pending, the
        result is dropped and STALE is returned.
        """
        if self.is_game_over:
            return self._game_over_result()
        if self.is_validating:
            return self._busy_result()

        token = self.session
        self.is_validating = True
        try:
            result = await validate_async(
                word,
                self.brands,
                self.last_word,
                lookup=self._external_lookup if self.config.use_external_lookup else self._no_lookup,
                max_distance=self.config.max_fuzzy_distance,
                ratio=self.config.fuzzy_ratio,
            )
        finally:
            if self.session == token:
                self.is_validating = False

        if self.session != token:
            logger.info(f"Discarding result for '{word}' from abandoned session {token}")
            return SubmitResult(success=False, code=STALE, error="Game was restarted")
        if self.is_game_over:
            return self._game_over_result()

        return self._apply(word, result)

    def forfeit(self) -> Optional[PlayerId]:
        """
        End the game because the player to move gave up.

        Returns:
            The winner (the opponent of the player to move)
        """
        if self.is_game_over:
            return self.winner

        self.is_game_over = True
        self.winner = other_player(self.current_player)
        logger.info(f"{self.current_player_name} gave up; {self.winner_name} wins")
        return self.winner

    def get_state(self) -> Dict[str, Any]:
        """
        Get the current game state as a dictionary.

        Useful for rendering and logging.
        """
        return {
            "current_player": self.current_player,
            "current_player_name": self.current_player_name,
            "player_names": dict(self.player_names),
            "words": [w.model_dump() for w in self.words],
            "scores": dict(self.scores),
            "last_word": self.last_word,
            "next_letter": self.next_required_letter(),
            "is_game_over": self.is_game_over,
            "winner": self.winner,
            "is_validating": self.is_validating,
        }

    async def _external_lookup(self, term: str) -> LookupResult:
        if self._lookup is not None:
            try:
                return await asyncio.wait_for(self._lookup(term), timeout=self.config.lookup_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Brand lookup for '{term}' timed out after {self.config.lookup_timeout}s")
                return LookupResult(exists=False, error="Lookup timed out")
        return await lookup_exists_async(
            term,
            endpoint=self.config.lookup_endpoint,
            limit=self.config.lookup_limit,
            timeout=self.config.lookup_timeout,
        )

    @staticmethod
    async def _no_lookup(term: str) -> LookupResult:
        return LookupResult(exists=False, error="External lookup disabled")

    def _apply(self, word: str, result: ValidationResult) -> SubmitResult:
        """Record an accepted word, or pass a rejection through unchanged."""
        if not result.valid:
            logger.debug(f"Rejected '{word}' for player {self.current_player}: {result.code}")
            return SubmitResult(
                success=False,
                code=result.code,
                error=result.error,
                suggestion=result.suggestion,
                source=result.source,
            )

        player = self.current_player
        points = len(word.strip())
        entry = WordEntry(player=player, word=result.brand, source=result.source or "database")

        self.words.append(entry)
        self.last_word = entry.word
        self.scores[player] += points
        self.current_player = other_player(player)

        logger.info(f"Player {player} played '{entry.word}' ({entry.source}) for {points} points")
        return SubmitResult(
            success=True,
            source=entry.source,
            brand=entry.word,
            player=player,
            points=points,
        )

    def _game_over_result(self) -> SubmitResult:
        return SubmitResult(success=False, code=GAME_OVER, error="The game is over")

    def _busy_result(self) -> SubmitResult:
        return SubmitResult(success=False, code=BUSY, error="A word is already being validated")
