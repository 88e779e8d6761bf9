"""Test the game state machine."""

import asyncio

import pytest

from brandchain.engine import BUSY, GAME_OVER, STALE, Game, GameConfig, WordEntry
from brandchain.validation import (
    EMPTY_WORD,
    FUZZY_MATCH,
    NOT_A_BRAND,
    WRONG_LETTER,
    LookupResult,
    normalize_brands,
)


BRANDS = normalize_brands(["Nike", "Adidas", "Eno", "Onida", "Amul", "Lee"])


def fake_lookup(exists: bool = True, title=None):
    calls = []

    async def lookup(term):
        calls.append(term)
        return LookupResult(exists=exists, canonical_title=title)

    lookup.calls = calls
    return lookup


def make_game(lookup=None, **config_kwargs) -> Game:
    return Game.create(brands=BRANDS, lookup=lookup or fake_lookup(exists=False), **config_kwargs)


class TestInitialState:
    """A fresh game."""

    def test_initial_state(self):
        """Player 1 moves first with an empty history and zero scores."""
        game = make_game()
        assert game.current_player == 1
        assert game.words == []
        assert game.scores == {1: 0, 2: 0}
        assert game.last_word == ""
        assert game.next_required_letter() == ""
        assert game.is_game_over is False
        assert game.winner is None
        assert game.is_validating is False

    def test_default_names(self):
        """Players get default display names."""
        game = make_game()
        assert game.player_names == {1: "Player 1", 2: "Player 2"}
        assert game.current_player_name == "Player 1"

    def test_configured_names(self):
        """Names come from configuration, blanks fall back to defaults."""
        game = make_game(player_names={1: "Asha", 2: "  "})
        assert game.player_names == {1: "Asha", 2: "Player 2"}

    def test_create_with_config(self):
        """A GameConfig instance is used as-is."""
        config = GameConfig(max_fuzzy_distance=1, use_external_lookup=False)
        game = Game.create(config=config, brands=BRANDS)
        assert game.config is config
        assert game.brands == BRANDS

    def test_create_with_bundled_dictionary(self):
        """Without brands, the bundled dictionary is loaded."""
        game = Game.create()
        assert len(game.brands) > 200


class TestSubmit:
    """Synchronous submissions against the local dictionary."""

    def test_first_word(self):
        """Accepting a word scores it, records it and passes the turn."""
        game = make_game()

        result = game.submit("Nike")

        assert result.success is True
        assert result.brand == "Nike"
        assert result.source == "database"
        assert result.player == 1
        assert result.points == 4
        assert game.scores == {1: 4, 2: 0}
        assert game.current_player == 2
        assert game.words == [WordEntry(player=1, word="Nike", source="database")]
        assert game.last_word == "Nike"
        assert game.next_required_letter() == "e"

    def test_records_display_name(self):
        """History holds the dictionary's spelling."""
        game = make_game()
        game.submit("nike")
        assert game.words[0].word == "Nike"
        assert game.last_word == "Nike"

    def test_scores_trimmed_input_length(self):
        """Points equal the trimmed length of what was typed."""
        game = make_game()
        game.submit("Nike")
        result = game.submit("   Eno  ")
        assert result.points == 3
        assert game.scores == {1: 4, 2: 3}

    def test_turns_alternate(self):
        """Players alternate after every accepted word."""
        game = make_game()
        for word in ["Nike", "Eno", "Onida", "Amul", "Lee"]:
            assert game.submit(word).success is True

        assert [w.player for w in game.words] == [1, 2, 1, 2, 1]
        assert game.current_player == 2
        assert game.scores == {1: 4 + 5 + 3, 2: 3 + 4}
        assert game.last_word == game.words[-1].word == "Lee"

    @pytest.mark.parametrize("word,code", [
        ("", EMPTY_WORD),
        ("Xyzzy", NOT_A_BRAND),
        ("Adidaz", FUZZY_MATCH),
        ("Adidas", WRONG_LETTER),
    ])
    def test_rejection_leaves_state_unchanged(self, word, code):
        """Rejected words do not change turn, score or history."""
        game = make_game()
        game.submit("Nike")
        before = game.get_state()

        result = game.submit(word)

        assert result.success is False
        assert result.code == code
        assert result.error
        assert game.get_state() == before

    def test_wrong_letter_message(self):
        """A chain-rule rejection names the required letter."""
        game = make_game()
        game.submit("Nike")

        result = game.submit("Adidas")

        assert result.error == 'Word must start with "E"'
        assert game.current_player == 2

    def test_fuzzy_suggestion_can_be_played(self):
        """A suggestion is never auto-accepted but can be submitted verbatim."""
        game = make_game()

        result = game.submit("Adidaz")
        assert result.success is False
        assert result.suggestion == "Adidas"
        assert game.words == []

        result = game.submit(result.suggestion)
        assert result.success is True
        assert game.scores[1] == 6

    def test_validate_word_does_not_mutate(self):
        """Previewing a word leaves the game untouched."""
        game = make_game()
        game.submit("Nike")
        before = game.get_state()

        assert game.validate_word("Eno").valid is True
        assert game.validate_word("Adidas").valid is False
        assert game.get_state() == before

    def test_sync_submit_skips_external_lookup(self):
        """The synchronous path never calls the external source."""
        lookup = fake_lookup(exists=True, title="Coca-Cola")
        game = make_game(lookup=lookup)

        result = game.submit("Coca-Cola")

        assert result.code == NOT_A_BRAND
        assert lookup.calls == []


class TestSubmitAsync:
    """Submissions with the external fallback."""

    def test_external_word_accepted(self):
        """A word found externally is played with source 'external'."""
        game = make_game(lookup=fake_lookup(exists=True, title="Coca-Cola"))

        result = asyncio.run(game.submit_async("Coca-Cola"))

        assert result.success is True
        assert result.source == "external"
        assert result.brand == "Coca-Cola"
        assert game.words == [WordEntry(player=1, word="Coca-Cola", source="external")]
        assert game.scores == {1: 9, 2: 0}
        assert game.current_player == 2
        assert game.next_required_letter() == "a"
        assert game.is_validating is False

    def test_scores_input_not_canonical_title(self):
        """Points come from the typed word even when the title is longer."""
        game = make_game(lookup=fake_lookup(exists=True, title="Zomato Limited"))

        result = asyncio.run(game.submit_async("Zomato"))

        assert result.points == 6
        assert game.last_word == "Zomato Limited"

    def test_external_miss_rejected(self):
        """An external miss leaves the state unchanged."""
        game = make_game(lookup=fake_lookup(exists=False))

        result = asyncio.run(game.submit_async("Xyzzy"))

        assert result.success is False
        assert result.code == NOT_A_BRAND
        assert game.words == []
        assert game.current_player == 1

    def test_local_word_accepted(self):
        """Dictionary words are accepted without the external source."""
        lookup = fake_lookup(exists=True, title="Nike")
        game = make_game(lookup=lookup)

        result = asyncio.run(game.submit_async("Nike"))

        assert result.success is True
        assert result.source == "database"
        assert lookup.calls == []

    def test_external_lookup_disabled(self):
        """With the external source disabled, local misses stay rejected."""
        lookup = fake_lookup(exists=True, title="Coca-Cola")
        game = make_game(lookup=lookup, use_external_lookup=False)

        result = asyncio.run(game.submit_async("Coca-Cola"))

        assert result.code == NOT_A_BRAND
        assert lookup.calls == []

    def test_lookup_error_rejects_without_raising(self):
        """A failing lookup leaves the word rejected and the game playable."""
        async def broken_lookup(term):
            raise ConnectionError("connection reset")

        game = make_game(lookup=broken_lookup)

        result = asyncio.run(game.submit_async("Xyzzy"))

        assert result.success is False
        assert result.code == NOT_A_BRAND
        assert game.is_validating is False
        assert asyncio.run(game.submit_async("Nike")).success is True

    def test_slow_lookup_times_out(self):
        """An injected lookup is bounded by the configured timeout."""
        async def hanging_lookup(term):
            await asyncio.sleep(30)
            return LookupResult(exists=True, canonical_title=term)

        game = make_game(lookup=hanging_lookup, lookup_timeout=0.05)

        result = asyncio.run(asyncio.wait_for(game.submit_async("Xyzzy"), timeout=2))

        assert result.success is False
        assert result.code == NOT_A_BRAND
        assert game.words == []
        assert game.is_validating is False

    def test_second_submission_while_pending_is_busy(self):
        """Only one submission may be in flight."""
        async def scenario():
            gate = asyncio.Event()

            async def slow_lookup(term):
                await gate.wait()
                return LookupResult(exists=True, canonical_title=term)

            game = make_game(lookup=slow_lookup)
            first = asyncio.create_task(game.submit_async("Coca-Cola"))
            await asyncio.sleep(0)

            assert game.is_validating is True
            second = await game.submit_async("Nike")
            sync_second = game.submit("Nike")

            gate.set()
            return game, await first, second, sync_second

        game, first, second, sync_second = asyncio.run(scenario())

        assert second.code == BUSY
        assert sync_second.code == BUSY
        assert first.success is True
        assert [w.word for w in game.words] == ["Coca-Cola"]
        assert game.is_validating is False

    def test_result_after_restart_is_discarded(self):
        """A lookup finishing after a restart does not touch the new game."""
        async def scenario():
            gate = asyncio.Event()

            async def slow_lookup(term):
                await gate.wait()
                return LookupResult(exists=True, canonical_title=term)

            game = make_game(lookup=slow_lookup)
            pending = asyncio.create_task(game.submit_async("Coca-Cola"))
            await asyncio.sleep(0)

            game.start()
            gate.set()
            return game, await pending

        game, result = asyncio.run(scenario())

        assert result.success is False
        assert result.code == STALE
        assert game.words == []
        assert game.scores == {1: 0, 2: 0}
        assert game.current_player == 1
        assert game.is_validating is False

    def test_result_after_forfeit_is_discarded(self):
        """A lookup finishing after a forfeit is not played."""
        async def scenario():
            gate = asyncio.Event()

            async def slow_lookup(term):
                await gate.wait()
                return LookupResult(exists=True, canonical_title=term)

            game = make_game(lookup=slow_lookup)
            pending = asyncio.create_task(game.submit_async("Coca-Cola"))
            await asyncio.sleep(0)

            game.forfeit()
            gate.set()
            return game, await pending

        game, result = asyncio.run(scenario())

        assert result.code == GAME_OVER
        assert game.words == []
        assert game.winner == 2


class TestForfeit:
    """Ending the game."""

    def test_forfeit_first_player(self):
        """When player 1 gives up, player 2 wins."""
        game = make_game()

        winner = game.forfeit()

        assert winner == 2
        assert game.is_game_over is True
        assert game.winner == 2
        assert game.winner_name == "Player 2"

    def test_forfeit_after_moves(self):
        """The opponent of the player to move wins."""
        game = make_game()
        game.submit("Nike")

        assert game.forfeit() == 1
        assert game.winner == 1

    def test_forfeit_keeps_scores(self):
        """Scores and history survive the end of the game."""
        game = make_game()
        game.submit("Nike")
        game.submit("Eno")
        game.forfeit()

        assert game.scores == {1: 4, 2: 3}
        assert len(game.words) == 2

    def test_forfeit_twice(self):
        """Forfeiting a finished game changes nothing."""
        game = make_game()
        game.forfeit()
        game.forfeit()
        assert game.winner == 2

    def test_submit_after_game_over(self):
        """No words are accepted once the game is over."""
        game = make_game()
        game.forfeit()

        result = game.submit("Nike")
        async_result = asyncio.run(game.submit_async("Nike"))

        assert result.code == GAME_OVER
        assert async_result.code == GAME_OVER
        assert game.words == []


class TestStart:
    """Restarting a game."""

    def test_start_resets(self):
        """start() returns to the initial state."""
        game = make_game()
        game.submit("Nike")
        game.forfeit()
        session = game.session

        game.start()

        assert game.current_player == 1
        assert game.words == []
        assert game.scores == {1: 0, 2: 0}
        assert game.last_word == ""
        assert game.is_game_over is False
        assert game.winner is None
        assert game.session == session + 1

    def test_start_mid_game(self):
        """start() abandons a game in progress."""
        game = make_game()
        game.submit("Nike")
        game.submit("Eno")

        game.start()

        assert game.words == []
        assert game.submit("Adidas").success is True

    def test_start_with_names(self):
        """New names replace the old ones; blanks fall back to defaults."""
        game = make_game()
        game.start({1: "Asha", 2: ""})
        assert game.player_names == {1: "Asha", 2: "Player 2"}

        game.start()
        assert game.player_names == {1: "Asha", 2: "Player 2"}


class TestGetState:
    """State snapshot for rendering."""

    def test_state_dict(self):
        """The snapshot exposes every accessor a renderer needs."""
        game = make_game(player_names={1: "Asha", 2: "Ben"})
        game.submit("Nike")

        state = game.get_state()

        assert state == {
            "current_player": 2,
            "current_player_name": "Ben",
            "player_names": {1: "Asha", 2: "Ben"},
            "words": [{"player": 1, "word": "Nike", "source": "database"}],
            "scores": {1: 4, 2: 0},
            "last_word": "Nike",
            "next_letter": "e",
            "is_game_over": False,
            "winner": None,
            "is_validating": False,
        }
