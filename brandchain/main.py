"""
Main entry point for playing brandchain in a terminal.

Usage:
    python -m brandchain.main
    python -m brandchain.main config.yaml --offline --verbose
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from .engine import Game, GameConfig


GIVE_UP = "/giveup"


def load_config(config_path: str) -> GameConfig:
    """Load game configuration from a YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return GameConfig(**data)


def print_status(game: Game) -> None:
    """Print scores, the last word and whose turn it is."""
    names = game.player_names
    print()
    print(f"Scores: {names[1]} {game.scores[1]} | {names[2]} {game.scores[2]}")
    if game.last_word:
        print(f"Last word: {game.last_word}")
        print(f"Next word must start with: {game.next_required_letter().upper()}")
    print(f"{game.current_player_name}'s turn")


def ask(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


def play(game: Game) -> None:
    """Run the same-device game loop until someone gives up."""
    # One loop for the whole game; closing it does not wait on lookup threads
    loop = asyncio.new_event_loop()
    try:
        _play_turns(game, loop)
    finally:
        loop.close()

    if not game.is_game_over:
        return

    print()
    print("=== Game Over ===")
    print(f"Winner: {game.winner_name}")
    for player, name in game.player_names.items():
        print(f"{name}: {game.scores[player]}")
    print(f"Words played: {len(game.words)}")


def _play_turns(game: Game, loop: asyncio.AbstractEventLoop) -> None:
    while not game.is_game_over:
        print_status(game)
        word = ask(f"Brand (or {GIVE_UP}): ")
        if word is None:
            return

        if word.strip().lower() == GIVE_UP:
            game.forfeit()
            break

        result = loop.run_until_complete(game.submit_async(word))

        if not result.success and result.suggestion:
            print(result.error)
            answer = ask(f"Play {result.suggestion} instead? [y/N] ")
            if answer is None:
                return
            if answer.strip().lower() not in ("y", "yes"):
                continue
            result = loop.run_until_complete(game.submit_async(result.suggestion))

        if result.success:
            tag = "Wikipedia" if result.source == "external" else "Brand Database"
            print(f"OK: {result.brand} (+{result.points}, {tag})")
        else:
            print(f"Invalid: {result.error}")


def main():
    parser = argparse.ArgumentParser(
        description="Play the brand name word chain game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example config.yaml:
  player_names:
    1: Asha
    2: Ben
  use_external_lookup: true
  lookup_timeout: 5
  max_fuzzy_distance: 2
        """
    )
    parser.add_argument(
        "config",
        nargs="?",
        help="Path to YAML configuration file"
    )
    parser.add_argument(
        "--player1",
        help="Name of player 1"
    )
    parser.add_argument(
        "--player2",
        help="Name of player 2"
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Only accept brands from the local dictionary"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print debug logging to stderr"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else GameConfig()
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.offline:
        config.use_external_lookup = False

    try:
        game = Game.create(config=config)
    except Exception as e:
        print(f"Error loading brand dictionary: {e}", file=sys.stderr)
        sys.exit(1)

    if args.player1 or args.player2:
        game.start({
            1: args.player1 or game.player_names[1],
            2: args.player2 or game.player_names[2],
        })

    print("=== Brand Chain ===")
    print("Name a brand that starts with the last letter of the previous one.")

    try:
        play(game)
    except KeyboardInterrupt:
        print("\nGame interrupted by user")

    return 0


if __name__ == "__main__":
    sys.exit(main())
