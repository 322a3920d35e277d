import argparse
import csv
import logging
from pathlib import Path
from typing import Optional

from ..utils.logging import setup_logger
from .config import TableConfig
from .game import PokerGame

logger = logging.getLogger(__name__)

FIELDNAMES = ["game_id", "game_seed", "hand", "seat", "name", "archetype", "chips", "payout"]


def hand_rows(game_id: int, game: PokerGame, result) -> list[dict]:
    rows = []
    for seat in game.seats:
        rows.append({
            "game_id": game_id,
            "game_seed": game.game_seed,
            "hand": result.hand_number,
            "seat": seat.index,
            "name": seat.name,
            "archetype": seat.profile.archetype if seat.profile is not None else "",
            "chips": seat.chips,
            "payout": result.payouts.get(seat.index, 0),
        })
    return rows


def run_simulation(
        games: int,
        hands: int,
        npc_count: int = 4,
        starting_chips: int = 1000,
        seed: Optional[int] = None
) -> list[dict]:
    """Plays `games` computer-only games of up to `hands` hands each."""
    results = []
    for game_id in range(games):
        config = TableConfig(
            starting_chips=starting_chips,
            npc_count=npc_count,
            include_human=False,
        )
        game_seed = seed + game_id if seed is not None else None
        game = PokerGame(config, game_seed=game_seed)
        logger.info("Seed for game %d is: %d", game_id, game.game_seed)
        for result in game.play_hands(hands):
            results.extend(hand_rows(game_id, game, result))
    return results


def write_results(rows: list[dict], path: Path):
    # Create directory if it doesn't exist
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(rows)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Headless self-play between computer seats.")
    parser.add_argument("--games", type=int, default=10)
    parser.add_argument("--hands", type=int, default=100, help="hands per game")
    parser.add_argument("--npcs", type=int, default=4, help="computer seats per table")
    parser.add_argument("--chips", type=int, default=1000, help="starting chips per seat")
    parser.add_argument("--seed", type=int, default=None, help="seed of the first game")
    parser.add_argument("--out", type=Path, default=Path("data/results.csv"))
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logger("holdem", getattr(logging, args.log_level.upper(), logging.INFO))
    rows = run_simulation(args.games, args.hands, args.npcs, args.chips, args.seed)
    write_results(rows, args.out)
    logger.info("Wrote %d rows to %s", len(rows), args.out)


if __name__ == '__main__':
    main()
