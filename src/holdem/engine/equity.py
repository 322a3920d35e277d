"""
Monte-Carlo equity.

Equity is sampled, never enumerated: each trial completes the board and the
opponents' hands from a shuffled copy of the unseen cards.
"""
import logging
from collections import OrderedDict
from random import Random
from typing import Iterable, Mapping, Optional, Sequence

from .cards import Card, create_deck_excluding
from .evaluator import best_score
from .state import Street

logger = logging.getLogger(__name__)

# Used by decision engines when a seat's own hole cards are not known
UNKNOWN_HOLE_EQUITY = 0.4

MIN_TRIALS = 260
MAX_TRIALS = 1600
BASE_TRIALS = {
    Street.PREFLOP: 300,
    Street.FLOP: 560,
    Street.TURN: 520,
    Street.RIVER: 400,
}

_random = Random()


def trial_count(street: Street, simulation_scale: float = 0.5, live_opponents: int = 1) -> int:
    """Number of trials for one decision, scaled by profile and table size."""
    base = BASE_TRIALS.get(street, BASE_TRIALS[Street.FLOP])
    multiplier = 0.6 + 0.8 * simulation_scale
    # Each extra opponent adds variance but also cost per trial
    opponent_factor = 1.0 + 0.1 * max(0, live_opponents - 1)
    trials = int(base * multiplier * opponent_factor)
    return max(MIN_TRIALS, min(MAX_TRIALS, trials))


def estimate_equity(
        hole_cards: Sequence[Optional[Card]],
        community_cards: Iterable[Optional[Card]],
        live_opponents: int,
        trials: int,
        rng: Random = None
) -> float:
    """
    Win probability against `live_opponents` random hands, ties counted as half.

    A trial is a win when no opponent scores strictly higher, and a tie when at
    least one opponent scores exactly the same.
    """
    if len(hole_cards) != 2 or any(c is None for c in hole_cards):
        raise ValueError("estimate_equity needs both hole cards")
    if live_opponents <= 0:
        return 1.0
    rng = rng if rng is not None else _random
    trials = max(1, int(trials))

    board = [c for c in community_cards if c is not None]
    unknown = create_deck_excluding(board + list(hole_cards))
    if 5 - len(board) + 2 * live_opponents > len(unknown):
        raise ValueError(f"Not enough cards left for {live_opponents} opponents")

    wins = 0
    ties = 0
    for _ in range(trials):
        deck = unknown.copy()
        rng.shuffle(deck)

        community = board.copy()
        while len(community) < 5:
            community.append(deck.pop())

        opponent_scores = []
        for _ in range(live_opponents):
            opponent_scores.append(best_score([deck.pop(), deck.pop()] + community))

        my_score = best_score(list(hole_cards) + community)
        best_opponent = max(opponent_scores)
        if best_opponent > my_score:
            continue
        if best_opponent == my_score:
            ties += 1
        else:
            wins += 1

    return (wins + 0.5 * ties) / trials


def estimate_all_in_odds(
        entries: Mapping[int, Sequence[Card]],
        community_cards: Iterable[Optional[Card]],
        trials: int,
        rng: Random = None
) -> dict[int, float]:
    """
    Share of the pot each seat wins on average when the board is run out.

    Every hole card is face up, so only the board is sampled. A trial's unit
    share is split evenly among the seats tied for best.
    """
    odds = {}
    if not entries:
        return odds
    rng = rng if rng is not None else _random
    trials = max(1, int(trials))

    board = [c for c in community_cards if c is not None]
    known = board.copy()
    for hole in entries.values():
        known.extend(hole)
    base_deck = create_deck_excluding(known)

    shares = {seat: 0.0 for seat in entries}
    for _ in range(trials):
        deck = base_deck.copy()
        rng.shuffle(deck)
        community = board.copy()
        while len(community) < 5:
            community.append(deck.pop())

        best = -1
        winners = []
        for seat, hole in entries.items():
            score = best_score(list(hole) + community)
            if score > best:
                best = score
                winners = [seat]
            elif score == best:
                winners.append(seat)

        share = 1 / len(winners)
        for seat in winners:
            shares[seat] += share

    for seat, won in shares.items():
        odds[seat] = won / trials
    return odds


def _leaders(entries: Mapping[int, Sequence[Card]], board: list[Card]) -> set[int]:
    scores = {seat: best_score(list(hole) + board) for seat, hole in entries.items()}
    top = max(scores.values())
    return {seat for seat, score in scores.items() if score == top}


def count_outs(
        entries: Mapping[int, Sequence[Card]],
        community_cards: Iterable[Optional[Card]]
) -> dict[int, int]:
    """
    Next-card outs for each trailing seat.

    Only defined on the flop and turn. A card is an out for a seat that is not
    currently best if the seat is at the top (alone or tied) once it lands.
    """
    board = [c for c in community_cards if c is not None]
    outs = {seat: 0 for seat in entries}
    if not 3 <= len(board) <= 4 or len(entries) < 2:
        return outs

    known = board.copy()
    for hole in entries.values():
        known.extend(hole)
    current = _leaders(entries, board)

    for card in create_deck_excluding(known):
        for seat in _leaders(entries, board + [card]):
            if seat not in current:
                outs[seat] += 1
    return outs


class EquityCache:
    """
    Equity results for the current decision point, keyed by the hole cards,
    the board and the opponent count. Oldest entries are evicted first.
    """

    def __init__(self, capacity: int = 220):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._entries: "OrderedDict[tuple, float]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self):
        return len(self._entries)

    @staticmethod
    def key(hole_cards: Iterable[Card], community_cards: Iterable[Optional[Card]], live_opponents: int) -> tuple:
        board = frozenset(c for c in community_cards if c is not None)
        return frozenset(hole_cards), board, live_opponents

    def get(self, key: tuple) -> Optional[float]:
        value = self._entries.get(key)
        if value is None:
            self.misses += 1
            return None
        self.hits += 1
        return value

    def put(self, key: tuple, equity: float):
        self._entries[key] = equity
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def clear(self):
        self._entries.clear()
        self.hits = self.misses = 0
