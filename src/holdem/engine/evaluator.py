"""
Five-card hand scoring.

A score is a single int, higher is stronger:

    category << 20 | r1 << 16 | r2 << 12 | r3 << 8 | r4 << 4 | r5

where category runs from 0 (high card) to 8 (straight flush) and r1..r5 are
tiebreak ranks (2..14) in descending significance, zero padded.
"""
from itertools import combinations
from typing import Iterable, Optional

from .cards import Card

CATEGORY = {
    "high_card": 0,
    "pair": 1,
    "two_pair": 2,
    "trips": 3,
    "straight": 4,
    "flush": 5,
    "full_house": 6,
    "quads": 7,
    "straight_flush": 8,
}
CATEGORY_NAMES = {v: k for k, v in CATEGORY.items()}


def build_score(category: int, *ranks: int) -> int:
    score = category << 20
    shift = 16
    for i in range(5):
        value = ranks[i] if i < len(ranks) else 0
        score |= value << shift
        shift -= 4
    return score


def decode_score(score: int) -> tuple[int, tuple[int, ...]]:
    """Returns (category, tiebreak ranks) with zero padding stripped."""
    category = score >> 20
    ranks = []
    for shift in (16, 12, 8, 4, 0):
        value = (score >> shift) & 0xF
        if value:
            ranks.append(value)
    return category, tuple(ranks)


def category_of(score: int) -> int:
    return score >> 20


def hand_name(score: int) -> str:
    category, ranks = decode_score(score)
    if category == CATEGORY["straight_flush"] and ranks and ranks[0] == 14:
        return "royal_flush"
    return CATEGORY_NAMES[category]


def straight_high(present: list[bool]) -> int:
    """Highest straight in a 15-slot presence table, 0 if none. Wheel plays as 5-high."""
    for high in range(14, 5, -1):
        if all(present[v] for v in range(high - 4, high + 1)):
            return high
    if present[14] and present[2] and present[3] and present[4] and present[5]:
        return 5
    return 0


def score_five(cards: list[Card]) -> int:
    if len(cards) != 5:
        raise ValueError("score_five expects exactly 5 cards")

    rank_counts = [0] * 15
    present = [False] * 15
    suit = cards[0].suit
    flush = True
    for card in cards:
        rank_counts[card.rank] += 1
        present[card.rank] = True
        if card.suit != suit:
            flush = False

    ranks = sorted((c.rank for c in cards), reverse=True)
    high = straight_high(present)

    # Scan high to low so the strongest group of each size comes first
    four = 0
    trips = []
    pairs = []
    singles = []
    for value in range(14, 1, -1):
        count = rank_counts[value]
        if count == 4:
            four = value
        elif count == 3:
            trips.append(value)
        elif count == 2:
            pairs.append(value)
        elif count == 1:
            singles.append(value)

    if high and flush:
        return build_score(CATEGORY["straight_flush"], high)
    if four:
        return build_score(CATEGORY["quads"], four, *singles[:1])
    if trips and (pairs or len(trips) > 1):
        pair = trips[1] if len(trips) > 1 else pairs[0]
        return build_score(CATEGORY["full_house"], trips[0], pair)
    if flush:
        return build_score(CATEGORY["flush"], *ranks)
    if high:
        return build_score(CATEGORY["straight"], high)
    if trips:
        return build_score(CATEGORY["trips"], trips[0], *singles[:2])
    if len(pairs) >= 2:
        return build_score(CATEGORY["two_pair"], pairs[0], pairs[1], *singles[:1])
    if pairs:
        return build_score(CATEGORY["pair"], pairs[0], *singles[:3])
    return build_score(CATEGORY["high_card"], *ranks)


def best_score(cards: Iterable[Optional[Card]]) -> int:
    """
    Best 5-card score among all 5-card subsets of the given cards.

    Callers pass hole + community cards (up to 7). Fewer than five cards is a
    calling error and raises instead of returning a misleading score.
    """
    known = [c for c in cards if c is not None]
    if len(known) < 5:
        raise ValueError(f"best_score needs at least 5 cards, got {len(known)}")
    if len(known) == 5:
        return score_five(known)
    return max(score_five(list(combo)) for combo in combinations(known, 5))
