"""
Cheap hand-reading estimators used alongside Monte-Carlo equity.

Preflop:  Chen-formula score normalised to [0, 1]
Postflop: made-hand category, draw proximity, board texture and blockers
"""
from collections import Counter
from dataclasses import dataclass
from typing import Optional, Sequence

from ..engine.cards import Card
from ..engine.evaluator import CATEGORY, best_score, decode_score

# ─── Preflop strength (Chen formula) ─────────────────────────────────────────
_CHEN_HIGH = {
    14: 10, 13: 8, 12: 7, 11: 6, 10: 5,
    9: 4.5, 8: 4, 7: 3.5, 6: 3, 5: 2.5, 4: 2, 3: 1.5, 2: 1,
}
CHEN_MIN = -1.5     # 72o
CHEN_MAX = 20.0     # AA


def chen_score(hole: Sequence[Card]) -> float:
    """
    Chen-formula score for two hole cards.
    Approximate ranges:
      >= 20 : AA
      >= 12 : JJ, AKs
      >=  9 : 99, AJs, AQo, KQs
      >=  5 : small pairs, suited connectors, broadways
    """
    high, low = max(hole[0].rank, hole[1].rank), min(hole[0].rank, hole[1].rank)
    if high == low:
        return max(_CHEN_HIGH[high] * 2, 5)

    score = _CHEN_HIGH[high]
    if hole[0].suit == hole[1].suit:
        score += 2
    gap = high - low - 1
    score -= {0: 0, 1: 1, 2: 2, 3: 4}.get(gap, 5)
    if gap <= 1 and high < 12:
        score += 1
    return score


def preflop_strength(hole: Sequence[Optional[Card]]) -> float:
    if len(hole) != 2 or any(c is None for c in hole):
        return 0.0
    score = chen_score(hole)
    return max(0.0, min(1.0, (score - CHEN_MIN) / (CHEN_MAX - CHEN_MIN)))


# ─── Made hands ──────────────────────────────────────────────────────────────
# Base strength per evaluator category
_CATEGORY_STRENGTH = {
    CATEGORY['high_card']: 0.10,
    CATEGORY['pair']: 0.30,
    CATEGORY['two_pair']: 0.52,
    CATEGORY['trips']: 0.64,
    CATEGORY['straight']: 0.74,
    CATEGORY['flush']: 0.80,
    CATEGORY['full_house']: 0.88,
    CATEGORY['quads']: 0.95,
    CATEGORY['straight_flush']: 0.99,
}


def made_hand_strength(hole: Sequence[Card], board: Sequence[Optional[Card]]) -> float:
    """Evaluator category mapped to [0, 1], nudged by the top ranks."""
    board = [c for c in board if c is not None]
    if len(board) < 3:
        return preflop_strength(hole)

    category, ranks = decode_score(best_score(list(hole) + board))
    strength = _CATEGORY_STRENGTH[category]

    # Lead rank up to +0.06, second rank up to +0.02
    second = ranks[1] if len(ranks) > 1 else 2
    nudge = (ranks[0] - 2) / 12 * 0.06 + (second - 2) / 12 * 0.02

    # A pair or two pair that lives entirely on the board is worth much less
    if category in (CATEGORY['pair'], CATEGORY['two_pair']):
        board_ranks = Counter(c.rank for c in board)
        hole_ranks = {c.rank for c in hole}
        if ranks[0] not in hole_ranks and board_ranks[ranks[0]] >= 2:
            strength -= 0.12
    return max(0.0, min(1.0, strength + nudge))


# ─── Draws ───────────────────────────────────────────────────────────────────
# Five-rank windows, ace-low written as 1
STRAIGHT_WINDOWS = [set(range(low, low + 5)) for low in range(1, 11)]


def straight_ranks(cards) -> set[int]:
    """Ranks present, with an ace also counted as 1."""
    ranks = {c.rank for c in cards}
    if 14 in ranks:
        ranks.add(1)
    return ranks


def draw_counts(hole: Sequence[Card], board: Sequence[Card]) -> dict:
    """Flush-draw, open-ended and gutshot flags for hole + board."""
    cards = list(hole) + list(board)
    suits = Counter(c.suit for c in cards)
    hole_suits = {c.suit for c in hole}
    flush_draw = any(n == 4 and s in hole_suits for s, n in suits.items())

    ranks = straight_ranks(cards)
    hole_ranks = straight_ranks(hole)

    # Four in a row that can be completed at either end
    open_ended = False
    for low in range(2, 11):
        run = set(range(low, low + 4))
        if run <= ranks and run & hole_ranks and low + 4 <= 14:
            open_ended = True

    gutshot = False
    for window in STRAIGHT_WINDOWS:
        missing = window - ranks
        if len(missing) == 1 and window & hole_ranks:
            gutshot = True
    return {'flush_draw': flush_draw, 'open_ended': open_ended, 'gutshot': gutshot}


def draw_strength(hole: Sequence[Card], board: Sequence[Optional[Card]]) -> float:
    """Weighted draw potential. Zero preflop and on the river."""
    board = [c for c in board if c is not None]
    if len(board) < 3 or len(board) >= 5:
        return 0.0
    draws = draw_counts(hole, board)
    strength = 0.0
    if draws['flush_draw']:
        strength += 0.36
    if draws['open_ended']:
        strength += 0.32
    elif draws['gutshot']:
        strength += 0.16
    # One card to come on the turn
    cap = 0.6 if len(board) == 3 else 0.35
    if len(board) == 4:
        strength *= 0.55
    return min(cap, strength)


# ─── Board texture ───────────────────────────────────────────────────────────
@dataclass(frozen=True)
class BoardTexture:
    wetness: float
    scare: float
    paired: bool
    flush_potential: float
    straight_potential: float
    high_card_density: float


DRY_BOARD = BoardTexture(0.0, 0.0, False, 0.0, 0.0, 0.0)


def board_texture(board: Sequence[Optional[Card]]) -> BoardTexture:
    """Rough texture of the community cards, each component in [0, 1]."""
    board = [c for c in board if c is not None]
    if len(board) < 3:
        return DRY_BOARD

    suits = Counter(c.suit for c in board)
    top_suit = max(suits.values())
    flush_potential = {1: 0.0, 2: 0.4}.get(top_suit, 1.0)

    ranks = {c.rank for c in board}
    if 14 in ranks:
        ranks.add(1)
    best_window = 0
    for low in range(1, 11):
        best_window = max(best_window, len(ranks & set(range(low, low + 5))))
    straight_potential = {0: 0.0, 1: 0.0, 2: 0.35, 3: 0.75}.get(best_window, 1.0)

    paired = len({c.rank for c in board}) < len(board)
    high_card_density = sum(1 for c in board if c.rank >= 10) / len(board)

    wetness = min(1.0, 0.5 * flush_potential + 0.5 * straight_potential + (0.1 if paired else 0.0))
    scare = min(1.0, 0.4 * flush_potential + 0.3 * straight_potential
                + 0.2 * high_card_density + (0.1 if paired else 0.0))
    return BoardTexture(
        wetness=wetness,
        scare=scare,
        paired=paired,
        flush_potential=flush_potential,
        straight_potential=straight_potential,
        high_card_density=high_card_density,
    )


# ─── Blockers ────────────────────────────────────────────────────────────────
def blocker_strength(hole: Sequence[Card], board: Sequence[Optional[Card]]) -> float:
    """
    Credit for hole cards that take away the hands an opponent would continue
    with: the nut-suit ace or king, cards that complete likely straights, and
    ranks that pair the board.
    """
    board = [c for c in board if c is not None]
    if len(board) < 3:
        return 0.0

    strength = 0.0
    suits = Counter(c.suit for c in board)
    flush_suit, flush_count = suits.most_common(1)[0]
    if flush_count >= 3:
        for card in hole:
            if card.suit == flush_suit and card.rank == 14:
                strength += 0.45
            elif card.suit == flush_suit and card.rank == 13:
                strength += 0.25

    board_ranks = straight_ranks(board)
    for card in hole:
        card_ranks = straight_ranks([card])
        for window in STRAIGHT_WINDOWS:
            if card_ranks & window and len(board_ranks & window) >= 3:
                strength += 0.15
                break

    board_counts = Counter(c.rank for c in board)
    for card in hole:
        if board_counts[card.rank] >= 2:
            strength += 0.2
    return min(1.0, strength)
