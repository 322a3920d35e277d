import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .player import Seat

logger = logging.getLogger(__name__)


@dataclass
class SidePot:
    amount: int
    eligible: list[int] = field(default_factory=list)        # seat indexes that can win it
    contributors: list[int] = field(default_factory=list)    # seat indexes that paid into it
    layer: int = 0                                           # chips per contributor

    @property
    def is_degenerate(self) -> bool:
        return self.amount > 0 and not self.eligible


def build_side_pots(seats: Iterable[Seat]) -> list[SidePot]:
    """
    Layers the pot by distinct total contributions, smallest level first.

    Each level holds (level - previous level) from every seat that reached it.
    Folded seats pay into layers but are never eligible to win them.
    """
    contributors = [s for s in seats if s.total_contribution > 0]
    if not contributors:
        return []

    levels = sorted({s.total_contribution for s in contributors})
    side_pots = []
    previous = 0
    for level in levels:
        in_layer = [s for s in contributors if s.total_contribution >= level]
        layer = level - previous
        previous = level
        amount = layer * len(in_layer)
        if amount <= 0:
            continue
        side_pots.append(SidePot(
            amount=amount,
            eligible=[s.index for s in in_layer if not s.folded],
            contributors=[s.index for s in in_layer],
            layer=layer,
        ))
    return side_pots


def uncalled_excess(seats: Iterable[Seat]) -> Optional[tuple[Seat, int]]:
    """
    The largest live contributor's chips beyond the next largest contribution,
    when that seat is all-in and nobody matched it. Folded seats count toward
    the match since their chips stay in the pot. Returns None when there is
    nothing to refund.
    """
    contributors = [s for s in seats if s.total_contribution > 0]
    live = [s for s in contributors if not s.folded]
    if len(live) < 2:
        return None
    top = max(live, key=lambda s: s.total_contribution)
    matched = max((s.total_contribution for s in contributors if s is not top), default=0)
    excess = top.total_contribution - matched
    if excess <= 0 or not top.all_in:
        return None
    return top, excess


def distribute_pot(amount: int, winners: Iterable[int], payouts: dict[int, int]) -> None:
    """
    Splits `amount` evenly between winners. Odd chips go one at a time to the
    winners in ascending seat order.
    """
    ordered = sorted(winners)
    if not ordered or amount <= 0:
        return
    share, remainder = divmod(amount, len(ordered))
    for seat in ordered:
        payout = share + (1 if remainder > 0 else 0)
        remainder = max(0, remainder - 1)
        payouts[seat] = payouts.get(seat, 0) + payout


def settle_pots(side_pots: list[SidePot], scores: dict[int, int]) -> tuple[dict[int, int], list[list[int]]]:
    """
    Awards each pot to its best eligible score.

    Returns the payout per seat and the winners of each pot. A pot with no
    scored eligible seat cannot be awarded; it is logged and refunded to the
    seats that paid into it so no chips leave the table.
    """
    payouts: dict[int, int] = {}
    pot_winners: list[list[int]] = []
    for number, pot in enumerate(side_pots):
        scored = [seat for seat in pot.eligible if seat in scores]
        if not scored:
            logger.warning("Pot %d of %d chips has no eligible winner; refunding contributors %s",
                           number, pot.amount, pot.contributors)
            for seat in pot.contributors:
                payouts[seat] = payouts.get(seat, 0) + pot.layer
            pot_winners.append([])
            continue
        best = max(scores[seat] for seat in scored)
        winners = [seat for seat in scored if scores[seat] == best]
        distribute_pot(pot.amount, winners, payouts)
        pot_winners.append(sorted(winners))
    return payouts, pot_winners
