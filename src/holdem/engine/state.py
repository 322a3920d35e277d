"""
Shared table state for one game.

`TableState` is mutated only by the betting engine. Decision engines and the
presentation layer get a `TableView`, which exposes the same information read
only and hides every hole card except the viewer's own.
"""
import logging
from enum import Enum
from random import Random
from typing import Iterable, Optional

from .cards import Card, Deck, pretty_cards
from .chip_stack import ChipStack
from .player import Seat

logger = logging.getLogger(__name__)


class Street(Enum):
    PREFLOP = 'preflop'
    FLOP = 'flop'
    TURN = 'turn'
    RIVER = 'river'

    def next(self) -> 'Street':
        order = list(Street)
        index = order.index(self)
        return order[min(index + 1, len(order) - 1)]


# Community slots filled on each street
STREET_SLOTS = {
    Street.FLOP: (0, 1, 2),
    Street.TURN: (3,),
    Street.RIVER: (4,),
}


class TableState:
    def __init__(self, seats: Iterable[Seat] = (), rng: Random = None, seat_order: list[int] = None):
        self.seats: list[Seat] = list(seats)
        self.seat_order = list(seat_order) if seat_order else [s.index for s in self.seats]
        self._random = rng if rng is not None else Random()
        self.deck = Deck(self._random)
        self.community_cards: list[Optional[Card]] = [None] * 5
        self.burn_pile: list[Card] = []
        self.pot = ChipStack()
        self.current_bet = 0
        self.street = Street.PREFLOP
        self.dealer_index = 0       # position in seat_order
        self.hand_count = 0
        self.small_blind = 0
        self.big_blind = 0
        self.action_log: list[dict] = []

    def view(self, viewer: int = None) -> 'TableView':
        return TableView(self, viewer)

    @property
    def board(self) -> list[Card]:
        return [c for c in self.community_cards if c is not None]

    @property
    def dealer_seat(self) -> int:
        return self.seat_order[self.dealer_index % len(self.seat_order)]

    def active_seats(self) -> list[Seat]:
        """Seats still contesting the pot."""
        return [s for s in self.seats if not s.folded]

    def acting_seats(self) -> list[Seat]:
        """Seats that can still voluntarily act."""
        return [s for s in self.seats if s.can_act]

    def hand_order(self) -> list[Seat]:
        """Seats dealt into this hand, clockwise starting with the dealer."""
        n = len(self.seat_order)
        order = [self.seat_order[(self.dealer_index + i) % n] for i in range(n)]
        return [self.seats[i] for i in order if not self.seats[i].sitting_out]

    def next_seat_index(self, current: int) -> int:
        position = self.seat_order.index(current)
        return self.seat_order[(position + 1) % len(self.seat_order)]

    def reset_for_new_hand(self, advance_dealer: bool = True):
        if advance_dealer and self.hand_count > 0:
            self.advance_dealer()
        self.deck.reset()
        for seat in self.seats:
            seat.reset_for_hand()
        self.community_cards = [None] * 5
        self.burn_pile = []
        assert self.pot.amount == 0, "Pot must be settled before a new hand"
        self.current_bet = 0
        self.street = Street.PREFLOP
        self.action_log = []
        self.hand_count += 1

    def advance_dealer(self):
        """Moves the button to the next seat that still has chips."""
        n = len(self.seat_order)
        for step in range(1, n + 1):
            position = (self.dealer_index + step) % n
            if self.seats[self.seat_order[position]].chips > 0:
                self.dealer_index = position
                return

    def commit_chips(self, seat: Seat, amount: int) -> int:
        contribution = seat.take_chips(self.pot, amount)
        if contribution <= 0:
            return 0
        seat.current_bet += contribution
        seat.total_contribution += contribution
        self.current_bet = max(self.current_bet, seat.current_bet)
        return contribution

    def post_blind(self, seat: Seat, amount: int) -> int:
        """Short stacks post what they have and are all-in."""
        return self.commit_chips(seat, amount)

    def clear_bets(self):
        self.current_bet = 0
        for seat in self.seats:
            seat.reset_for_street()

    def refund(self, seat: Seat, amount: int):
        seat.refund(self.pot, amount)
        self.current_bet = max((s.current_bet for s in self.seats if not s.folded), default=0)

    def deal_hole_cards(self, order: list[Seat]):
        for round_ in range(2):
            for seat in order:
                seat.hole_cards[round_] = self.deck.draw()
        for seat in order:
            logger.debug("Dealt hole cards to %s: %s", seat.name, pretty_cards(seat.hole_cards))

    def deal_community(self, street: Street) -> list[tuple[int, Card]]:
        """Burns one card, then fills the street's community slots left to right."""
        self.burn_pile.append(self.deck.draw())
        dealt = []
        for slot in STREET_SLOTS[street]:
            if self.community_cards[slot] is not None:
                raise ValueError(f"Community slot {slot} already dealt")
            card = self.deck.draw()
            self.community_cards[slot] = card
            dealt.append((slot, card))
        logger.info("%s: %s", street.value.capitalize(), pretty_cards(self.community_cards))
        return dealt

    def log_action(self, seat: Seat, action: str, amount: int):
        self.action_log.append({
            'seat': seat.index,
            'action': action,
            'amount': amount,
            'street': self.street.value,
        })

    def contributions_total(self) -> int:
        return sum(s.total_contribution for s in self.seats)

    def average_stack(self) -> int:
        stacks = [s.chips for s in self.seats if s.chips > 0]
        return sum(stacks) // len(stacks) if stacks else 0

    def rebuy_if_needed(self, big_blind: int) -> list[dict]:
        """Busted computer seats buy back in around the average stack."""
        announcements = []
        average = self.average_stack()
        for seat in self.seats:
            if seat.is_human or seat.chips > 0:
                continue
            base = max(average, big_blind * 40)
            variation = int(base * 0.2)
            amount = base + self._random.randint(-variation, variation)
            min_buy_in = max(big_blind * 20, 10)
            min_rounded = -(-min_buy_in // 10) * 10
            rounded = int(round(amount / 10)) * 10
            chips = max(rounded, min_rounded)
            seat.stack.add(chips)
            announcements.append({'name': seat.name, 'amount': chips})
            logger.info("%s buys in for %d", seat.name, chips)
        return announcements


class SeatView:
    """Read-only view of a seat. Hole cards are visible only to their owner."""

    def __init__(self, seat: Seat, reveal: bool = False):
        self._seat = seat
        self._reveal = reveal

    def __repr__(self):
        return f"SeatView({self._seat!r})"

    @property
    def index(self) -> int:
        return self._seat.index

    @property
    def name(self) -> str:
        return self._seat.name

    @property
    def chips(self) -> int:
        return self._seat.chips

    @property
    def is_human(self) -> bool:
        return self._seat.is_human

    @property
    def profile(self):
        return self._seat.profile if self._reveal else None

    @property
    def hole_cards(self) -> tuple:
        if self._reveal:
            return tuple(self._seat.hole_cards)
        return None, None

    @property
    def current_bet(self) -> int:
        return self._seat.current_bet

    @property
    def total_contribution(self) -> int:
        return self._seat.total_contribution

    @property
    def folded(self) -> bool:
        return self._seat.folded

    @property
    def all_in(self) -> bool:
        return self._seat.all_in

    @property
    def sitting_out(self) -> bool:
        return self._seat.sitting_out

    @property
    def acted_this_round(self) -> bool:
        return self._seat.acted_this_round

    @property
    def raised_this_round(self) -> bool:
        return self._seat.raised_this_round

    @property
    def last_action(self) -> str:
        return self._seat.last_action


class TableView:
    """Read-only view of the table, as seen from `viewer` (a seat index) if given."""

    def __init__(self, state: TableState, viewer: int = None):
        self._state = state
        self._viewer = viewer

    @property
    def seats(self) -> tuple[SeatView, ...]:
        return tuple(SeatView(s, reveal=s.index == self._viewer) for s in self._state.seats)

    def seat(self, index: int) -> SeatView:
        return SeatView(self._state.seats[index], reveal=index == self._viewer)

    @property
    def community_cards(self) -> tuple:
        return tuple(self._state.community_cards)

    @property
    def board(self) -> list[Card]:
        return self._state.board

    @property
    def pot(self) -> int:
        return self._state.pot.amount

    @property
    def current_bet(self) -> int:
        return self._state.current_bet

    @property
    def street(self) -> Street:
        return self._state.street

    @property
    def dealer_seat(self) -> int:
        return self._state.dealer_seat

    @property
    def hand_count(self) -> int:
        return self._state.hand_count

    @property
    def small_blind(self) -> int:
        return self._state.small_blind

    @property
    def big_blind(self) -> int:
        return self._state.big_blind

    @property
    def burn_count(self) -> int:
        return len(self._state.burn_pile)

    @property
    def action_log(self) -> tuple[dict, ...]:
        return tuple(dict(entry) for entry in self._state.action_log)
