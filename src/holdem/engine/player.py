from typing import Optional

from .cards import Card
from .chip_stack import ChipStack


class Seat:
    def __init__(
            self,
            index: int,
            name: str = "Player",
            chips: int = 0,
            is_human: bool = False,
            agent=None,
            profile=None
    ):
        self.index = index
        self.name = name
        self.stack = ChipStack(amount=chips)
        self.is_human = is_human
        self.agent = agent          # decision engine for computer seats
        self.profile = profile      # PersonalityProfile for computer seats
        self.hole_cards: list[Optional[Card]] = [None, None]
        self.current_bet = 0        # committed this street
        self.total_contribution = 0  # committed this hand
        self.folded = False
        self.all_in = False
        self.sitting_out = False    # no chips when the hand started
        self.acted_this_round = False
        self.raised_this_round = False
        self.last_action = ""

    def __repr__(self):
        return f"{self.name} (seat {self.index}, {self.chips} chips)"

    @property
    def chips(self) -> int:
        return self.stack.amount

    @property
    def can_act(self) -> bool:
        return not self.folded and not self.all_in

    @property
    def has_cards(self) -> bool:
        return all(c is not None for c in self.hole_cards)

    def reset_for_hand(self):
        self.hole_cards = [None, None]
        self.current_bet = 0
        self.total_contribution = 0
        self.all_in = False
        self.acted_this_round = False
        self.raised_this_round = False
        self.last_action = ""
        # A seat with no chips sits the hand out and never competes for a pot
        self.sitting_out = self.chips == 0
        self.folded = self.sitting_out

    def reset_for_street(self):
        self.current_bet = 0
        self.acted_this_round = False
        self.raised_this_round = False

    def receive_hole_cards(self, hole_cards: list[Card]):
        if len(hole_cards) != 2:
            raise ValueError("Wrong hole card amount")
        self.hole_cards = list(hole_cards)

    def take_chips(self, pot: ChipStack, amount: int) -> int:
        """
        Moves up to `amount` chips into the pot and returns what actually
        moved. Goes all-in when the stack reaches exactly zero.
        """
        actual = min(max(0, amount), self.chips)
        self.stack.transfer_to(pot, actual)
        if self.chips == 0:
            self.all_in = True
        return actual

    def refund(self, pot: ChipStack, amount: int):
        pot.transfer_to(self.stack, amount)
        self.total_contribution -= amount
        self.current_bet = max(0, self.current_bet - amount)
        self.all_in = self.chips == 0

    def fold(self):
        self.folded = True
        self.last_action = "folds"
