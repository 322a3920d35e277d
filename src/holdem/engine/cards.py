from dataclasses import dataclass
from random import Random
from typing import Iterable, Optional, Union

from treys import Card as TreysCard

RANKS = '23456789TJQKA'
SUITS = 'shdc'
RANK_TO_VAL = {r: i + 2 for i, r in enumerate(RANKS)}   # '2'=2 … 'A'=14
VAL_TO_RANK = {v: r for r, v in RANK_TO_VAL.items()}


@dataclass(frozen=True)
class Card:
    rank: int
    suit: str

    def __post_init__(self):
        if self.rank not in VAL_TO_RANK:
            raise ValueError(f"Card rank must be 2..14, got {self.rank!r}")
        if self.suit not in SUITS:
            raise ValueError(f"Card suit must be one of {SUITS!r}, got {self.suit!r}")

    def __str__(self):
        return f"{VAL_TO_RANK[self.rank]}{self.suit}"

    def __repr__(self):
        return str(self)

    @staticmethod
    def from_str(s: str) -> 'Card':
        s = s.strip()
        if len(s) != 2:
            raise ValueError(f"Bad card string: {s!r}")
        rank, suit = s[0].upper(), s[1].lower()
        if rank not in RANK_TO_VAL or suit not in SUITS:
            raise ValueError(f"Bad card string: {s!r}")
        return Card(RANK_TO_VAL[rank], suit)

    def to_treys(self) -> int:
        """Card in the treys integer encoding."""
        return TreysCard.new(str(self))


def parse_cards(cards: Iterable[Union[str, Card]]) -> list[Card]:
    """Accepts Card objects or strings like 'As', 'Td'."""
    return [c if isinstance(c, Card) else Card.from_str(c) for c in cards]


def pretty_cards(cards: Iterable[Optional[Card]]) -> str:
    known = [c for c in cards if c is not None]
    if not known:
        return "[ ]"
    return TreysCard.ints_to_pretty_str([c.to_treys() for c in known])


def create_deck() -> list[Card]:
    return [Card(RANK_TO_VAL[r], s) for s in SUITS for r in RANKS]


def create_deck_excluding(known: Iterable[Optional[Card]]) -> list[Card]:
    """Full deck minus the known cards. Empty slots (None) are ignored."""
    dead = {c for c in known if c is not None}
    return [c for c in create_deck() if c not in dead]


def shuffle(cards: list[Card], rng: Random) -> list[Card]:
    rng.shuffle(cards)
    return cards


class Deck:
    """A stack of cards. Cards are drawn from the end."""

    def __init__(self, rng: Random = None, cards: Iterable[Card] = None):
        self._random = rng if rng is not None else Random()
        self.cards = list(cards) if cards is not None else create_deck()

    def __len__(self):
        return len(self.cards)

    def __repr__(self):
        return f"Deck of {len(self.cards)}"

    def shuffle(self):
        shuffle(self.cards, self._random)

    def reset(self):
        """Restores a full 52-card deck and shuffles it."""
        self.cards = create_deck()
        self.shuffle()

    def draw(self, amount: int = None):
        """Draws one card, or a list of cards when an amount is given."""
        if amount is None:
            if not self.cards:
                raise ValueError("Cannot draw from an empty deck")
            return self.cards.pop()
        if amount < 0:
            raise ValueError("Cannot draw negative amount of cards")
        if amount > len(self.cards):
            raise ValueError(f"Deck has insufficient cards ({len(self.cards)} < {amount})")
        return [self.cards.pop() for _ in range(amount)]
