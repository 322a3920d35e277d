"""
Table configuration.

Defaults for a single table against computer seats. The presentation layer
owns the real values and passes them in; nothing in the engine reads
globals.
"""
from dataclasses import dataclass, field, fields
from typing import Optional


@dataclass
class TableConfig:
    starting_chips: int = 1000
    small_blind: int = 5
    big_blind: int = 10
    blind_increase_hands: int = 10      # blinds double every N hands
    npc_count: int = 3
    max_raises_per_round: int = 4       # 0 for no cap
    allow_rebuys: bool = True
    all_in_odds_trials: int = 600
    human_name: str = "You"
    include_human: bool = True
    seat_order: Optional[list[int]] = field(default=None)   # clockwise seat indexes

    def __post_init__(self):
        if self.small_blind <= 0 or self.big_blind < self.small_blind:
            raise ValueError("Blinds must be positive with big blind >= small blind")
        if self.seat_count < 2:
            raise ValueError("A table needs at least two seats")
        if self.seat_order is not None and sorted(self.seat_order) != list(range(self.seat_count)):
            raise ValueError(f"seat_order must be a permutation of 0..{self.seat_count - 1}")

    @property
    def seat_count(self) -> int:
        return self.npc_count + (1 if self.include_human else 0)

    @classmethod
    def from_dict(cls, values: dict) -> 'TableConfig':
        """Builds a config from a dict, ignoring keys it does not know."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})
