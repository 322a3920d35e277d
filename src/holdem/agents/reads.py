"""
Opponent reads for the decision engine.

Long-run tendencies are counted per seat at the end of every hand; the
current-street picture comes from the public action log.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

AGGRESSIVE_ACTIONS = ('bet', 'raise', 'all-in')
PASSIVE_ACTIONS = ('call', 'check')


@dataclass(frozen=True)
class OpponentRead:
    pressure: float          # how hard this seat is betting into us right now
    aggression: float        # blended current and long-run aggression
    fold_likelihood: float   # chance this seat gives up to a bet


NEUTRAL_READ = OpponentRead(pressure=0.0, aggression=0.5, fold_likelihood=0.45)


class OpponentModel:
    """Per-opponent statistics accumulated over hands played."""

    def __init__(self, seat_index: int):
        self.seat_index = seat_index
        self.hands_seen = 0
        self.aggressive = 0     # bets, raises, all-ins
        self.passive = 0        # calls and checks
        self.folds = 0
        self.voluntary = 0      # hands with chips put in beyond the blinds

    def __repr__(self):
        return (f"OpponentModel(seat={self.seat_index}, hands={self.hands_seen}, "
                f"agg={self.aggressive}, passive={self.passive}, folds={self.folds})")

    @property
    def aggression_factor(self) -> float:
        """AF = bets+raises / calls. >2 = aggressive, <1 = passive."""
        return self.aggressive / max(self.passive, 1)

    @property
    def fold_rate(self) -> float:
        return self.folds / max(self.hands_seen, 1)

    @property
    def vpip_rate(self) -> float:
        return self.voluntary / max(self.hands_seen, 1)

    def update(self, action_log: Iterable[dict]):
        """Counts this seat's actions from one hand's log."""
        played = False
        voluntary = False
        for entry in action_log:
            if entry['seat'] != self.seat_index:
                continue
            played = True
            action = entry['action']
            if action in AGGRESSIVE_ACTIONS:
                self.aggressive += 1
                voluntary = True
            elif action in PASSIVE_ACTIONS:
                self.passive += 1
                if action == 'call':
                    voluntary = True
            elif action == 'fold':
                self.folds += 1
        if played:
            self.hands_seen += 1
            if voluntary:
                self.voluntary += 1


def read_opponent(seat, model: Optional[OpponentModel], state) -> OpponentRead:
    """
    Reads one opponent from its current-street actions and its long-run model.

    Fold likelihood drops as the seat commits more of its stack.
    """
    street_actions = [
        entry['action'] for entry in state.action_log
        if entry['seat'] == seat.index and entry['street'] == state.street.value
    ]
    raises = sum(1 for a in street_actions if a in AGGRESSIVE_ACTIONS)

    pot = max(state.pot, 1)
    bet_share = min(1.0, seat.current_bet / pot)
    pressure = min(1.0, 0.25 * raises + 0.5 * bet_share + (0.3 if seat.all_in else 0.0))

    long_run = 0.5
    if model is not None and model.hands_seen >= 3:
        long_run = min(1.0, model.aggression_factor / 3.0)
    current = 1.0 if raises else (0.3 if street_actions else 0.5)
    aggression = 0.6 * current + 0.4 * long_run

    fold_base = NEUTRAL_READ.fold_likelihood
    if model is not None and model.hands_seen >= 3:
        fold_base = 0.5 * fold_base + 0.5 * min(0.9, model.fold_rate)
        # Loose seats that play many hands give up less often
        fold_base *= 1.0 - 0.3 * model.vpip_rate
    committed = seat.total_contribution / max(seat.total_contribution + seat.chips, 1)
    fold_likelihood = fold_base * (1.0 - committed) * (1.0 - 0.5 * pressure)
    if seat.all_in:
        fold_likelihood = 0.0

    return OpponentRead(
        pressure=pressure,
        aggression=aggression,
        fold_likelihood=max(0.0, min(1.0, fold_likelihood)),
    )


def table_read(reads: Iterable[OpponentRead]) -> OpponentRead:
    """Aggregates reads of every live opponent: all of them must fold for a bluff to work."""
    reads = list(reads)
    if not reads:
        return NEUTRAL_READ
    fold_likelihood = 1.0
    for read in reads:
        fold_likelihood *= read.fold_likelihood
    return OpponentRead(
        pressure=max(r.pressure for r in reads),
        aggression=sum(r.aggression for r in reads) / len(reads),
        fold_likelihood=fold_likelihood,
    )
