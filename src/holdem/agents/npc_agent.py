"""
Personality-driven opponent for No-Limit Hold'em.

Every decision runs the same ordered cascade:
  1. forced all-in when the stack cannot cover the call
  2. fold checks against the price and the table's pressure
  3. when raising is allowed: jam, value raise (or trap), bluff, probe bet
  4. otherwise call or check

Equity comes from Monte-Carlo sampling, cached per decision point; the
profile tunes every threshold and the seeded RNG decides the coin flips.
"""
import logging
from typing import Optional

from ..engine.actions import ALL_IN, CALL, FOLD, RAISE, Decision, DecisionContext
from ..engine.equity import (
    UNKNOWN_HOLE_EQUITY, EquityCache, estimate_equity, trial_count,
)
from ..engine.state import Street
from .base_agent import BasePokerAgent
from .hand_reading import (
    BoardTexture, blocker_strength, board_texture, draw_strength, made_hand_strength,
)
from .profile import PersonalityProfile
from .reads import OpponentModel, OpponentRead, read_opponent, table_read

logger = logging.getLogger(__name__)

# Share of the resulting pot a standard raise targets
STREET_SIZING = {
    Street.PREFLOP: 0.85,
    Street.FLOP: 0.55,
    Street.TURN: 0.65,
    Street.RIVER: 0.75,
}
DRAWING = 0.3           # draw strength that keeps a hand in
JAM_EQUITY = 0.9
LOW_SPR = 1.5
MAX_BLUFF_CHANCE = 0.35


class NpcAgent(BasePokerAgent):

    def __init__(
            self,
            profile: PersonalityProfile = None,
            seed: int = None,
            name: str = "NPC Agent",
            cache_capacity: int = 220
    ):
        super().__init__(seed, name)
        self.profile = profile
        self.cache = EquityCache(cache_capacity)
        self.opponents: dict[int, OpponentModel] = {}
        self.seat_index: Optional[int] = None

    # ── Main decision ────────────────────────────────────────────────────────
    def decide_action(self, seat, state, context: DecisionContext) -> Decision:
        profile = self.profile or seat.profile
        if profile is None:
            return Decision(CALL, reason="no profile")
        self.seat_index = seat.index

        hole = seat.hole_cards
        board = state.board
        stack = seat.chips
        pot = state.pot
        call_amount = max(0, state.current_bet - seat.current_bet)
        pot_odds = call_amount / (pot + call_amount) if call_amount else 0.0
        spr = stack / max(pot, 1)

        opponents = [s for s in state.seats if s.index != seat.index and not s.folded]
        equity = self.estimate(hole, board, len(opponents), state.street, profile)
        strength = made_hand_strength(hole, board)
        draw = draw_strength(hole, board)
        blockers = blocker_strength(hole, board)
        texture = board_texture(board)
        read = table_read(read_opponent(s, self.opponents.get(s.index), state) for s in opponents)
        aggression = self.effective_aggression(profile, seat, opponents)

        logger.debug(
            "%s: equity %.2f strength %.2f draw %.2f pot odds %.2f spr %.1f",
            seat.name, equity, strength, draw, pot_odds, spr,
        )

        # 1. Stack does not cover the call: all in or fold
        if call_amount > 0 and stack <= call_amount:
            threshold = pot_odds - 0.05 - 0.1 * profile.pressure_tolerance
            if equity >= threshold or draw >= DRAWING:
                return Decision(ALL_IN, stack, reason="forced all-in")
            return Decision(FOLD, reason="cannot cover")

        # 2. Fold checks
        if call_amount > 0:
            decision = self.fold_check(
                profile, context, equity, strength, draw, blockers, pot_odds,
                read, len(opponents), stack, call_amount,
            )
            if decision is not None:
                return decision

        # 3. Aggressive lines
        if context.can_raise:
            decision = self.aggressive_line(
                profile, seat, context, equity, strength, draw, blockers,
                texture, read, aggression, pot, call_amount, spr, state.street,
            )
            if decision is not None:
                return decision

        # 4. Call or check
        return Decision(CALL, reason="call" if call_amount > 0 else "check")

    def fold_check(
            self, profile, context, equity, strength, draw, blockers, pot_odds,
            read: OpponentRead, live_opponents, stack, call_amount
    ) -> Optional[Decision]:
        urgency = 0.08 if stack < 10 * context.big_blind else 0.0
        required = (
            pot_odds
            + 0.15 * read.pressure * (1.0 - profile.pressure_tolerance)
            + 0.04 * max(0, live_opponents - 1)
            - 0.5 * draw
            - urgency
        )
        strong = strength >= profile.value_threshold
        drawing = draw >= DRAWING
        if equity + 0.1 * blockers < required and not strong and not drawing:
            return Decision(FOLD, reason="low equity")

        # Calling off a big share of the stack needs a real hand
        risk = call_amount / max(stack, 1)
        if (risk > 0.35 and equity < 0.45 + 0.1 * profile.discipline
                and strength < profile.thin_value_threshold and not drawing):
            return Decision(FOLD, reason="too much risk")
        return None

    def aggressive_line(
            self, profile, seat, context, equity, strength, draw, blockers,
            texture: BoardTexture, read: OpponentRead, aggression, pot, call_amount,
            spr, street
    ) -> Optional[Decision]:
        stack = seat.chips

        # a. Jam
        if equity >= JAM_EQUITY or (spr < LOW_SPR and equity >= 0.55):
            return Decision(ALL_IN, stack, reason="jam")

        # b. Value, sometimes slow-played
        value_line = profile.value_threshold - 0.1 * (aggression - 0.5)
        if equity >= value_line and not (seat.raised_this_round and equity < 0.7):
            if (equity >= 0.8 and texture.wetness < 0.35
                    and self._random.random() < profile.trap_frequency):
                return Decision(CALL, reason="trap")
            amount = self.raise_size(context, street, pot, call_amount, stack, texture, read, aggression, spr)
            return Decision(RAISE, amount, reason="value")

        # c. Bluff window
        low_edge = 0.1 + 0.15 * profile.bluff_selectivity
        if low_edge <= equity + 0.5 * draw + 0.2 * blockers and equity < value_line:
            chance = self.bluff_chance(profile, seat, context, equity, texture, read, aggression)
            if self._random.random() < chance:
                amount = self.raise_size(context, street, pot, call_amount, stack, texture, read, aggression, spr)
                return Decision(RAISE, amount, reason="bluff")

        # d. Probe or thin value when nobody has bet
        if call_amount == 0:
            favour = self.fold_equity_signal(texture, read)
            if (equity >= profile.thin_value_threshold - 0.1 * favour
                    and self._random.random() < aggression * (0.4 + 0.4 * favour)):
                amount = self.raise_size(
                    context, street, pot, call_amount, stack, texture, read, aggression, spr, thin=True
                )
                return Decision(RAISE, amount, reason="probe")
        return None

    @staticmethod
    def fold_equity_signal(texture: BoardTexture, read: OpponentRead) -> float:
        """How much the board and the table favour a bet getting folds, in [0, 1]."""
        signal = 0.4 * texture.scare + 0.6 * read.fold_likelihood + 0.2 * (0.5 - read.aggression)
        return max(0.0, min(1.0, signal))

    def bluff_chance(self, profile, seat, context, equity, texture, read, aggression) -> float:
        chance = profile.bluff_frequency * (1.0 - equity) * (0.7 + 0.6 * aggression)
        chance *= 0.4 + self.fold_equity_signal(texture, read)
        # Damped in re-raise wars and after our own raise
        if context.raise_count >= 2:
            chance *= 0.25
        if seat.raised_this_round:
            chance *= 0.3
        return min(MAX_BLUFF_CHANCE, chance)

    # ── Helpers ──────────────────────────────────────────────────────────────
    def estimate(self, hole, board, live_opponents, street, profile) -> float:
        if any(c is None for c in hole):
            return UNKNOWN_HOLE_EQUITY
        if live_opponents <= 0:
            return 1.0
        key = self.cache.key(hole, board, live_opponents)
        equity = self.cache.get(key)
        if equity is None:
            trials = trial_count(street, profile.simulation_scale, live_opponents)
            equity = estimate_equity(hole, board, live_opponents, trials, self._random)
            self.cache.put(key, equity)
        # Less disciplined profiles misjudge their equity more
        error = (1.0 - profile.discipline) * 0.1
        noisy = equity + self._random.uniform(-error, error)
        return max(0.02, min(0.98, noisy))

    @staticmethod
    def effective_aggression(profile, seat, opponents) -> float:
        """Profile aggression, raised when covering the table and lowered when short."""
        stacks = [s.chips for s in opponents]
        if not stacks or sum(stacks) == 0:
            return profile.aggression
        ratio = seat.chips / (sum(stacks) / len(stacks))
        shift = 0.15 * max(-1.0, min(1.0, ratio - 1.0))
        return max(0.1, min(1.2, profile.aggression + shift))

    @staticmethod
    def raise_size(
            context, street, pot, call_amount, stack, texture, read, aggression, spr, thin=False
    ) -> int:
        """Raise increment over the current bet, a share of the pot after calling."""
        resulting_pot = pot + call_amount
        fraction = STREET_SIZING.get(street, 0.6)
        fraction += 0.15 * texture.wetness + 0.1 * read.pressure + 0.2 * (aggression - 0.5)
        if spr < 3:
            fraction += 0.2
        if thin:
            fraction *= 0.7
        target = resulting_pot * fraction

        step = max(1, context.small_blind or context.min_raise)
        amount = int(round(target / step)) * step
        max_raise = max(context.min_raise, stack - call_amount)
        return max(context.min_raise, min(amount, max_raise))

    def hand_ended(self, result, state=None):
        """Updates opponent models from the hand's action log."""
        seats = {entry['seat'] for entry in result.action_log}
        for index in seats:
            if index == self.seat_index:
                continue
            if index not in self.opponents:
                self.opponents[index] = OpponentModel(index)
            self.opponents[index].update(result.action_log)
        self.cache.clear()
