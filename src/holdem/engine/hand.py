import logging
from dataclasses import dataclass, field
from random import Random
from typing import Generator, Optional

from .actions import (
    ALL_IN, CALL, FOLD, RAISE,
    Decision, DecisionContext, HumanTurn, normalize_action,
)
from .equity import count_outs, estimate_all_in_odds
from .evaluator import best_score, hand_name
from .listener import TableListener
from .player import Seat
from .pots import SidePot, build_side_pots, settle_pots, uncalled_excess
from .state import SeatView, Street, TableState

logger = logging.getLogger(__name__)


@dataclass
class HandResult:
    hand_number: int
    ended_by_fold: bool
    payouts: dict[int, int]
    message: str
    board: list = field(default_factory=list)
    side_pots: list[SidePot] = field(default_factory=list)
    pot_winners: list[list[int]] = field(default_factory=list)
    scores: dict[int, int] = field(default_factory=dict)
    refunded: int = 0
    all_in_odds: dict[int, float] = field(default_factory=dict)
    action_log: list[dict] = field(default_factory=list)

    @property
    def winners(self) -> list[int]:
        return sorted(seat for seat, amount in self.payouts.items() if amount > 0)


class Hand:
    """
    One hand of No-Limit Hold'em over a shared TableState.

    `run()` is a generator. It yields a HumanTurn whenever the human seat has
    to act and expects the chosen action to be sent back in; it returns the
    HandResult when the hand is settled.
    """

    def __init__(
            self,
            state: TableState,
            small_blind: int,
            big_blind: int,
            listener: TableListener = None,
            max_raises_per_round: int = 0,
            all_in_odds_trials: int = 600,
            rng: Random = None
    ):
        assert len(state.hand_order()) >= 2, "A hand needs at least two seats with chips"
        self.state = state
        self.small_blind = small_blind
        self.big_blind = big_blind
        self.listener = listener if listener is not None else TableListener()
        self.max_raises_per_round = max_raises_per_round
        self.all_in_odds_trials = all_in_odds_trials
        self._random = rng if rng is not None else Random()
        self.raise_count = 0
        self.all_in_odds: dict[int, float] = {}
        self.refunded = 0
        self.state.small_blind = small_blind
        self.state.big_blind = big_blind

    # ── Positions ────────────────────────────────────────────────────────────
    def get_positions(self):
        """Returns seat indexes of Small Blind, Big Blind, first to act preflop and postflop."""
        order = self.state.hand_order()
        n = len(order)
        if n == 2:
            # Heads-up: the dealer posts the small blind and acts first preflop
            return order[0].index, order[1].index, order[0].index, order[1].index
        return order[1].index, order[2].index, order[3 % n].index, order[1].index

    def deal_order(self) -> list[Seat]:
        order = self.state.hand_order()
        return order[1:] + order[:1]

    @property
    def min_raise(self) -> int:
        return max(self.big_blind, 1)

    # ── Hand flow ────────────────────────────────────────────────────────────
    def run(self) -> Generator[HumanTurn, Optional[Decision], HandResult]:
        state = self.state
        logger.info("Hand %d, blinds %d/%d", state.hand_count, self.small_blind, self.big_blind)
        sb, bb, preflop_start, postflop_start = self.get_positions()

        self.post_blinds(sb, bb)
        state.deal_hole_cards(self.deal_order())

        start = preflop_start
        while True:
            result = yield from self.betting_round(start)
            if result is not None:
                return result
            if state.street == Street.RIVER:
                return self.showdown()

            state.clear_bets()
            self.listener.clear_bet_indicators()
            state.street = state.street.next()
            self.deal_current_street()
            start = postflop_start

    def post_blinds(self, sb: int, bb: int):
        for index, amount, name in ((sb, self.small_blind, 'small-blind'), (bb, self.big_blind, 'big-blind')):
            seat = self.state.seats[index]
            posted = self.state.post_blind(seat, amount)
            action = 'all-in' if seat.all_in else name
            seat.last_action = f"posts {posted}"
            self.state.log_action(seat, action, posted)
            self.listener.set_bet_indicator(index, seat.current_bet)
        self.listener.update_pot(self.state.pot.amount, f"Blinds {self.small_blind}/{self.big_blind}")

    def deal_current_street(self):
        dealt = self.state.deal_community(self.state.street)
        self.listener.deal_community(dealt)
        if self.all_in_odds:
            self.publish_all_in_odds()

    def begin_round(self):
        self.raise_count = 0
        for seat in self.state.seats:
            seat.acted_this_round = False
            seat.raised_this_round = False

    def betting_round(self, start: int) -> Generator[HumanTurn, Optional[Decision], Optional[HandResult]]:
        """
        Runs one street of betting. Returns a HandResult when the hand ended
        during the street, None when the street settled normally.
        """
        self.begin_round()

        if self.only_one_left():
            return self.award_pot_by_fold()
        if self.should_run_out_board():
            return self.run_out_to_showdown()

        current = self.find_next_acting(start)
        if current is None:
            return self.run_out_to_showdown()

        while not self.is_round_settled():
            seat = self.state.seats[current]
            if not seat.can_act:
                current = self.find_next_acting(self.state.next_seat_index(current))
                if current is None:
                    break
                continue

            if seat.is_human:
                decision = yield self.human_turn(seat)
            else:
                decision = self.computer_decision(seat)

            raised = self.apply_action(seat, normalize_action(decision))
            if raised:
                self.mark_others_unacted(seat)

            self.listener.update_seat_label(SeatView(seat))
            self.listener.update_pot(self.state.pot.amount, f"{seat.name} {seat.last_action or 'acts'}")

            if self.only_one_left():
                return self.award_pot_by_fold()
            if self.should_run_out_board():
                return self.run_out_to_showdown()

            current = self.find_next_acting(self.state.next_seat_index(current))
            if current is None:
                break

        if self.only_one_left():
            return self.award_pot_by_fold()
        return None

    def find_next_acting(self, start: int) -> Optional[int]:
        index = start
        for _ in range(len(self.state.seats)):
            if self.state.seats[index].can_act:
                return index
            index = self.state.next_seat_index(index)
        return None

    def is_round_settled(self) -> bool:
        for seat in self.state.acting_seats():
            if not seat.acted_this_round:
                return False
            if seat.current_bet != self.state.current_bet:
                return False
        return True

    def mark_others_unacted(self, raiser: Seat):
        for seat in self.state.seats:
            if seat is raiser or not seat.can_act:
                continue
            seat.acted_this_round = False

    def only_one_left(self) -> bool:
        return len(self.state.active_seats()) <= 1

    def should_run_out_board(self) -> bool:
        """True once fewer than two seats can still bet and someone is all-in."""
        active = self.state.active_seats()
        if len(active) <= 1 or not any(s.all_in for s in active):
            return False
        actors = [s for s in active if not s.all_in]
        if len(actors) >= 2:
            return False
        if not actors:
            return True
        last = actors[0]
        return last.acted_this_round and last.current_bet == self.state.current_bet

    # ── Actions ──────────────────────────────────────────────────────────────
    def can_raise(self, seat: Seat) -> bool:
        call_amount = max(0, self.state.current_bet - seat.current_bet)
        under_cap = self.max_raises_per_round <= 0 or self.raise_count < self.max_raises_per_round
        return seat.chips - call_amount >= self.min_raise and under_cap

    def context_for(self, seat: Seat) -> DecisionContext:
        return DecisionContext(
            min_raise=self.min_raise,
            small_blind=self.small_blind,
            big_blind=self.big_blind,
            can_raise=self.can_raise(seat),
            raise_count=self.raise_count,
        )

    def human_turn(self, seat: Seat) -> HumanTurn:
        call_amount = max(0, self.state.current_bet - seat.current_bet)
        return HumanTurn(
            seat_index=seat.index,
            seat_name=seat.name,
            call_amount=min(call_amount, seat.chips),
            min_raise=self.min_raise,
            max_raise=max(self.min_raise, seat.chips - call_amount),
            can_raise=self.can_raise(seat),
            can_all_in=seat.chips > 0,
        )

    def computer_decision(self, seat: Seat) -> Decision:
        if seat.agent is None:
            return Decision(CALL, reason="no agent")
        try:
            return seat.agent.decide_action(
                SeatView(seat, reveal=True),
                self.state.view(seat.index),
                self.context_for(seat),
            )
        except Exception:
            logger.exception("Agent for %s failed, defaulting to call", seat.name)
            return Decision(CALL, reason="agent error")

    def apply_action(self, seat: Seat, decision: Decision) -> bool:
        """
        Applies an action for `seat` and returns True when it raised the bet.

        Illegal requests are downgraded rather than rejected: a raise that is
        not allowed, or that cannot cover the minimum raise, becomes a call, as
        does an all-in with an empty stack.
        """
        state = self.state
        call_amount = max(0, state.current_bet - seat.current_bet)
        bet_before = state.current_bet
        raised = False
        action = decision.action

        if action == ALL_IN and seat.chips <= 0:
            action = CALL
        if action == RAISE:
            max_raise_by = max(0, seat.chips - call_amount)
            if not self.can_raise(seat) or max_raise_by < self.min_raise:
                logger.debug("%s cannot raise, downgraded to call", seat.name)
                action = CALL

        if action == FOLD:
            seat.fold()
            state.log_action(seat, 'fold', 0)
            self.listener.set_bet_indicator(seat.index, 0)

        elif action == ALL_IN:
            contributed = state.commit_chips(seat, seat.chips)
            raised = seat.current_bet > bet_before
            if raised:
                self.raise_count += 1
                seat.raised_this_round = True
                seat.last_action = "all in"
            elif call_amount > 0 and contributed < call_amount:
                seat.last_action = "calls all in"
            elif call_amount > 0:
                seat.last_action = "calls"
            else:
                seat.last_action = "all in"
            state.log_action(seat, 'all-in', contributed)
            self.listener.set_bet_indicator(seat.index, seat.current_bet)

        elif action == RAISE:
            raise_by = decision.amount or self.min_raise
            raise_by = max(self.min_raise, min(raise_by, seat.chips - call_amount))
            needed = max(0, state.current_bet + raise_by - seat.current_bet)
            contributed = state.commit_chips(seat, needed)
            raised = seat.current_bet > bet_before
            if raised:
                self.raise_count += 1
                seat.raised_this_round = True
                seat.last_action = "all in" if seat.all_in else f"raises to {seat.current_bet}"
                state.log_action(seat, 'bet' if bet_before == 0 else 'raise', contributed)
            else:
                seat.last_action = "calls" if call_amount > 0 else "checks"
                state.log_action(seat, 'call' if call_amount > 0 else 'check', contributed)
            self.listener.set_bet_indicator(seat.index, seat.current_bet)

        else:
            contributed = state.commit_chips(seat, call_amount)
            if call_amount > 0 and contributed < call_amount:
                seat.last_action = "calls all in"
                state.log_action(seat, 'all-in', contributed)
            elif call_amount > 0:
                seat.last_action = "calls"
                state.log_action(seat, 'call', contributed)
            else:
                seat.last_action = "checks"
                state.log_action(seat, 'check', 0)
            self.listener.set_bet_indicator(seat.index, seat.current_bet)

        seat.acted_this_round = True
        if seat.chips == 0 and not seat.folded:
            seat.all_in = True
        logger.info("%s %s", seat.name, seat.last_action)
        return raised

    # ── Endings ──────────────────────────────────────────────────────────────
    def award_pot_by_fold(self) -> HandResult:
        state = self.state
        winner = state.active_seats()[0]
        assert state.pot.amount == state.contributions_total()
        amount = state.pot.amount
        state.pot.transfer_to(winner.stack, amount)
        message = f"{winner.name} wins"
        logger.info("%s wins %d uncontested", winner.name, amount)
        self.listener.update_pot(0, message)
        self.listener.update_seat_label(SeatView(winner))
        self.listener.clear_bet_indicators()
        return HandResult(
            hand_number=state.hand_count,
            ended_by_fold=True,
            payouts={winner.index: amount},
            message=message,
            board=state.board,
            action_log=list(state.action_log),
        )

    def refund_uncalled_excess(self):
        found = uncalled_excess(self.state.seats)
        if found is None:
            return
        seat, excess = found
        self.state.refund(seat, excess)
        self.refunded += excess
        logger.info("%s refunded %d uncalled", seat.name, excess)
        self.listener.set_bet_indicator(seat.index, seat.current_bet)
        self.listener.update_seat_label(SeatView(seat))
        self.listener.update_pot(self.state.pot.amount, f"{seat.name} refunded {excess}")

    def reveal(self, indexes: list[int]):
        seats = [SeatView(s, reveal=s.index in indexes) for s in self.state.seats]
        self.listener.reveal_cards(seats, indexes)

    def all_in_entries(self) -> dict[int, list]:
        return {s.index: list(s.hole_cards) for s in self.state.active_seats()}

    def publish_all_in_odds(self):
        entries = self.all_in_entries()
        self.all_in_odds = estimate_all_in_odds(
            entries, self.state.community_cards, self.all_in_odds_trials, self._random
        )
        outs = count_outs(entries, self.state.community_cards)
        self.listener.show_equity_odds(dict(self.all_in_odds), outs)

    def run_out_to_showdown(self) -> HandResult:
        state = self.state
        self.refund_uncalled_excess()
        active = state.active_seats()
        if len(active) > 1 and any(s.all_in for s in active):
            self.publish_all_in_odds()
            self.reveal([s.index for s in active])

        state.clear_bets()
        self.listener.clear_bet_indicators()
        while state.street != Street.RIVER:
            state.street = state.street.next()
            self.deal_current_street()
        return self.showdown()

    def showdown(self) -> HandResult:
        state = self.state
        self.refund_uncalled_excess()
        assert state.pot.amount == state.contributions_total(), "Pot out of sync with contributions"

        active = state.active_seats()
        active_indexes = [s.index for s in active]
        self.reveal(active_indexes)

        board = state.board
        scores = {s.index: best_score(list(s.hole_cards) + board) for s in active}
        for seat in active:
            logger.info("%s has %s", seat.name, hand_name(scores[seat.index]).replace('_', ' '))

        side_pots = build_side_pots(state.seats)
        payouts, pot_winners = settle_pots(side_pots, scores)
        for index, amount in payouts.items():
            if amount > 0:
                state.pot.transfer_to(state.seats[index].stack, amount)
                logger.info("%s wins %d", state.seats[index].name, amount)
        assert state.pot.amount == 0, f"{state.pot.amount} chips left in the pot"

        message = self.showdown_message(pot_winners, payouts)
        self.listener.update_pot(0, message)
        for seat in active:
            self.listener.update_seat_label(SeatView(seat))
        self.listener.clear_bet_indicators()
        return HandResult(
            hand_number=state.hand_count,
            ended_by_fold=False,
            payouts=payouts,
            message=message,
            board=board,
            side_pots=side_pots,
            pot_winners=pot_winners,
            scores=scores,
            refunded=self.refunded,
            all_in_odds=dict(self.all_in_odds),
            action_log=list(state.action_log),
        )

    def showdown_message(self, pot_winners: list[list[int]], payouts: dict[int, int]) -> str:
        seats = self.state.seats
        paid = [index for index, amount in payouts.items() if amount > 0]
        if len(paid) <= 1:
            name = seats[paid[0]].name if paid else "Player"
            return f"{name} wins showdown"
        if any(len(winners) > 1 for winners in pot_winners):
            return "Split pot"
        if pot_winners and len(pot_winners[0]) == 1:
            return f"{seats[pot_winners[0][0]].name} wins main pot"
        return "Multiple side-pot winners"
