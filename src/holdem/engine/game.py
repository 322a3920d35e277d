import logging
from enum import Enum
from random import Random
from typing import Optional

from ..agents.npc_agent import NpcAgent
from ..agents.profile import create_profile
from .actions import HumanTurn, normalize_action
from .chip_stack import ChipStack
from .config import TableConfig
from .escalator import BaseEscalator, DoublingEscalator
from .hand import Hand, HandResult
from .listener import TableListener
from .player import Seat
from .seed_gen import derive_agent_seeds, derive_deck_seed, derive_profile_seed, generate_game_seed
from .state import TableState

logger = logging.getLogger(__name__)

NPC_NAMES = ["Ava", "Ben", "Cleo", "Dev", "Eli", "Faye", "Gus", "Hana", "Ivo"]


class Phase(Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    AWAITING_INPUT = 'awaiting_input'


class PokerGame:
    """
    A single table played one hand at a time.

    `start_hand()` deals and plays until the hand ends or the human seat has
    to act; `submit_action()` resumes a parked hand.
    """

    def __init__(
            self,
            config: TableConfig = None,
            listener: TableListener = None,
            escalator: BaseEscalator = None,
            game_seed: int = None,
            seats: list[Seat] = None
    ):
        self.config = config if config is not None else TableConfig()
        self.listener = listener if listener is not None else TableListener()
        self.escalator = escalator if escalator is not None else DoublingEscalator(
            self.config.small_blind, self.config.big_blind, self.config.blind_increase_hands
        )
        self.game_seed = generate_game_seed(game_seed)

        # Derive seeds from the game seed
        self._random = Random(derive_deck_seed(self.game_seed))
        self._profile_random = Random(derive_profile_seed(self.game_seed))

        self.phase = Phase.IDLE
        self.pending_turn: Optional[HumanTurn] = None
        self.last_result: Optional[HandResult] = None
        self._hand: Optional[Hand] = None
        self._runner = None

        if seats is None:
            seats = self.setup_table()
        elif not 2 <= len(seats) <= 10:
            raise ValueError("Game requires between 2 and 10 seats")
        self.state = TableState(seats, self._random, self.config.seat_order)
        self.init_agents()
        logger.info("Game seed %d, %d seats", self.game_seed, len(seats))

    def setup_table(self) -> list[Seat]:
        """Creates the human seat (if any) followed by the computer seats."""
        config = self.config
        seats = []
        # Only time chips are added to the whole system, apart from rebuys
        bank = ChipStack(amount=config.starting_chips * config.seat_count)

        if config.include_human:
            seats.append(Seat(0, config.human_name, is_human=True))
        for i in range(config.npc_count):
            profile = create_profile(self._profile_random)
            name = NPC_NAMES[i % len(NPC_NAMES)]
            agent = NpcAgent(profile=profile, name=name)
            seats.append(Seat(len(seats), name, agent=agent, profile=profile))
            logger.debug("%s plays %s", name, profile.archetype)

        for seat in seats:
            bank.transfer_to(seat.stack, config.starting_chips)
        return seats

    def init_agents(self):
        agent_seeds = derive_agent_seeds(self.game_seed, len(self.state.seats))
        for seat, seed in zip(self.state.seats, agent_seeds):
            if seat.agent is not None:
                seat.agent.init_seed(seed)

    # ── Status ───────────────────────────────────────────────────────────────
    @property
    def seats(self) -> list[Seat]:
        return self.state.seats

    @property
    def human_seat(self) -> Optional[Seat]:
        for seat in self.state.seats:
            if seat.is_human:
                return seat
        return None

    @property
    def hand_in_progress(self) -> bool:
        return self.phase != Phase.IDLE

    @property
    def is_game_over(self) -> bool:
        """Over when the human is broke, or fewer than two seats can ever play again."""
        if self.hand_in_progress:
            return False
        human = self.human_seat
        if human is not None and human.chips == 0:
            return True
        funded = [s for s in self.state.seats if s.chips > 0]
        can_rebuy = self.config.allow_rebuys and any(not s.is_human for s in self.state.seats)
        return len(funded) < 2 and not can_rebuy

    # ── Hand lifecycle ───────────────────────────────────────────────────────
    def start_hand(self) -> bool:
        """
        Deals a new hand and plays it until it ends or the human must act.
        Does nothing while a hand is running or with fewer than two funded seats.
        """
        if self.hand_in_progress:
            logger.debug("start_hand ignored, hand %d still running", self.state.hand_count)
            return False

        small_blind, big_blind = self.escalator.get_blind_parameters(self.state.hand_count)
        if self.config.allow_rebuys:
            for rebuy in self.state.rebuy_if_needed(big_blind):
                self.listener.announce(f"{rebuy['name']} buys in for {rebuy['amount']}")

        funded = [s for s in self.state.seats if s.chips > 0]
        if len(funded) < 2:
            logger.warning("Not enough seats with chips to start a hand")
            return False

        self.state.reset_for_new_hand()
        self.last_result = None
        self._hand = Hand(
            self.state,
            small_blind,
            big_blind,
            self.listener,
            max_raises_per_round=self.config.max_raises_per_round,
            all_in_odds_trials=self.config.all_in_odds_trials,
            rng=self._random,
        )
        self._runner = self._hand.run()
        self.phase = Phase.RUNNING
        self._advance(None)
        return True

    def submit_action(self, action, amount: int = None) -> bool:
        """
        Resumes the hand with the human's action. Returns False, and changes
        nothing, unless the game is waiting on the human.
        """
        if self.phase != Phase.AWAITING_INPUT:
            logger.warning("Action %r submitted out of turn, ignored", action)
            return False
        payload = normalize_action(action, amount)
        self.pending_turn = None
        self.phase = Phase.RUNNING
        self._advance(payload)
        return True

    def _advance(self, payload):
        try:
            if payload is None:
                turn = next(self._runner)
            else:
                turn = self._runner.send(payload)
        except StopIteration as stop:
            self._finish(stop.value)
            return
        self.pending_turn = turn
        self.phase = Phase.AWAITING_INPUT
        self.listener.request_human_action(turn)

    def _finish(self, result: HandResult):
        self.phase = Phase.IDLE
        self.pending_turn = None
        self._hand = None
        self._runner = None
        self.last_result = result

        view = self.state.view()
        for seat in self.state.seats:
            if seat.agent is not None:
                seat.agent.hand_ended(result, view)
        self.listener.hand_finished(result)

    def play_hands(self, count: int) -> list[HandResult]:
        """Plays up to `count` hands between computer seats. Stops early when the game is over."""
        if self.human_seat is not None:
            raise RuntimeError("play_hands needs a table without a human seat")
        played = []
        for _ in range(count):
            if self.is_game_over or not self.start_hand():
                break
            played.append(self.last_result)
        return played
