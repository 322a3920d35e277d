from random import Random

import pytest

from holdem.agents.base_agent import BasePokerAgent
from holdem.engine.actions import CALL, Decision
from holdem.engine.listener import TableListener
from holdem.engine.player import Seat
from holdem.engine.state import TableState


class ScriptedAgent(BasePokerAgent):
    """Plays a fixed list of actions, then calls."""

    def __init__(self, actions=(), name="Scripted"):
        super().__init__(name=name)
        self.actions = list(actions)
        self.seen = []

    def decide_action(self, seat, state, context):
        self.seen.append((seat, state, context))
        if self.actions:
            action = self.actions.pop(0)
            if isinstance(action, Decision):
                return action
            return Decision(action)
        return Decision(CALL)


class RecordingListener(TableListener):
    def __init__(self):
        self.calls = []

    def reveal_cards(self, seats, seat_indexes):
        self.calls.append(('reveal_cards', (seats, seat_indexes)))

    def update_pot(self, amount, message=""):
        self.calls.append(('update_pot', (amount, message)))

    def deal_community(self, cards):
        self.calls.append(('deal_community', (cards,)))

    def request_human_action(self, turn):
        self.calls.append(('request_human_action', (turn,)))

    def show_equity_odds(self, odds, outs=None):
        self.calls.append(('show_equity_odds', (odds, outs)))

    def announce(self, message):
        self.calls.append(('announce', (message,)))

    def hand_finished(self, result):
        self.calls.append(('hand_finished', (result,)))

    def named(self, name):
        return [args for called, args in self.calls if called == name]


def make_table(stacks, agents=None, seed=7):
    seats = []
    for i, chips in enumerate(stacks):
        agent = agents[i] if agents and i < len(agents) else ScriptedAgent()
        seats.append(Seat(i, f"P{i}", chips, agent=agent))
    return TableState(seats, Random(seed))


def play(runner):
    """Drives a hand generator with no human seat to its result."""
    try:
        next(runner)
    except StopIteration as stop:
        return stop.value
    raise AssertionError("hand asked for human input")


@pytest.fixture
def listener():
    return RecordingListener()
