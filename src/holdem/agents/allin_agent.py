from ..engine.actions import ALL_IN, Decision
from .base_agent import BasePokerAgent


class AllInAgent(BasePokerAgent):
    """Moves all in on every decision."""

    def __init__(self, seed: int = None, name: str = "All-in Agent"):
        super().__init__(seed, name)

    def decide_action(self, seat, state, context):
        return Decision(ALL_IN, seat.chips, reason="always jam")
