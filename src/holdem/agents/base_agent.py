from random import Random


class BasePokerAgent:
    def __init__(self, seed: int = None, name: str = "Base Agent"):
        self.name = name
        self.seed = None
        self._random = None
        self.init_seed(seed)

    def __repr__(self):
        return self.name

    def init_seed(self, seed: int):
        self.seed = seed
        self._random = Random(seed)

    def decide_action(self, seat, state, context):
        """
        Called when it is this agent's seat to act.

        Receives the acting SeatView (with its own hole cards), a read-only
        TableView and a DecisionContext. Must return a Decision and must not
        touch the table.
        """
        raise NotImplementedError

    def hand_ended(self, result, state):
        """
        Called at the very end of a hand with its HandResult.
        Use this to update any model of opponent tendencies.
        """
        pass
