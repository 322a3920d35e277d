from abc import ABC, abstractmethod


class BaseEscalator(ABC):
    """
    Abstract base class for blind schedules.
    Any escalator must provide the blinds for the upcoming hand.
    """

    @abstractmethod
    def get_blind_parameters(self, hand_count: int):
        """
        Calculates the blinds for the upcoming hand.

        Args:
            hand_count (int): Hands already completed this game (starts at 0).

        Returns:
            tuple: (small_blind, big_blind)
        """
        pass


class DoublingEscalator(BaseEscalator):
    def __init__(self, small_blind: int = 5, big_blind: int = 10, hands_per_level: int = 10):
        if small_blind <= 0 or big_blind <= 0:
            raise ValueError("Blinds must be positive")
        self.small_blind = small_blind
        self.big_blind = big_blind
        self.hands_per_level = max(1, hands_per_level)

    def level(self, hand_count: int) -> int:
        return max(0, hand_count) // self.hands_per_level

    def get_blind_parameters(self, hand_count: int):
        # Both blinds double every level, the big blind never below twice the small
        level = self.level(hand_count)
        small_blind = self.small_blind * (1 << level)
        big_blind = max(self.big_blind * (1 << level), small_blind * 2)
        return small_blind, big_blind


class FixedEscalator(BaseEscalator):
    """Blinds that never change. Handy for tests and cash-game style sims."""

    def __init__(self, small_blind: int = 5, big_blind: int = 10):
        self.small_blind = small_blind
        self.big_blind = big_blind

    def get_blind_parameters(self, hand_count: int):
        return self.small_blind, self.big_blind
