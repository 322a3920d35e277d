import pytest

from holdem.engine.escalator import DoublingEscalator, FixedEscalator
from holdem.engine.seed_gen import (
    derive_agent_seeds, derive_deck_seed, derive_profile_seed, derive_seed, generate_game_seed,
)


def test_blinds_double_every_interval():
    escalator = DoublingEscalator(5, 10, hands_per_level=10)
    assert escalator.get_blind_parameters(0) == (5, 10)
    assert escalator.get_blind_parameters(9) == (5, 10)
    assert escalator.get_blind_parameters(10) == (10, 20)
    assert escalator.get_blind_parameters(25) == (20, 40)


def test_big_blind_at_least_twice_small():
    assert DoublingEscalator(5, 8).get_blind_parameters(0) == (5, 10)


def test_fixed_blinds_and_bad_values():
    assert FixedEscalator(1, 2).get_blind_parameters(500) == (1, 2)
    with pytest.raises(ValueError):
        DoublingEscalator(0, 10)


def test_game_seed_is_32_bit():
    assert generate_game_seed(5) == 5
    assert generate_game_seed(2 ** 32 + 7) == 7
    assert 0 <= generate_game_seed() <= 0xFFFFFFFF


def test_derived_seeds_are_stable_and_distinct():
    assert derive_seed(123, 0) == derive_seed(123, 0)
    assert derive_deck_seed(123) != derive_profile_seed(123)
    seeds = derive_agent_seeds(123, 6)
    assert len(set(seeds)) == 6
    with pytest.raises(ValueError):
        derive_seed(-1, 0)
