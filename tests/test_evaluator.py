from itertools import combinations
from random import Random

import pytest
from treys import Evaluator

from holdem.engine.cards import create_deck, parse_cards
from holdem.engine.evaluator import (
    CATEGORY, best_score, build_score, category_of, decode_score, hand_name, score_five,
)


def score(*cards):
    return best_score(parse_cards(cards))


def test_royal_flush_decodes():
    s = score("As", "Ks", "Qs", "Js", "Ts")
    assert decode_score(s) == (CATEGORY["straight_flush"], (14,))
    assert hand_name(s) == "royal_flush"


def test_full_house_trips_over_pair():
    s = score("2s", "2h", "2d", "5c", "5s")
    assert decode_score(s) == (CATEGORY["full_house"], (2, 5))
    assert hand_name(s) == "full_house"


def test_two_trips_make_the_higher_full_house():
    s = score("2s", "2h", "2d", "5c", "5s", "5h", "Kd")
    assert decode_score(s) == (CATEGORY["full_house"], (5, 2))


def test_quads_beat_flush():
    quads = score("9s", "9h", "9d", "9c", "2s")
    flush = score("As", "Ks", "Qs", "Js", "9s")
    assert quads > flush


def test_wheel_is_five_high():
    wheel = score("As", "2d", "3c", "4h", "5s")
    six_high = score("2d", "3c", "4h", "5s", "6d")
    assert decode_score(wheel) == (CATEGORY["straight"], (5,))
    assert six_high > wheel


def test_kickers_break_ties():
    assert score("As", "Ad", "Kc", "7h", "2s") > score("Ah", "Ac", "Qd", "Js", "9h")
    assert score("As", "Ad", "Kc", "7h", "2s") == score("Ah", "Ac", "Kd", "7s", "2h")


def test_build_score_layout():
    assert build_score(1, 14, 13) == (1 << 20) | (14 << 16) | (13 << 12)
    assert category_of(build_score(7, 9, 2)) == 7


def test_seven_cards_pick_the_best_five():
    rng = Random(5)
    deck = create_deck()
    for _ in range(40):
        cards = rng.sample(deck, 7)
        expected = max(score_five(list(c)) for c in combinations(cards, 5))
        assert best_score(cards) == expected


def test_ordering_agrees_with_treys():
    evaluator = Evaluator()
    rng = Random(9)
    deck = create_deck()
    for _ in range(300):
        cards = rng.sample(deck, 11)
        board, hole_a, hole_b = cards[:5], cards[5:7], cards[7:9]
        ours_a = best_score(hole_a + board)
        ours_b = best_score(hole_b + board)
        # treys ranks run the other way: 1 is a royal flush
        theirs_a = evaluator.evaluate([c.to_treys() for c in board], [c.to_treys() for c in hole_a])
        theirs_b = evaluator.evaluate([c.to_treys() for c in board], [c.to_treys() for c in hole_b])
        assert (ours_a > ours_b) == (theirs_a < theirs_b)
        assert (ours_a == ours_b) == (theirs_a == theirs_b)


def test_fewer_than_five_cards_raises():
    with pytest.raises(ValueError):
        score("As", "Kd", "Qc", "Jh")
    with pytest.raises(ValueError):
        best_score(parse_cards(["As", "Kd", "Qc", "Jh"]) + [None])
