import logging
from random import Random

from holdem.engine.player import Seat
from holdem.engine.pots import build_side_pots, distribute_pot, settle_pots, uncalled_excess


def seats_with(contributions, folded=(), all_in=()):
    seats = []
    for i, amount in enumerate(contributions):
        seat = Seat(i, f"P{i}", 0)
        seat.total_contribution = amount
        seat.folded = i in folded
        seat.all_in = i in all_in
        seats.append(seat)
    return seats


def test_layers_from_unequal_contributions():
    pots = build_side_pots(seats_with([100, 100, 300]))
    assert [(p.amount, p.eligible) for p in pots] == [(300, [0, 1, 2]), (200, [2])]
    assert sum(p.amount for p in pots) == 500


def test_folded_seat_pays_but_cannot_win():
    pots = build_side_pots(seats_with([50, 200, 200], folded={0}))
    assert [(p.amount, p.eligible, p.contributors) for p in pots] == [
        (150, [1, 2], [0, 1, 2]),
        (300, [1, 2], [1, 2]),
    ]


def test_uncalled_all_in_excess():
    seats = seats_with([100, 400], all_in={1})
    seat, excess = uncalled_excess(seats)
    assert seat.index == 1 and excess == 300
    # Not refunded when the top seat can still act
    assert uncalled_excess(seats_with([100, 400])) is None
    assert uncalled_excess(seats_with([100, 100], all_in={1})) is None


def test_folded_contribution_counts_as_matched():
    # P1 called 200 and folded to P0's jam; only P0's chips beyond 200 go back
    seats = seats_with([1000, 200, 50], folded={1}, all_in={0, 2})
    seat, excess = uncalled_excess(seats)
    assert seat.index == 0 and excess == 800


def test_odd_chips_go_to_lowest_seats_first():
    payouts = {}
    distribute_pot(101, [4, 1, 2], payouts)
    assert payouts == {1: 34, 2: 34, 4: 33}


def test_split_and_side_pot_winners():
    seats = seats_with([100, 300, 300])
    pots = build_side_pots(seats)
    # Seat 0 has the best hand, seats 1 and 2 tie behind it
    payouts, winners = settle_pots(pots, {0: 900, 1: 500, 2: 500})
    assert payouts == {0: 300, 1: 200, 2: 200}
    assert winners == [[0], [1, 2]]


def test_payouts_conserve_chips_for_random_patterns():
    rng = Random(12)
    for _ in range(200):
        n = rng.randint(2, 7)
        contributions = [rng.choice([0, 10, 25, 50, 50, 100, 333]) for _ in range(n)]
        folded = {i for i in range(n) if rng.random() < 0.3}
        live = [i for i in range(n) if i not in folded]
        if not live or sum(contributions) == 0:
            continue
        seats = seats_with(contributions, folded=folded)
        pots = build_side_pots(seats)
        scores = {i: rng.randint(0, 5) for i in live}
        payouts, _ = settle_pots(pots, scores)
        assert sum(p.amount for p in pots) == sum(contributions)
        assert sum(payouts.values()) == sum(contributions)


def test_degenerate_layer_is_refunded_and_logged(caplog):
    # Only folded seats reached the top layer
    seats = seats_with([100, 300, 300], folded={1, 2})
    pots = build_side_pots(seats)
    assert pots[1].is_degenerate
    with caplog.at_level(logging.WARNING, logger="holdem.engine.pots"):
        payouts, winners = settle_pots(pots, {0: 10})
    assert payouts == {0: 300, 1: 200, 2: 200}
    assert winners == [[0], []]
    assert "no eligible winner" in caplog.text
