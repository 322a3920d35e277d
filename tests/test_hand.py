import logging
from random import Random

from conftest import ScriptedAgent, make_table, play

from holdem.agents.allin_agent import AllInAgent
from holdem.engine.actions import ALL_IN, CALL, FOLD, RAISE, Decision
from holdem.engine.hand import Hand
from holdem.engine.state import Street


def new_hand(state, listener=None, **kwargs):
    state.reset_for_new_hand()
    return Hand(state, 5, 10, listener, rng=Random(1), **kwargs)


def test_positions_three_handed_and_heads_up():
    hand = new_hand(make_table([1000, 1000, 1000]))
    assert hand.get_positions() == (1, 2, 0, 1)
    hand = new_hand(make_table([1000, 1000]))
    # Heads-up the dealer posts the small blind and acts first preflop
    assert hand.get_positions() == (0, 1, 0, 1)


def test_fold_to_one_awards_pot_without_dealing(listener):
    agents = [ScriptedAgent([FOLD]), ScriptedAgent([FOLD]), ScriptedAgent()]
    state = make_table([1000, 1000, 1000], agents)
    result = play(new_hand(state, listener).run())

    assert result.ended_by_fold
    assert result.payouts == {2: 15}
    assert result.board == []
    assert state.burn_pile == []
    assert listener.named('deal_community') == []
    assert [s.chips for s in state.seats] == [1000, 995, 1005]
    assert state.pot.amount == 0


def test_checked_down_hand_reaches_showdown(listener):
    state = make_table([500, 500, 500])
    result = play(new_hand(state, listener).run())

    assert not result.ended_by_fold
    assert len(result.board) == 5
    assert len(state.burn_pile) == 3
    assert len(listener.named('deal_community')) == 3
    assert sum(s.chips for s in state.seats) == 1500
    assert sum(result.payouts.values()) == 30
    assert set(result.scores) == {0, 1, 2}


def test_everyone_all_in_runs_out_board_and_refunds(listener):
    agents = [AllInAgent(), AllInAgent(), AllInAgent()]
    state = make_table([100, 200, 300], agents)
    result = play(new_hand(state, listener).run())

    assert len(result.board) == 5
    assert result.refunded == 100
    assert [p.amount for p in result.side_pots] == [300, 200]
    assert sum(s.chips for s in state.seats) == 600
    assert state.pot.amount == 0
    assert listener.named('show_equity_odds')
    odds = result.all_in_odds
    assert set(odds) == {0, 1, 2}


def test_folded_caller_chips_stay_in_the_pot(listener, caplog):
    # P0 opens to 200, P1 calls, P2 calls all in for 50; on the flop P0 jams and P1 folds
    agents = [
        ScriptedAgent([Decision(RAISE, 190), ALL_IN]),
        ScriptedAgent([CALL, CALL, FOLD]),
        ScriptedAgent([ALL_IN]),
    ]
    state = make_table([1000, 1000, 50], agents)
    with caplog.at_level(logging.WARNING, logger="holdem.engine.pots"):
        result = play(new_hand(state, listener).run())

    assert result.refunded == 800
    assert state.seats[1].chips == 800
    assert [(p.amount, p.eligible) for p in result.side_pots] == [(150, [0, 2]), (300, [0])]
    assert "no eligible winner" not in caplog.text
    assert sum(s.chips for s in state.seats) == 2050
    assert state.pot.amount == 0


def test_all_in_odds_are_shown_before_cards_are_revealed(listener):
    agents = [AllInAgent(), AllInAgent()]
    state = make_table([300, 300], agents)
    play(new_hand(state, listener).run())

    names = [name for name, _ in listener.calls]
    assert names.index('show_equity_odds') < names.index('reveal_cards')


def test_raise_reopens_action():
    # P0 opens, P1 calls, P2 raises, so P0 and P1 must act again
    agents = [
        ScriptedAgent([Decision(RAISE, 20)]),
        ScriptedAgent([CALL]),
        ScriptedAgent([Decision(RAISE, 40), CALL, CALL, CALL]),
    ]
    state = make_table([1000, 1000, 1000], agents)
    hand = new_hand(state)
    result = play(hand.run())

    preflop = [e for e in result.action_log if e['street'] == 'preflop']
    actors = [e['seat'] for e in preflop if e['action'] not in ('small-blind', 'big-blind')]
    assert actors == [0, 1, 2, 0, 1]
    assert sum(s.chips for s in state.seats) == 3000


def test_short_raise_is_downgraded_to_call():
    state = make_table([12, 1000])
    hand = new_hand(state)
    sb, bb, _, _ = hand.get_positions()
    hand.post_blinds(sb, bb)

    seat = state.seats[0]
    raised = hand.apply_action(seat, Decision(RAISE, 50))
    assert not raised
    assert seat.current_bet == 10
    assert state.current_bet == 10
    assert seat.chips == 2


def test_raise_cap_blocks_further_raises():
    state = make_table([1000, 1000, 1000])
    hand = new_hand(state, max_raises_per_round=1)
    sb, bb, first, _ = hand.get_positions()
    hand.post_blinds(sb, bb)

    assert hand.apply_action(state.seats[first], Decision(RAISE, 20))
    nxt = state.seats[sb]
    assert not hand.can_raise(nxt)
    assert not hand.apply_action(nxt, Decision(RAISE, 100))
    assert nxt.current_bet == state.current_bet == 30


def test_short_blind_posts_what_it_has():
    agents = [ScriptedAgent(), ScriptedAgent(), ScriptedAgent()]
    state = make_table([1000, 1000, 4], agents)
    result = play(new_hand(state).run())

    big_blind = [e for e in result.action_log if e['seat'] == 2][0]
    assert big_blind['action'] == 'all-in'
    assert big_blind['amount'] == 4
    assert sum(s.chips for s in state.seats) == 2004


def test_agent_error_falls_back_to_call():
    class BrokenAgent(ScriptedAgent):
        def decide_action(self, seat, state, context):
            raise RuntimeError("boom")

    state = make_table([1000, 1000], [BrokenAgent(), ScriptedAgent([FOLD])])
    result = play(new_hand(state).run())
    assert result.payouts == {0: 20}


def test_agents_only_see_their_own_cards():
    spy = ScriptedAgent([FOLD])
    state = make_table([1000, 1000, 1000], [spy, ScriptedAgent(), ScriptedAgent()])
    play(new_hand(state).run())

    seat_view, table_view, context = spy.seen[0]
    assert all(c is not None for c in seat_view.hole_cards)
    assert table_view.seat(1).hole_cards == (None, None)
    assert table_view.street == Street.PREFLOP
    assert context.min_raise == 10


def test_all_in_for_less_than_call_is_a_call():
    state = make_table([1000, 30, 1000], [ScriptedAgent([Decision(RAISE, 90)]), ScriptedAgent([ALL_IN])])
    hand = new_hand(state)
    sb, bb, first, _ = hand.get_positions()
    hand.post_blinds(sb, bb)

    hand.apply_action(state.seats[first], Decision(RAISE, 90))
    raised = hand.apply_action(state.seats[sb], Decision(ALL_IN))
    assert not raised
    assert state.seats[sb].all_in
    assert state.current_bet == 100
