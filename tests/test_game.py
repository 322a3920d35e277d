import logging

from conftest import RecordingListener, ScriptedAgent

from holdem.agents.allin_agent import AllInAgent
from holdem.agents.npc_agent import NpcAgent
from holdem.engine.actions import FOLD, HumanTurn
from holdem.engine.config import TableConfig
from holdem.engine.escalator import FixedEscalator
from holdem.engine.game import Phase, PokerGame
from holdem.engine.listener import LoggingListener
from holdem.engine.player import Seat


def human_table(opponent=None, chips=(1000, 1000)):
    seats = [
        Seat(0, "You", chips[0], is_human=True),
        Seat(1, "Bot", chips[1], agent=opponent or ScriptedAgent()),
    ]
    listener = RecordingListener()
    game = PokerGame(TableConfig(npc_count=1), listener, FixedEscalator(5, 10), game_seed=42, seats=seats)
    return game, listener


def test_setup_table_creates_profiled_npcs():
    game = PokerGame(TableConfig(npc_count=3, starting_chips=500), game_seed=1)
    assert len(game.seats) == 4
    assert game.human_seat.index == 0
    for seat in game.seats[1:]:
        assert isinstance(seat.agent, NpcAgent)
        assert seat.profile is not None
        assert seat.agent.seed is not None
    assert all(s.chips == 500 for s in game.seats)


def test_same_seed_same_profiles():
    a = PokerGame(TableConfig(npc_count=4), game_seed=99)
    b = PokerGame(TableConfig(npc_count=4), game_seed=99)
    assert [s.profile for s in a.seats] == [s.profile for s in b.seats]


def test_human_turn_suspends_and_resumes():
    game, listener = human_table()
    assert game.start_hand()

    # Heads-up the human is on the button and acts first
    assert game.phase == Phase.AWAITING_INPUT
    turn = game.pending_turn
    assert isinstance(turn, HumanTurn)
    assert turn.seat_index == 0
    assert turn.call_amount == 5
    assert listener.named('request_human_action') == [(turn,)]

    assert game.submit_action("fold")
    assert game.phase == Phase.IDLE
    assert game.last_result.ended_by_fold
    assert game.last_result.payouts == {1: 15}
    assert game.seats[0].chips == 995
    assert listener.named('hand_finished') == [(game.last_result,)]


def test_start_hand_is_a_no_op_while_running():
    game, _ = human_table()
    game.start_hand()
    count = game.state.hand_count
    pot = game.state.pot.amount

    assert not game.start_hand()
    assert game.state.hand_count == count
    assert game.state.pot.amount == pot
    assert game.phase == Phase.AWAITING_INPUT


def test_out_of_turn_action_is_rejected():
    game, _ = human_table()
    assert not game.submit_action("call")
    assert game.phase == Phase.IDLE
    assert game.last_result is None


def test_human_can_play_to_showdown():
    game, _ = human_table()
    game.start_hand()
    while game.phase == Phase.AWAITING_INPUT:
        game.submit_action("call")
    result = game.last_result
    assert not result.ended_by_fold
    assert len(result.board) == 5
    assert sum(s.chips for s in game.seats) == 2000


def test_dealer_rotates_between_hands():
    game, _ = human_table(opponent=ScriptedAgent([FOLD] * 10))
    dealers = []
    for _ in range(3):
        game.start_hand()
        dealers.append(game.state.dealer_seat)
        if game.phase == Phase.AWAITING_INPUT:
            game.submit_action("call")
    assert dealers == [0, 1, 0]


def test_busted_computer_seat_rebuys():
    seats = [Seat(0, "A", 1000, agent=AllInAgent()), Seat(1, "B", 0, agent=AllInAgent()),
             Seat(2, "C", 1000, agent=AllInAgent())]
    listener = RecordingListener()
    game = PokerGame(TableConfig(npc_count=3, include_human=False), listener, FixedEscalator(5, 10),
                     game_seed=3, seats=seats)
    assert game.start_hand()
    announcement = listener.named('announce')[0][0]
    assert announcement.startswith("B buys in for")
    assert game.last_result is not None


def test_seat_without_chips_sits_out_when_rebuys_are_off():
    seats = [Seat(0, "A", 1000, agent=ScriptedAgent()), Seat(1, "B", 0, agent=ScriptedAgent()),
             Seat(2, "C", 1000, agent=ScriptedAgent())]
    config = TableConfig(npc_count=3, include_human=False, allow_rebuys=False)
    game = PokerGame(config, escalator=FixedEscalator(5, 10), game_seed=3, seats=seats)
    game.start_hand()
    assert game.seats[1].sitting_out
    assert all(e['seat'] != 1 for e in game.last_result.action_log)
    assert game.seats[1].chips == 0


def test_not_enough_funded_seats():
    seats = [Seat(0, "A", 1000, agent=ScriptedAgent()), Seat(1, "B", 0, agent=ScriptedAgent())]
    config = TableConfig(npc_count=2, include_human=False, allow_rebuys=False)
    game = PokerGame(config, game_seed=3, seats=seats)
    assert game.is_game_over
    assert not game.start_hand()


def test_game_over_when_human_busts():
    game, _ = human_table(opponent=AllInAgent(), chips=(100, 1000))
    game.start_hand()
    while game.phase == Phase.AWAITING_INPUT:
        game.submit_action("allin")
    human = game.human_seat
    assert game.is_game_over == (human.chips == 0)
    assert sum(s.chips for s in game.seats) == 1100


def test_play_hands_conserves_chips():
    seats = [Seat(i, f"P{i}", 300, agent=AllInAgent()) for i in range(3)]
    config = TableConfig(npc_count=3, include_human=False, allow_rebuys=False)
    game = PokerGame(config, escalator=FixedEscalator(5, 10), game_seed=8, seats=seats)
    results = game.play_hands(20)
    assert results
    assert results[-1] is game.last_result
    assert not hasattr(game, "results")
    assert sum(s.chips for s in game.seats) == 900
    assert game.state.pot.amount == 0


def test_logging_listener_narrates_a_hand(caplog):
    seats = [Seat(0, "A", 500, agent=ScriptedAgent()), Seat(1, "B", 500, agent=ScriptedAgent())]
    config = TableConfig(npc_count=2, include_human=False)
    game = PokerGame(config, LoggingListener(), FixedEscalator(5, 10), game_seed=4, seats=seats)
    with caplog.at_level(logging.INFO, logger="holdem"):
        game.start_hand()
    assert "Hand 1 finished" in caplog.text
    assert "shows" in caplog.text
