import logging

from .cards import pretty_cards

logger = logging.getLogger(__name__)


class TableListener:
    """
    Callbacks from the engine to whatever presents the table.

    Every method is a no-op, so a subclass overrides only what it needs and
    the engine runs headless with the base class.
    """

    def reveal_cards(self, seats, seat_indexes):
        pass

    def update_pot(self, amount, message=""):
        pass

    def update_seat_label(self, seat):
        pass

    def set_bet_indicator(self, seat_index, amount):
        pass

    def clear_bet_indicators(self):
        pass

    def deal_community(self, cards):
        pass

    def request_human_action(self, turn):
        pass

    def show_equity_odds(self, odds, outs=None):
        pass

    def announce(self, message):
        pass

    def hand_finished(self, result):
        pass


class LoggingListener(TableListener):
    """Narrates the table through `logging`."""

    def reveal_cards(self, seats, seat_indexes):
        for index in seat_indexes:
            seat = seats[index]
            logger.info("%s shows %s", seat.name, pretty_cards(seat.hole_cards))

    def update_pot(self, amount, message=""):
        logger.info("Pot %d %s", amount, message)

    def request_human_action(self, turn):
        logger.info("Waiting for %s: %d to call, can raise: %s",
                    turn.seat_name, turn.call_amount, turn.can_raise)

    def show_equity_odds(self, odds, outs=None):
        for seat, share in odds.items():
            extra = f", {outs[seat]} outs" if outs else ""
            logger.info("Seat %d: %.1f%%%s", seat, share * 100, extra)

    def announce(self, message):
        logger.info(message)

    def hand_finished(self, result):
        logger.info("Hand %d finished: %s", result.hand_number, result.message)
