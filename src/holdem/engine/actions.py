import logging
from dataclasses import dataclass
from typing import Union

logger = logging.getLogger(__name__)

FOLD = 'fold'
CALL = 'call'
RAISE = 'raise'
ALL_IN = 'allin'
ACTIONS = (FOLD, CALL, RAISE, ALL_IN)

_ALIASES = {
    'check': CALL,
    'match': CALL,
    'bet': RAISE,
    'increase': RAISE,
    'all-in': ALL_IN,
    'all_in': ALL_IN,
    'jam': ALL_IN,
}


class InvalidActionError(Exception):
    """Raised when an action payload has a shape the engine does not understand."""
    pass


@dataclass(frozen=True)
class Decision:
    action: str
    amount: int = 0     # raise increment over the current bet, only used by RAISE
    reason: str = ""


@dataclass(frozen=True)
class DecisionContext:
    min_raise: int          # smallest legal raise increment
    small_blind: int        # betting increment for sizing
    big_blind: int
    can_raise: bool
    raise_count: int        # raises already made this street


@dataclass(frozen=True)
class HumanTurn:
    """What the engine is waiting on when it parks for the human seat."""
    seat_index: int
    seat_name: str
    call_amount: int
    min_raise: int
    max_raise: int
    can_raise: bool
    can_all_in: bool


def normalize_action(payload: Union[Decision, str, dict, None], amount: int = None) -> Decision:
    """
    Turns a submitted action into a Decision.

    Accepts a Decision, an action name, or a dict with 'action' and optionally
    'amount' / 'raise_by'. None means call. Unknown names are downgraded to a
    call so a stray input never stalls the hand.
    """
    if payload is None:
        return Decision(CALL)
    if isinstance(payload, Decision):
        if amount is not None:
            return Decision(payload.action, int(amount), payload.reason)
        return payload
    if isinstance(payload, str):
        name = payload
    elif isinstance(payload, dict):
        if 'action' not in payload:
            raise InvalidActionError(f"Action dict without 'action': {payload!r}")
        name = payload['action']
        if amount is None:
            amount = payload.get('amount', payload.get('raise_by'))
    else:
        raise InvalidActionError(f"Unsupported action payload {payload!r}")

    name = str(name).strip().lower()
    name = _ALIASES.get(name, name)
    if name not in ACTIONS:
        logger.warning("Unknown action %r treated as call", name)
        name = CALL
    return Decision(name, int(amount or 0))
