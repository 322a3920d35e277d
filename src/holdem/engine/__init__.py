from .actions import Decision, DecisionContext, HumanTurn, InvalidActionError
from .cards import Card, Deck, parse_cards
from .config import TableConfig
from .evaluator import best_score, hand_name
from .listener import LoggingListener, TableListener
from .state import Street, TableState, TableView
from .hand import Hand, HandResult
from .game import Phase, PokerGame
