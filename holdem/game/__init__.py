"""Game engine module."""
from .deck import Deck, Card, Suit, Rank
from .player import Player
from .events import EventLog, GameEvent
from .hand_eval import HandEvaluator, HandValue, TreysEvaluator
from .betting import ActionError, ActionResult, ResultStatus, PendingAction, PendingMove
from .blinds import BlindSchedule
from .pot import SidePot
from .table import Table, GameState, SeatView
from .standings import PlayerStanding, calculate_standings

__all__ = [
    "Deck",
    "Card",
    "Suit",
    "Rank",
    "Player",
    "EventLog",
    "GameEvent",
    "HandEvaluator",
    "HandValue",
    "TreysEvaluator",
    "ActionError",
    "ActionResult",
    "ResultStatus",
    "PendingAction",
    "PendingMove",
    "BlindSchedule",
    "SidePot",
    "Table",
    "GameState",
    "SeatView",
    "PlayerStanding",
    "calculate_standings",
]
