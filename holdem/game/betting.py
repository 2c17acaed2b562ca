"""Betting results, queued moves and bet sizing rules."""
import math
from enum import Enum
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from holdem.game.player import Player


class ResultStatus(str, Enum):
    """Outcome of a table action."""
    SUCCESS = "success"
    SUCCESS_ALL_IN = "success_all_in"
    SUCCESS_ROUND_ENDED = "success_round_ended"
    REJECTED = "rejected"


class ActionError(str, Enum):
    """Why an action was rejected."""
    GAME_NOT_ACTIVE = "game_not_active"
    GAME_ALREADY_ACTIVE = "game_already_active"
    PLAYER_NOT_FOUND = "player_not_found"
    NOT_YOUR_TURN = "not_your_turn"
    NOT_ENOUGH_PLAYERS = "not_enough_players"
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_CHIPS = "insufficient_chips"
    BELOW_MIN_RAISE = "below_min_raise"
    ABOVE_MAX_WINNABLE = "above_max_winnable"
    NOTHING_TO_CALL = "nothing_to_call"
    ALREADY_MATCHED = "already_matched"
    OUTSTANDING_BET = "outstanding_bet"
    TABLE_FULL = "table_full"
    ALREADY_SEATED = "already_seated"
    NO_CHIPS = "no_chips"
    ALREADY_FOLDED = "already_folded"
    NO_CARDS = "no_cards"


@dataclass(frozen=True)
class ActionResult:
    """Result returned by every table action."""
    status: ResultStatus
    message: str = ""
    error: Optional[ActionError] = None

    @property
    def ok(self) -> bool:
        """True for every success variant."""
        return self.status != ResultStatus.REJECTED

    @classmethod
    def success(cls, message: str = "Success") -> "ActionResult":
        return cls(ResultStatus.SUCCESS, message)

    @classmethod
    def all_in(cls, message: str = "Success: player went all-in") -> "ActionResult":
        return cls(ResultStatus.SUCCESS_ALL_IN, message)

    @classmethod
    def round_ended(cls, message: str = "Success: round ended") -> "ActionResult":
        return cls(ResultStatus.SUCCESS_ROUND_ENDED, message)

    @classmethod
    def rejected(cls, error: ActionError, message: str) -> "ActionResult":
        return cls(ResultStatus.REJECTED, message, error)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "message": self.message,
            "error": self.error.value if self.error else None,
        }


class PendingMove(str, Enum):
    """Moves a player may queue before their turn."""
    CHECK = "check"
    FOLD = "fold"
    CALL = "call"
    BET = "bet"


@dataclass
class PendingAction:
    """A queued move, executed when the player's turn comes up.

    For CALL the amount is the table bet at queue time; for BET it is the
    bet total.
    """
    move: PendingMove
    amount: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"move": self.move.value, "amount": self.amount}

    @classmethod
    def from_dict(cls, data: dict) -> "PendingAction":
        """Restore from dictionary."""
        return cls(move=PendingMove(data["move"]), amount=data.get("amount"))


def round_chips(amount: float) -> int:
    """Round a requested chip amount half up to a whole chip."""
    return int(math.floor(amount + 0.5))


def min_raise(last_raise: int, big_blind: int) -> int:
    """Smallest legal raise over the current bet."""
    return max(last_raise, big_blind)


def max_winnable(opponents: list["Player"]) -> int:
    """Largest total bet any single opponent could still match.

    Args:
        opponents: Non-folded players other than the bettor.

    Returns:
        Max of stack plus current street bet, or 0 with no opponents.
    """
    return max((p.chips + p.current_bet for p in opponents), default=0)
