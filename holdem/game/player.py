"""Player model."""
from dataclasses import dataclass, field
from typing import Optional

from holdem.game.betting import PendingAction
from holdem.game.deck import Card


@dataclass
class Player:
    """A player's financial and hand state at one table.

    ``current_bet`` is what the player put in on this street and
    ``total_bet`` what they put in over the whole round; the side pot
    resolver works from ``total_bet``.
    """

    player_id: str
    chips: int = 0
    hole_cards: list[Card] = field(default_factory=list)
    is_all_in: bool = False
    current_bet: int = 0
    total_bet: int = 0
    last_raise: int = 0
    had_turn: bool = False
    wants_to_leave: bool = False
    wants_to_join: bool = False
    total_buy_in: int = 0
    pending_action: Optional[PendingAction] = None
    sign_off: Optional[str] = None  # "nh" or "ah", announced when the round ends

    def reset_for_new_round(self) -> None:
        """Clear cards, bets and flags before dealing a round."""
        self.hole_cards = []
        self.is_all_in = False
        self.current_bet = 0
        self.total_bet = 0
        self.last_raise = 0
        self.had_turn = False
        self.pending_action = None

    def reset_for_new_street(self) -> None:
        """Clear per-street betting state."""
        self.current_bet = 0
        self.last_raise = 0
        self.had_turn = False

    def remove_chips(self, amount: int) -> int:
        """Move chips from the stack into this round's bet.

        Args:
            amount: Chips requested.

        Returns:
            Chips actually removed (capped at the stack). A player left with
            no chips is marked all-in.
        """
        removed = min(amount, self.chips)
        self.chips -= removed
        self.total_bet += removed
        if self.chips == 0:
            self.is_all_in = True
        return removed

    def add_chips(self, amount: int) -> None:
        """Add winnings or a buy-in to the stack; non-positive amounts are ignored."""
        if amount > 0:
            self.chips += amount

    def receive_card(self, card: Card) -> None:
        """Receive one hole card."""
        self.hole_cards.append(card)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "player_id": self.player_id,
            "chips": self.chips,
            "hole_cards": [c.to_dict() for c in self.hole_cards],
            "is_all_in": self.is_all_in,
            "current_bet": self.current_bet,
            "total_bet": self.total_bet,
            "last_raise": self.last_raise,
            "had_turn": self.had_turn,
            "wants_to_leave": self.wants_to_leave,
            "wants_to_join": self.wants_to_join,
            "total_buy_in": self.total_buy_in,
            "pending_action": self.pending_action.to_dict() if self.pending_action else None,
            "sign_off": self.sign_off,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        """Create from dictionary."""
        pending = data.get("pending_action")
        return cls(
            player_id=data["player_id"],
            chips=data["chips"],
            hole_cards=[Card.from_dict(c) for c in data.get("hole_cards", [])],
            is_all_in=data.get("is_all_in", False),
            current_bet=data.get("current_bet", 0),
            total_bet=data.get("total_bet", 0),
            last_raise=data.get("last_raise", 0),
            had_turn=data.get("had_turn", False),
            wants_to_leave=data.get("wants_to_leave", False),
            wants_to_join=data.get("wants_to_join", False),
            total_buy_in=data.get("total_buy_in", 0),
            pending_action=PendingAction.from_dict(pending) if pending else None,
            sign_off=data.get("sign_off"),
        )
