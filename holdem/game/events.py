"""Ordered event log, the engine's only observable output."""
from dataclasses import dataclass, field
from typing import Iterator, Optional

from holdem.game.deck import Card


@dataclass
class GameEvent:
    """Something a table observer should be told about.

    Ephemeral events are meant for ``player_id`` alone (hole cards, hand
    hints); everything else is public.
    """
    description: str
    cards: list[Card] = field(default_factory=list)
    ephemeral: bool = False
    player_id: str = ""
    is_turn_message: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "description": self.description,
            "cards": [c.to_dict() for c in self.cards],
            "ephemeral": self.ephemeral,
            "player_id": self.player_id,
            "is_turn_message": self.is_turn_message,
        }


class EventLog:
    """Append-only sequence of events; the caller drains it after each action."""

    def __init__(self) -> None:
        self._events: list[GameEvent] = []

    def add(self, description: str, cards: Optional[list[Card]] = None) -> GameEvent:
        """Append a public event.

        Args:
            description: Human readable text.
            cards: Cards to display with the text (copied).

        Returns:
            The appended event.
        """
        event = GameEvent(description, list(cards or []))
        self._events.append(event)
        return event

    def private(self, player_id: str, description: str, cards: Optional[list[Card]] = None) -> GameEvent:
        """Append an event visible only to ``player_id``."""
        event = GameEvent(description, list(cards or []), ephemeral=True, player_id=player_id)
        self._events.append(event)
        return event

    def turn(self, player_id: str) -> GameEvent:
        """Append a turn notification."""
        event = GameEvent(f"{player_id}'s turn", is_turn_message=True)
        self._events.append(event)
        return event

    def drain(self) -> list[GameEvent]:
        """Return all events and empty the log."""
        events, self._events = self._events, []
        return events

    def peek(self) -> list[GameEvent]:
        """Return a copy of the events without clearing them."""
        return list(self._events)

    def __iter__(self) -> Iterator[GameEvent]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)


def latest_turn_only(events: list[GameEvent]) -> list[GameEvent]:
    """Drop every turn notification except the last one in a batch."""
    last_turn = -1
    for index, event in enumerate(events):
        if event.is_turn_message:
            last_turn = index
    return [
        event for index, event in enumerate(events)
        if not event.is_turn_message or index == last_turn
    ]
