"""Hand evaluation for Texas Hold'em.

Ranking is delegated to an evaluator object. The only assumption the engine
makes about ranks is that a lower value is a stronger hand.
"""
from dataclasses import dataclass
from typing import Protocol

from treys import Card as TreysCard, Evaluator

from holdem.game.deck import Card, Rank


@dataclass(frozen=True)
class HandValue:
    """Comparable strength of a 7-card hand (lower is better)."""
    rank: int
    description: str


class HandEvaluator(Protocol):
    """Anything that can rank hold'em hands."""

    def evaluate(self, cards: list[Card]) -> HandValue:
        """Rank exactly 7 cards. Other counts are a caller bug."""
        ...

    def describe(self, cards: list[Card]) -> str:
        """Name the best hand category in 5 to 7 cards."""
        ...


def to_treys(card: Card) -> int:
    """Convert to treys library card format."""
    rank = "T" if card.rank == Rank.TEN else card.rank.symbol
    return TreysCard.new(f"{rank}{card.suit.letter}")


class TreysEvaluator:
    """HandEvaluator backed by the treys lookup tables."""

    def __init__(self) -> None:
        self._evaluator = Evaluator()

    def evaluate(self, cards: list[Card]) -> HandValue:
        """Rank 2 hole cards plus 5 community cards.

        Args:
            cards: Exactly 7 cards.

        Returns:
            HandValue with treys rank (1 is a royal flush) and category name.

        Raises:
            ValueError: If not given exactly 7 cards.
        """
        if len(cards) != 7:
            raise ValueError(
                f"A hand must consist of exactly 7 cards (2 hole cards + 5 community cards), got {len(cards)}"
            )
        rank = self._rank(cards)
        return HandValue(rank=rank, description=self._class_name(rank))

    def describe(self, cards: list[Card]) -> str:
        """Name the best category in 5-7 cards.

        Raises:
            ValueError: If given fewer than 5 or more than 7 cards.
        """
        if not 5 <= len(cards) <= 7:
            raise ValueError(f"Can only describe 5 to 7 cards, got {len(cards)}")
        return self._class_name(self._rank(cards))

    def _rank(self, cards: list[Card]) -> int:
        converted = [to_treys(c) for c in cards]
        return self._evaluator.evaluate(converted[:2], converted[2:])

    def _class_name(self, rank: int) -> str:
        return self._evaluator.class_to_string(self._evaluator.get_rank_class(rank))


def best_hands(values: dict[str, HandValue]) -> list[str]:
    """Ids holding the strongest hand, in the order given.

    Args:
        values: player_id -> evaluated hand.

    Returns:
        Every id whose rank equals the minimum rank.
    """
    if not values:
        return []
    best = min(v.rank for v in values.values())
    return [player_id for player_id, value in values.items() if value.rank == best]
