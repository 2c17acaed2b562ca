"""Card deck implementation."""
import random
from enum import Enum
from dataclasses import dataclass
from typing import Optional


class Suit(str, Enum):
    """Card suits."""
    HEARTS = "Hearts"
    DIAMONDS = "Diamonds"
    CLUBS = "Clubs"
    SPADES = "Spades"

    @property
    def letter(self) -> str:
        """Single lowercase letter used in card labels."""
        return self.value[0].lower()

    @classmethod
    def from_letter(cls, letter: str) -> "Suit":
        """Look up a suit by its label letter ('h', 'd', 'c', 's')."""
        for suit in cls:
            if suit.letter == letter.lower():
                return suit
        raise ValueError(f"Invalid suit: {letter}")

    def __str__(self) -> str:
        return self.letter


class Rank(int, Enum):
    """Card ranks (2-14, where 14 is Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def symbol(self) -> str:
        """Display symbol: '2'..'10', 'J', 'Q', 'K', 'A'."""
        if self.value <= 10:
            return str(self.value)
        return {11: "J", 12: "Q", 13: "K", 14: "A"}[self.value]

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class Card:
    """A playing card.

    The rank value is for display only; hand strength comes from the
    hand evaluator.
    """
    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return str(self)

    @property
    def value(self) -> int:
        """Numeric strength 2-14."""
        return self.rank.value

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"rank": self.rank.value, "suit": self.suit.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        """Create from dictionary."""
        return cls(rank=Rank(data["rank"]), suit=Suit(data["suit"]))

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse card from string like 'Ah', '10s', 'Tc', '2c'.

        Args:
            s: Card string (rank + suit letter).

        Returns:
            Card instance.

        Raises:
            ValueError: If the string is not a valid card.
        """
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s!r}")
        suit = Suit.from_letter(s[-1])
        rank_str = s[:-1].upper()

        rank_map = {"A": 14, "K": 13, "Q": 12, "J": 11, "T": 10}
        if rank_str in rank_map:
            return cls(rank=Rank(rank_map[rank_str]), suit=suit)
        if not rank_str.isdigit():
            raise ValueError(f"Invalid rank: {rank_str}")
        return cls(rank=Rank(int(rank_str)), suit=suit)


def parse_cards(cards: str) -> list[Card]:
    """Parse a space separated card list such as 'Ah Kd 10c'."""
    return [Card.from_string(c) for c in cards.split()]


class Deck:
    """A standard 52-card deck.

    The top of the deck is the end of the internal list, so ``draw`` pops.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize a full, unshuffled deck.

        Args:
            rng: Random source used by ``shuffle``; tests pass a seeded one.
        """
        self._rng = rng or random.Random()
        self._cards: list[Card] = []
        self.reset()

    def reset(self) -> None:
        """Restore all 52 cards in suit-then-rank order."""
        self._cards = [
            Card(rank=rank, suit=suit)
            for suit in Suit
            for rank in Rank
        ]

    def shuffle(self) -> None:
        """Shuffle the remaining cards (Fisher-Yates via the random source)."""
        self._rng.shuffle(self._cards)

    def draw(self) -> Optional[Card]:
        """Remove and return the top card, or None when the deck is empty."""
        if not self._cards:
            return None
        return self._cards.pop()

    def burn_and_deal(self, count: int) -> list[Card]:
        """Burn one card, then deal ``count`` cards.

        Args:
            count: Number of cards to deal after the burn.

        Returns:
            The dealt cards (fewer if the deck ran out).
        """
        self.draw()
        dealt = []
        for _ in range(count):
            card = self.draw()
            if card is not None:
                dealt.append(card)
        return dealt

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def to_dict(self) -> dict:
        """Serialize remaining cards, bottom first."""
        return {"cards": [c.to_dict() for c in self._cards]}

    @classmethod
    def from_dict(cls, data: dict, rng: Optional[random.Random] = None) -> "Deck":
        """Restore a deck with its remaining card order."""
        deck = cls(rng=rng)
        deck._cards = [Card.from_dict(c) for c in data["cards"]]
        return deck
