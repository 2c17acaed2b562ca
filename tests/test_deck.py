"""Tests for cards and the deck."""
import random

import pytest
from holdem.game.deck import Card, Deck, Rank, Suit, parse_cards


class TestCard:
    """Test the card value type."""

    def test_str(self):
        """Test card labels."""
        assert str(Card(Rank.ACE, Suit.HEARTS)) == "Ah"
        assert str(Card(Rank.TEN, Suit.SPADES)) == "10s"
        assert str(Card(Rank.TWO, Suit.CLUBS)) == "2c"

    def test_equality_is_rank_and_suit(self):
        """Test two cards with the same rank and suit are equal."""
        assert Card(Rank.KING, Suit.DIAMONDS) == Card(Rank.KING, Suit.DIAMONDS)
        assert Card(Rank.KING, Suit.DIAMONDS) != Card(Rank.KING, Suit.HEARTS)
        assert len({Card(Rank.KING, Suit.DIAMONDS), Card(Rank.KING, Suit.DIAMONDS)}) == 1

    def test_value(self):
        """Test numeric rank strength."""
        assert Card(Rank.ACE, Suit.HEARTS).value == 14
        assert Card(Rank.JACK, Suit.HEARTS).value == 11
        assert Card(Rank.TWO, Suit.HEARTS).value == 2

    def test_from_string(self):
        """Test parsing card labels."""
        assert Card.from_string("Ah") == Card(Rank.ACE, Suit.HEARTS)
        assert Card.from_string("10s") == Card(Rank.TEN, Suit.SPADES)
        assert Card.from_string("Tc") == Card(Rank.TEN, Suit.CLUBS)
        assert Card.from_string("qd") == Card(Rank.QUEEN, Suit.DIAMONDS)

    @pytest.mark.parametrize("label", ["", "A", "1h", "Ax", "Zh", "15s"])
    def test_from_string_invalid(self, label):
        """Test malformed labels raise."""
        with pytest.raises(ValueError):
            Card.from_string(label)

    def test_dict_round_trip(self):
        """Test card serialization."""
        card = Card(Rank.QUEEN, Suit.CLUBS)
        data = card.to_dict()

        assert data == {"rank": 12, "suit": "Clubs"}
        assert Card.from_dict(data) == card

    def test_from_dict_invalid(self):
        """Test an unknown suit raises."""
        with pytest.raises(ValueError):
            Card.from_dict({"rank": 12, "suit": "Stars"})

    def test_parse_cards(self):
        """Test parsing a list of labels."""
        assert parse_cards("Ah Kd 10c") == [
            Card(Rank.ACE, Suit.HEARTS),
            Card(Rank.KING, Suit.DIAMONDS),
            Card(Rank.TEN, Suit.CLUBS),
        ]


class TestDeck:
    """Test deck operations."""

    def test_full_deck(self):
        """Test a new deck holds 52 unique cards."""
        deck = Deck()
        cards = [deck.draw() for _ in range(52)]

        assert len(set(cards)) == 52
        assert deck.remaining == 0

    def test_draw_empty_returns_none(self):
        """Test drawing from an empty deck signals exhaustion."""
        deck = Deck()
        for _ in range(52):
            deck.draw()

        assert deck.draw() is None

    def test_burn_and_deal(self):
        """Test burning one card before dealing."""
        deck = Deck()
        dealt = deck.burn_and_deal(3)

        assert len(dealt) == 3
        assert deck.remaining == 48

    def test_burn_and_deal_runs_out(self):
        """Test dealing past the end returns what is left."""
        deck = Deck()
        for _ in range(50):
            deck.draw()

        assert len(deck.burn_and_deal(3)) == 1
        assert len(deck) == 0

    def test_seeded_shuffle_is_repeatable(self):
        """Test the same seed gives the same order."""
        deck1 = Deck(rng=random.Random(42))
        deck2 = Deck(rng=random.Random(42))
        deck1.shuffle()
        deck2.shuffle()

        assert [deck1.draw() for _ in range(52)] == [deck2.draw() for _ in range(52)]

    def test_shuffle_keeps_composition(self):
        """Test shuffling only reorders."""
        deck = Deck(rng=random.Random(3))
        deck.shuffle()

        assert len({deck.draw() for _ in range(52)}) == 52

    def test_reset(self):
        """Test reset restores all cards."""
        deck = Deck()
        deck.burn_and_deal(5)
        deck.reset()

        assert deck.remaining == 52

    def test_dict_round_trip_keeps_order(self):
        """Test serialization keeps the remaining order."""
        deck = Deck(rng=random.Random(9))
        deck.shuffle()
        deck.draw()
        restored = Deck.from_dict(deck.to_dict())

        assert restored.remaining == 51
        assert [restored.draw() for _ in range(51)] == [deck.draw() for _ in range(51)]
