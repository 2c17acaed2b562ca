"""Tests for the event log."""
from holdem.game.deck import parse_cards
from holdem.game.events import EventLog, latest_turn_only


class TestEventLog:
    """Test appending and draining events."""

    def test_add_public(self):
        """Test public events."""
        log = EventLog()
        event = log.add("alice checks")

        assert not event.ephemeral
        assert event.player_id == ""
        assert len(log) == 1

    def test_private(self):
        """Test ephemeral events carry their target."""
        log = EventLog()
        cards = parse_cards("Ah Kd")
        event = log.private("alice", "Your cards:", cards)

        assert event.ephemeral
        assert event.player_id == "alice"
        assert event.cards == cards

    def test_cards_are_copied(self):
        """Test later changes to the source list do not leak in."""
        log = EventLog()
        cards = parse_cards("Ah Kd")
        event = log.add("Flop:", cards)
        cards.append(parse_cards("2c")[0])

        assert len(event.cards) == 2

    def test_turn(self):
        """Test turn notifications are flagged."""
        log = EventLog()
        event = log.turn("bob")

        assert event.is_turn_message
        assert event.description == "bob's turn"

    def test_drain_empties(self):
        """Test draining returns everything in order and clears the log."""
        log = EventLog()
        log.add("one")
        log.add("two")

        drained = log.drain()

        assert [e.description for e in drained] == ["one", "two"]
        assert len(log) == 0
        assert log.drain() == []

    def test_peek_does_not_clear(self):
        """Test peeking leaves events in place."""
        log = EventLog()
        log.add("one")

        assert len(log.peek()) == 1
        assert len(log) == 1

    def test_to_dict(self):
        """Test event serialization."""
        log = EventLog()
        data = log.private("alice", "Your cards:", parse_cards("Ah")).to_dict()

        assert data == {
            "description": "Your cards:",
            "cards": [{"rank": 14, "suit": "Hearts"}],
            "ephemeral": True,
            "player_id": "alice",
            "is_turn_message": False,
        }


class TestLatestTurnOnly:
    """Test the consumer grouping helper."""

    def test_keeps_last_turn(self):
        """Test only the last turn notification survives."""
        log = EventLog()
        log.turn("alice")
        log.add("alice checks")
        log.turn("bob")
        log.add("bob checks")
        log.turn("carol")

        filtered = latest_turn_only(log.drain())

        assert [e.description for e in filtered] == ["alice checks", "bob checks", "carol's turn"]

    def test_no_turns(self):
        """Test batches without turns are unchanged."""
        log = EventLog()
        log.add("one")

        assert len(latest_turn_only(log.drain())) == 1
