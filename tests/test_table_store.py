"""Tests for table snapshot persistence."""
import asyncio
import json
import random

import pytest
from unittest.mock import AsyncMock, patch

from holdem.game.betting import ActionError
from holdem.game.blinds import BlindSchedule
from holdem.game.table import GameState, Table
from holdem.state.redis_client import redis_client
from holdem.state.table_store import ActionRecord, TableStore


def table_kwargs() -> dict:
    return {"rng": random.Random(17), "blind_schedule": BlindSchedule.fixed(10)}


class FakeRedis:
    """In-memory stand-in for the Redis client methods the store uses."""

    def __init__(self):
        self.values: dict[str, str] = {}
        self.lists: dict[str, list[str]] = {}

    def install(self, mock_redis) -> None:
        mock_redis.get_json = AsyncMock(side_effect=self._get_json)
        mock_redis.set_json = AsyncMock(side_effect=self._set_json)
        mock_redis.rpush = AsyncMock(side_effect=self._rpush)
        mock_redis.lrange = AsyncMock(side_effect=self._lrange)
        mock_redis.delete = AsyncMock()

    def _get_json(self, key: str):
        raw = self.values.get(key)
        return None if raw is None else json.loads(raw)

    def _set_json(self, key: str, value, ex=None) -> None:
        self.values[key] = json.dumps(value, sort_keys=True)

    def _rpush(self, key: str, *values: str) -> None:
        self.lists.setdefault(key, []).extend(values)

    def _lrange(self, key: str, start: int, stop: int) -> list[str]:
        return list(self.lists.get(key, []))


class TestActionRecord:
    """Test ActionRecord model."""

    def test_round_trip(self):
        """Test serialization."""
        record = ActionRecord("bet", "alice", 120)
        restored = ActionRecord.from_dict(record.to_dict())

        assert restored == record
        assert restored.timestamp

    def test_amount_optional(self):
        """Test actions without an amount."""
        assert ActionRecord("fold", "bob").to_dict()["amount"] is None


class TestTableStore:
    """Test TableStore operations."""

    @pytest.fixture
    def store(self):
        return TableStore()

    @pytest.mark.asyncio
    async def test_save_and_load(self, store):
        """Test saving then loading a table."""
        table = Table("t1", **table_kwargs())
        table.buy_in("alice", 500)

        with patch("holdem.state.table_store.redis_client") as mock_redis:
            fake = FakeRedis()
            fake.install(mock_redis)

            await store.save(table)
            loaded = await store.load("t1", blind_schedule=BlindSchedule.fixed(10))

            mock_redis.set_json.assert_called_once()
            assert mock_redis.set_json.call_args.args[0] == "table:t1"
            assert loaded.to_json() == table.to_json()

    @pytest.mark.asyncio
    async def test_load_missing(self, store):
        """Test loading a table that was never saved."""
        with patch("holdem.state.table_store.redis_client") as mock_redis:
            mock_redis.get_json = AsyncMock(return_value=None)

            assert await store.load("nope") is None

    @pytest.mark.asyncio
    async def test_apply_creates_table(self, store):
        """Test the first action on an unknown table creates it."""
        with patch("holdem.state.table_store.redis_client") as mock_redis:
            fake = FakeRedis()
            fake.install(mock_redis)

            result, events = await store.apply("t1", "buy_in", "alice", 500, **table_kwargs())

            assert result.ok
            assert any("bought in for 500" in e.description for e in events)
            snapshot = json.loads(fake.values["table:t1"])
            assert snapshot["active_players"][0]["chips"] == 500

    @pytest.mark.asyncio
    async def test_apply_round(self, store):
        """Test a sequence of actions through the store."""
        with patch("holdem.state.table_store.redis_client") as mock_redis:
            fake = FakeRedis()
            fake.install(mock_redis)

            await store.apply("t1", "buy_in", "alice", 1000, **table_kwargs())
            await store.apply("t1", "buy_in", "bob", 1000, **table_kwargs())
            await store.apply("t1", "start_round", "alice", **table_kwargs())
            await store.apply("t1", "call", "bob", **table_kwargs())
            result, _ = await store.apply("t1", "check", "alice", **table_kwargs())

            assert result.ok
            table = await store.load("t1", **table_kwargs())
            assert table.state == GameState.FLOP
            assert table.pot == 40

            actions = await store.get_actions("t1")
            assert [a.action for a in actions] == ["buy_in", "buy_in", "start_round", "call", "check"]

    @pytest.mark.asyncio
    async def test_rejected_action_not_logged(self, store):
        """Test rejected actions stay out of the action log."""
        with patch("holdem.state.table_store.redis_client") as mock_redis:
            fake = FakeRedis()
            fake.install(mock_redis)

            result, events = await store.apply("t1", "check", "alice", **table_kwargs())

            assert result.error == ActionError.GAME_NOT_ACTIVE
            assert len(events) == 1
            mock_redis.rpush.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_action(self, store):
        """Test unknown action names are a caller bug."""
        with pytest.raises(ValueError):
            await store.apply("t1", "shuffle_up", "alice")

    @pytest.mark.asyncio
    async def test_missing_amount(self, store):
        """Test amount-taking actions need an amount."""
        with pytest.raises(ValueError):
            await store.apply("t1", "bet", "alice")

    @pytest.mark.asyncio
    async def test_concurrent_writers_serialized(self, store):
        """Test simultaneous actions on one table each see the previous save."""
        with patch("holdem.state.table_store.redis_client") as mock_redis:
            fake = FakeRedis()
            fake.install(mock_redis)

            await asyncio.gather(*(
                store.apply("t1", "buy_in", player_id, 100, **table_kwargs())
                for player_id in ("a", "b", "c", "d")
            ))

            table = await store.load("t1", **table_kwargs())
            assert sorted(p.player_id for p in table.active_players) == ["a", "b", "c", "d"]

    def test_lock_per_table(self, store):
        """Test each table gets its own lock."""
        assert store.lock("t1") is store.lock("t1")
        assert store.lock("t1") is not store.lock("t2")

    @pytest.mark.asyncio
    async def test_delete(self, store):
        """Test deleting a table removes the snapshot and the log."""
        with patch("holdem.state.table_store.redis_client") as mock_redis:
            mock_redis.delete = AsyncMock()

            await store.delete("t1")

            mock_redis.delete.assert_called_once_with("table:t1", "table:t1:actions")


class TestRedisClientJson:
    """Test the JSON helpers the store goes through."""

    @pytest.mark.asyncio
    async def test_set_json(self):
        """Test values are encoded with sorted keys and keep their expiry."""
        backend = AsyncMock()
        with patch.object(redis_client, "_redis", backend):
            await redis_client.set_json("table:t1", {"pot": 40, "state": "flop"}, ex=30)

        backend.set.assert_called_once_with("table:t1", '{"pot": 40, "state": "flop"}', ex=30)

    @pytest.mark.asyncio
    async def test_get_json(self):
        """Test stored JSON is decoded."""
        backend = AsyncMock()
        backend.get.return_value = '{"pot": 40}'
        with patch.object(redis_client, "_redis", backend):
            assert await redis_client.get_json("table:t1") == {"pot": 40}

    @pytest.mark.asyncio
    async def test_get_json_missing(self):
        """Test a missing key comes back as None."""
        backend = AsyncMock()
        backend.get.return_value = None
        with patch.object(redis_client, "_redis", backend):
            assert await redis_client.get_json("table:t1") is None
