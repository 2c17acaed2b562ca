"""Table snapshot persistence.

Each table is a single JSON snapshot in Redis. Writers for one table are
serialized with a per-table lock so a load, one action and the save always
run together.
"""
import asyncio
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from holdem.config import config
from holdem.game.betting import ActionResult
from holdem.game.events import GameEvent
from holdem.game.table import Table
from holdem.state.redis_client import redis_client
from holdem.utils.logger import get_logger

logger = get_logger(__name__)


# action name -> (Table method, takes an amount)
ACTIONS: dict[str, tuple[str, bool]] = {
    "start_round": ("start_round", False),
    "add_player": ("add_player", False),
    "remove_player": ("remove_player", False),
    "buy_in": ("buy_in", True),
    "cash_out": ("cash_out", False),
    "fold": ("fold", False),
    "check": ("check", False),
    "call": ("call", False),
    "bet": ("bet", True),
    "all_in": ("all_in", False),
    "call_or_check": ("call_or_check", False),
    "pre_check": ("pre_check", False),
    "pre_fold": ("pre_fold", False),
    "pre_call": ("pre_call", False),
    "pre_bet": ("pre_bet", True),
    "pre_deal": ("pre_deal", False),
    "pre_nh": ("pre_nh", False),
    "pre_ah": ("pre_ah", False),
    "show_cards": ("show_cards", False),
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ActionRecord:
    """One applied action, kept in the table's action log."""
    action: str
    player_id: str
    amount: Optional[float] = None
    timestamp: str = field(default_factory=_now)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "action": self.action,
            "player_id": self.player_id,
            "amount": self.amount,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ActionRecord":
        """Create from dictionary."""
        return cls(
            action=data["action"],
            player_id=data["player_id"],
            amount=data.get("amount"),
            timestamp=data["timestamp"],
        )


class TableStore:
    """Persists table snapshots and action logs to Redis."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def _table_key(self, table_id: str) -> str:
        """Get Redis key for a table snapshot."""
        return f"table:{table_id}"

    def _actions_key(self, table_id: str) -> str:
        """Get Redis key for a table's action log."""
        return f"table:{table_id}:actions"

    def lock(self, table_id: str) -> asyncio.Lock:
        """Lock guarding writes to one table."""
        return self._locks.setdefault(table_id, asyncio.Lock())

    async def save(self, table: Table) -> None:
        """Save a table snapshot.

        Args:
            table: Table to save; expiry follows config.snapshot_ttl_seconds.
        """
        ttl = config.snapshot_ttl_seconds or None
        await redis_client.set_json(self._table_key(table.table_id), table.to_dict(), ex=ttl)
        logger.debug(f"Saved table {table.table_id} ({table.state.value})")

    async def load(self, table_id: str, **table_kwargs: Any) -> Optional[Table]:
        """Load a table snapshot.

        Args:
            table_id: Table identifier.
            **table_kwargs: Collaborators for the restored table (rng, evaluator, ...).

        Returns:
            The table, or None if no snapshot exists.
        """
        data = await redis_client.get_json(self._table_key(table_id))
        if data is None:
            return None
        return Table.from_dict(data, **table_kwargs)

    async def delete(self, table_id: str) -> None:
        """Delete a table and its action log."""
        await redis_client.delete(self._table_key(table_id), self._actions_key(table_id))
        logger.info(f"Deleted table {table_id}")

    async def record_action(self, table_id: str, record: ActionRecord) -> None:
        """Append to a table's action log."""
        await redis_client.rpush(self._actions_key(table_id), json.dumps(record.to_dict()))

    async def get_actions(self, table_id: str) -> list[ActionRecord]:
        """Get a table's action log, oldest first."""
        raw = await redis_client.lrange(self._actions_key(table_id), 0, -1)
        return [ActionRecord.from_dict(json.loads(r)) for r in raw]

    async def apply(
        self,
        table_id: str,
        action: str,
        player_id: str,
        amount: Optional[float] = None,
        **table_kwargs: Any,
    ) -> tuple[ActionResult, list[GameEvent]]:
        """Load a table, apply one action and save it.

        A table with no snapshot yet is created empty.

        Args:
            table_id: Table identifier.
            action: Name from ACTIONS.
            player_id: Acting player.
            amount: Chips, for actions that take an amount.
            **table_kwargs: Collaborators for the loaded table.

        Returns:
            The action result and the events it produced.

        Raises:
            ValueError: For an unknown action or a missing amount.
        """
        if action not in ACTIONS:
            raise ValueError(f"Unknown table action: {action}")
        method_name, takes_amount = ACTIONS[action]
        if takes_amount and amount is None:
            raise ValueError(f"Action {action} needs an amount")

        async with self.lock(table_id):
            table = await self.load(table_id, **table_kwargs)
            if table is None:
                table = Table(table_id=table_id, **table_kwargs)
                logger.info(f"Created table {table_id}")

            method = getattr(table, method_name)
            result = method(player_id, amount) if takes_amount else method(player_id)
            events = table.drain_events()

            await self.save(table)
            if result.ok:
                await self.record_action(table_id, ActionRecord(action, player_id, amount))

        logger.debug(f"Table {table_id}: {action} by {player_id} -> {result.status.value}")
        return result, events


# Global instance
table_store = TableStore()
