"""State management module."""
from .redis_client import RedisClient, redis_client
from .table_store import ActionRecord, TableStore, table_store

__all__ = ["RedisClient", "redis_client", "ActionRecord", "TableStore", "table_store"]
