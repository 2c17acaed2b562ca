"""Application configuration."""
import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _parse_schedule(raw: str) -> list[int]:
    """Parse a comma separated Monday..Sunday small blind list.

    Args:
        raw: Value such as "10,15,20,30,40,10,10".

    Returns:
        Seven small blind amounts, Monday first.

    Raises:
        ValueError: If the value does not hold exactly seven positive integers.
    """
    amounts = [int(part) for part in raw.split(",") if part.strip()]
    if len(amounts) != 7 or any(amount <= 0 for amount in amounts):
        raise ValueError(f"BLIND_SCHEDULE needs 7 positive amounts, got {raw!r}")
    return amounts


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # Redis (table snapshots, action log)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    snapshot_ttl_seconds: int = int(os.getenv("SNAPSHOT_TTL", "0"))

    # Table settings
    min_players: int = int(os.getenv("MIN_PLAYERS", "2"))
    max_players: int = int(os.getenv("MAX_PLAYERS", "10"))

    # Blinds: small blind per weekday, big blind is always double
    blind_schedule: list[int] = field(
        default_factory=lambda: _parse_schedule(os.getenv("BLIND_SCHEDULE", "10,15,20,30,40,10,10"))
    )
    blind_timezone: str = os.getenv("BLIND_TIMEZONE", "America/New_York")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


config = Config()
