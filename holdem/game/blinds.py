"""Day-of-week blind schedule."""
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence
from zoneinfo import ZoneInfo

from holdem.config import config


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BlindSchedule:
    """Small blind per weekday; the big blind is always double.

    Both the weekday table and the clock are injectable so a table's blinds
    can be pinned in tests.
    """

    def __init__(
        self,
        small_blinds: Optional[Sequence[int]] = None,
        tz: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the schedule.

        Args:
            small_blinds: Seven amounts, Monday first. Defaults to config.
            tz: IANA zone deciding which weekday it is. Defaults to config.
            clock: Returns the current time; must be timezone aware.
        """
        amounts = list(small_blinds if small_blinds is not None else config.blind_schedule)
        if len(amounts) != 7:
            raise ValueError(f"Blind schedule needs 7 amounts, got {len(amounts)}")
        self.small_blinds = amounts
        self.tz = ZoneInfo(tz or config.blind_timezone)
        self._clock = clock or _utc_now

    @classmethod
    def fixed(cls, small_blind: int) -> "BlindSchedule":
        """A schedule with the same small blind every day."""
        return cls([small_blind] * 7, tz="UTC")

    def small_blind_for(self, weekday: int) -> int:
        """Small blind for a weekday (0 = Monday)."""
        return self.small_blinds[weekday % 7]

    def current(self) -> tuple[int, int]:
        """Blinds in effect right now.

        Returns:
            (small_blind, big_blind)
        """
        weekday = self._clock().astimezone(self.tz).weekday()
        small = self.small_blind_for(weekday)
        return small, small * 2
