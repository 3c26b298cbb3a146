# Availability clock: "today" and the next rollover in a fixed civil timezone.

from __future__ import annotations
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AvailabilityClock:
    """Computes the current puzzle day in ``tz_name``, honoring daylight saving.

    ``now`` returns the current instant as an aware datetime and is consulted
    on every call; nothing is cached, so a long-running process rolls over
    at local midnight without a restart.
    """

    def __init__(self, tz_name: str, now: Callable[[], datetime] = utc_now):
        self.tz = ZoneInfo(tz_name)
        self._now = now

    def current_date(self, at: Optional[datetime] = None) -> date:
        instant = at if at is not None else self._now()
        return instant.astimezone(self.tz).date()

    def next_rollover_instant(self, at: Optional[datetime] = None) -> datetime:
        """Next local midnight, as a UTC instant."""
        tomorrow = self.current_date(at) + timedelta(days=1)
        midnight = datetime.combine(tomorrow, time(0, 0), tzinfo=self.tz)
        return midnight.astimezone(timezone.utc)

    def is_available(self, puzzle_date: date, at: Optional[datetime] = None) -> bool:
        return puzzle_date <= self.current_date(at)


def isoformat_z(instant: datetime) -> str:
    """Render a UTC instant the way JavaScript's Date.toISOString() does."""
    utc = instant.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
