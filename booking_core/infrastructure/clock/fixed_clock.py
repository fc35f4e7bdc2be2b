from __future__ import annotations

from datetime import datetime, timedelta

from booking_core.application.ports.clock import ClockPort


class FixedClock(ClockPort):
    def __init__(self, now: datetime) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, minutes: int) -> None:
        self._now = self._now + timedelta(minutes=minutes)
