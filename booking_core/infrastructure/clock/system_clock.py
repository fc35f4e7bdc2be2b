from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from booking_core.application.ports.clock import ClockPort


class SystemClock(ClockPort):
    def __init__(self, timezone: str = "UTC") -> None:
        self._timezone = _safe_timezone(timezone)

    def now(self) -> datetime:
        # Naive local time: the deployment runs in a single business timezone.
        return datetime.now(self._timezone).replace(tzinfo=None)


def _safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logging.getLogger(__name__).warning("Unknown timezone, falling back to UTC", extra={"reason": name})
        return ZoneInfo("UTC")
