from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

BOOKING_CREATED = "booking.created"
BOOKING_STATUS_CHANGED = "booking.status_changed"
PAYMENT_VERIFIED = "payment.verified"


@dataclass(frozen=True)
class BookingEvent:
    name: str
    booking_id: str
    occurred_at: datetime
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "booking_id": self.booking_id,
            "occurred_at": self.occurred_at.isoformat(),
            "payload": dict(self.payload),
        }
