from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from booking_core.domain.rules.time_grid import format_hhmm, parse_hhmm


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    not_applicable = "not_applicable"  # cash, settled on arrival
    pending = "pending"
    waiting_verification = "waiting_verification"
    paid = "paid"
    rejected = "rejected"


ACTIVE_STATUSES = frozenset({BookingStatus.pending, BookingStatus.confirmed})
TERMINAL_STATUSES = frozenset({BookingStatus.completed, BookingStatus.cancelled})


@dataclass(frozen=True)
class BookedService:
    """Service price and duration as they were when the booking was made."""

    service_id: str
    name: str
    price: int
    duration_minutes: int


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    email: str
    phone: str
    notes: str = ""


@dataclass(frozen=True)
class Booking:
    booking_id: str
    staff_id: str
    date: date
    start_time: str  # HH:MM
    services: tuple[BookedService, ...]
    total_price: int
    total_duration: int
    customer: CustomerInfo
    payment_method_id: str
    payment_status: PaymentStatus
    status: BookingStatus
    created_at: datetime
    customer_id: str | None = None
    payment_proof: str | None = None
    updated_at: datetime | None = None
    version: int = 1

    @property
    def start_minutes(self) -> int:
        return parse_hhmm(self.start_time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.total_duration

    @property
    def end_time(self) -> str:
        return format_hhmm(self.end_minutes)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
