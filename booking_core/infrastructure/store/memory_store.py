from __future__ import annotations

import threading
from datetime import date

from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.utils.slot_grid import find_overlap
from booking_core.domain.entities.booking import Booking


class MemoryBookingStore(BookingRepositoryPort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._by_day: dict[tuple[str, date], list[str]] = {}
        self._locks: dict[tuple[str, date], threading.Lock] = {}
        self._lock_lock = threading.Lock()  # guards the locks dict

    def _get_lock(self, staff_id: str, day: date) -> threading.Lock:
        """Get or create the lock guarding one staff member's day."""
        with self._lock_lock:
            key = (staff_id, day)
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def get(self, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    def list_for_staff_day(self, staff_id: str, day: date) -> list[Booking]:
        ids = list(self._by_day.get((staff_id, day), []))
        return [self._bookings[booking_id] for booking_id in ids]

    def list_all(self) -> list[Booking]:
        return list(self._bookings.values())

    def insert_if_free(self, booking: Booking) -> bool:
        with self._get_lock(booking.staff_id, booking.date):
            existing = self.list_for_staff_day(booking.staff_id, booking.date)
            if find_overlap(existing, booking.start_minutes, booking.end_minutes):
                return False
            self._bookings[booking.booking_id] = booking
            self._by_day.setdefault((booking.staff_id, booking.date), []).append(booking.booking_id)
            return True

    def replace(self, booking: Booking, expected_version: int) -> bool:
        # Same lock as inserts, so a write never interleaves with an overlap check.
        with self._get_lock(booking.staff_id, booking.date):
            current = self._bookings.get(booking.booking_id)
            if current is None or current.version != expected_version:
                return False
            self._bookings[booking.booking_id] = booking
            return True
