from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from booking_core.domain.entities.booking import Booking


class BookingRepositoryPort(ABC):
    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def list_for_staff_day(self, staff_id: str, day: date) -> list[Booking]:
        """All bookings for a staff member on a date, any status."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def insert_if_free(self, booking: Booking) -> bool:
        """
        Insert a new booking unless it overlaps an active booking for the same staff and date.

        The overlap check and the insert must be one atomic step per (staff_id, date).
        Returns False, leaving the store unchanged, when the interval is taken.
        """
        raise NotImplementedError

    @abstractmethod
    def replace(self, booking: Booking, expected_version: int) -> bool:
        """
        Store an updated booking if the stored copy still has expected_version.

        Returns False on a version mismatch so the caller can re-read and re-decide.
        """
        raise NotImplementedError
