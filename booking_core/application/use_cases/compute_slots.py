from __future__ import annotations

import logging
from datetime import date

from booking_core.application.exceptions import ValidationError
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.ports.catalog import CatalogPort
from booking_core.application.ports.clock import ClockPort
from booking_core.application.utils.catalog_lookup import resolve_services, resolve_staff
from booking_core.application.utils.slot_grid import build_slots
from booking_core.domain.entities.time_slot import TimeSlot


class ComputeSlotsUseCase:
    def __init__(
        self,
        catalog: CatalogPort,
        repository: BookingRepositoryPort,
        clock: ClockPort,
        step_minutes: int = 30,
    ) -> None:
        if step_minutes <= 0:
            raise ValueError("step_minutes must be positive")
        self._catalog = catalog
        self._repository = repository
        self._clock = clock
        self._step_minutes = step_minutes
        self._logger = logging.getLogger(__name__)

    def execute(self, staff_id: str, day: date, duration_minutes: int) -> list[TimeSlot]:
        """Slots for one staff member and day, judged against the requested duration."""
        if duration_minutes <= 0:
            raise ValidationError("Requested duration must be greater than zero")

        now = self._clock.now()
        if day < now.date():
            raise ValidationError(f"{day.isoformat()} is in the past")

        staff = resolve_staff(self._catalog, staff_id)
        if not staff.available:
            self._logger.info("Staff member not bookable", extra={"staff_id": staff_id})
            return []

        bookings = self._repository.list_for_staff_day(staff_id, day)
        return build_slots(
            staff=staff,
            day=day,
            duration_minutes=duration_minutes,
            bookings=bookings,
            now=now,
            step_minutes=self._step_minutes,
        )

    def execute_for_services(self, staff_id: str, day: date, service_ids: list[str]) -> list[TimeSlot]:
        services = resolve_services(self._catalog, service_ids)
        return self.execute(staff_id, day, sum(s.duration_minutes for s in services))

    def booked_intervals(self, staff_id: str, day: date) -> list[tuple[str, str]]:
        resolve_staff(self._catalog, staff_id)
        bookings = [b for b in self._repository.list_for_staff_day(staff_id, day) if b.is_active]
        bookings.sort(key=lambda b: b.start_minutes)
        return [(b.start_time, b.end_time) for b in bookings]
