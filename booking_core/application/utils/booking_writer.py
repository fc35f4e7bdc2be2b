from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from booking_core.application.exceptions import ConcurrencyError, NotFoundError
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.ports.clock import ClockPort
from booking_core.application.ports.event_publisher import EventPublisherPort
from booking_core.domain.entities.actor import Actor
from booking_core.domain.entities.booking import Booking
from booking_core.domain.entities.booking_event import BOOKING_STATUS_CHANGED, BookingEvent


class BookingWriter:
    """Optimistic read-decide-write loop for one booking, plus fire-and-forget event publishing."""

    def __init__(
        self,
        repository: BookingRepositoryPort,
        clock: ClockPort,
        publisher: EventPublisherPort,
        retries: int = 5,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._publisher = publisher
        self._retries = max(1, retries)
        self._logger = logging.getLogger(__name__)

    def load(self, booking_id: str) -> Booking:
        booking = self._repository.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def update(
        self,
        booking_id: str,
        decide: Callable[[Booking, datetime], Booking],
    ) -> tuple[Booking, Booking]:
        """
        Apply decide() to the latest stored booking and write the result.

        decide() raises to refuse, or returns the same object for a no-op. A lost
        version race re-reads and decides again, so the rules always see the
        state they are writing over. Returns (previous, updated).
        """
        for attempt in range(self._retries):
            current = self.load(booking_id)
            updated = decide(current, self._clock.now())
            if updated is current:
                return current, current
            if self._repository.replace(updated, expected_version=current.version):
                return current, updated
            self._logger.info(
                "Booking write lost a version race, retrying",
                extra={"booking_id": booking_id, "attempt": attempt + 1},
            )
        raise ConcurrencyError(f"Booking {booking_id} kept changing; gave up after {self._retries} attempts")

    def publish(self, events: list[BookingEvent]) -> None:
        for event in events:
            try:
                self._publisher.publish(event)
            except Exception as e:
                # The mutation is already committed; notification is best effort.
                self._logger.exception(
                    "Failed to publish booking event",
                    extra={"event": event.name, "booking_id": event.booking_id, "reason": str(e)},
                )

    def now(self) -> datetime:
        return self._clock.now()


def status_changed_event(previous: Booking, updated: Booking, actor: Actor, now: datetime) -> BookingEvent:
    return BookingEvent(
        name=BOOKING_STATUS_CHANGED,
        booking_id=updated.booking_id,
        occurred_at=now,
        payload={
            "previous_status": previous.status.value,
            "new_status": updated.status.value,
            "actor_role": actor.role.value,
        },
    )
