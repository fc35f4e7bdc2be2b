from __future__ import annotations

import threading

from booking_core.application.ports.event_publisher import EventPublisherPort
from booking_core.domain.entities.booking_event import BookingEvent


class MemoryEventPublisher(EventPublisherPort):
    """Keeps published events in order; used for local runs and tests."""

    def __init__(self) -> None:
        self._events: list[BookingEvent] = []
        self._lock = threading.Lock()

    def publish(self, event: BookingEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> list[BookingEvent]:
        with self._lock:
            return list(self._events)

    def names(self) -> list[str]:
        return [e.name for e in self.events]
