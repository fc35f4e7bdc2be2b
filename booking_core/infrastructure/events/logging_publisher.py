from __future__ import annotations

import logging

from booking_core.application.ports.event_publisher import EventPublisherPort
from booking_core.domain.entities.booking_event import BookingEvent


class LoggingEventPublisher(EventPublisherPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def publish(self, event: BookingEvent) -> None:
        self._logger.info(
            "Booking event", extra={"event": event.name, "booking_id": event.booking_id, "payload": event.payload}
        )
