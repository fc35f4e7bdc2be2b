from __future__ import annotations

import logging

from fastapi import BackgroundTasks

from booking_core.application.ports.event_publisher import EventPublisherPort
from booking_core.domain.entities.booking_event import BookingEvent


class BackgroundEventPublisher(EventPublisherPort):
    """Defers delivery to the request's background tasks, which run after the response is sent."""

    def __init__(self, publisher: EventPublisherPort, background_tasks: BackgroundTasks) -> None:
        self._publisher = publisher
        self._background_tasks = background_tasks
        self._logger = logging.getLogger(__name__)

    def publish(self, event: BookingEvent) -> None:
        self._background_tasks.add_task(self._deliver, event)

    def _deliver(self, event: BookingEvent) -> None:
        try:
            self._publisher.publish(event)
        except Exception as e:
            self._logger.exception(
                "Failed to deliver booking event",
                extra={"event": event.name, "booking_id": event.booking_id, "reason": str(e)},
            )
