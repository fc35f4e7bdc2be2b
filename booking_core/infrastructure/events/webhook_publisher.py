from __future__ import annotations

import logging

import httpx

from booking_core.application.ports.event_publisher import EventPublisherPort
from booking_core.domain.entities.booking_event import BookingEvent


class WebhookEventPublisher(EventPublisherPort):
    def __init__(self, url: str, timeout: float = 3.0, client: httpx.Client | None = None) -> None:
        self._url = url
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def publish(self, event: BookingEvent) -> None:
        resp = self._client.post(self._url, json=event.to_dict())
        if resp.status_code >= 400:
            self._logger.error(
                "Event webhook failed",
                extra={
                    "status": resp.status_code,
                    "event": event.name,
                    "booking_id": event.booking_id,
                    "reason": resp.text[:200],
                },
            )
            resp.raise_for_status()

    def close(self) -> None:
        self._client.close()
