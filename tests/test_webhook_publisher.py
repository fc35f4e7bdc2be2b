"""
Tests for event delivery over HTTP and through the logging publisher.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime

import httpx
import pytest
from fastapi import BackgroundTasks

from booking_core.application.use_cases.booking_ledger import BookingLedger
from booking_core.domain.entities.booking import BookingStatus
from booking_core.domain.entities.booking_event import BOOKING_CREATED, BookingEvent
from booking_core.infrastructure.events.background_publisher import BackgroundEventPublisher
from booking_core.infrastructure.events.logging_publisher import LoggingEventPublisher
from booking_core.infrastructure.events.memory_publisher import MemoryEventPublisher
from booking_core.infrastructure.events.webhook_publisher import WebhookEventPublisher

from conftest import STAFF, book

EVENT = BookingEvent(
    name=BOOKING_CREATED,
    booking_id="b1",
    occurred_at=datetime(2030, 3, 3, 12, 0),
    payload={"staff_id": "1", "start_time": "10:00"},
)


def test_webhook_posts_event_json():
    """Test that the event is POSTed as JSON to the configured URL."""
    received: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append(request)
        return httpx.Response(204)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    WebhookEventPublisher(url="https://hooks.example.com/bookings", client=client).publish(EVENT)

    assert len(received) == 1
    assert str(received[0].url) == "https://hooks.example.com/bookings"
    body = json.loads(received[0].content)
    assert body["name"] == "booking.created"
    assert body["booking_id"] == "b1"
    assert body["occurred_at"] == "2030-03-03T12:00:00"
    assert body["payload"]["start_time"] == "10:00"


def test_webhook_error_status_raises():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom")))
    publisher = WebhookEventPublisher(url="https://hooks.example.com/bookings", client=client)

    with pytest.raises(httpx.HTTPStatusError):
        publisher.publish(EVENT)


def test_webhook_failure_does_not_undo_booking(catalog, store, clock):
    """Test that a failing webhook leaves the booking and its transition committed."""
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    publisher = WebhookEventPublisher(url="https://hooks.example.com/bookings", client=client)
    ledger = BookingLedger(catalog, store, clock, publisher)

    booking = book(ledger)
    ledger.transition(booking.booking_id, BookingStatus.confirmed, STAFF)

    assert store.get(booking.booking_id).status == BookingStatus.confirmed


def test_logging_publisher(caplog):
    with caplog.at_level(logging.INFO, logger="booking_core.infrastructure.events.logging_publisher"):
        LoggingEventPublisher().publish(EVENT)

    record = caplog.records[-1]
    assert record.event == "booking.created"
    assert record.booking_id == "b1"
    assert record.payload == {"staff_id": "1", "start_time": "10:00"}


def test_webhook_close_closes_client():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(204)))
    publisher = WebhookEventPublisher(url="https://hooks.example.com/bookings", client=client)

    publisher.close()

    assert client.is_closed


def test_background_publisher_delivers_after_the_request():
    """Test that events wait in the background tasks until they run."""
    inner = MemoryEventPublisher()
    tasks = BackgroundTasks()
    publisher = BackgroundEventPublisher(inner, tasks)

    publisher.publish(EVENT)
    assert inner.events == []

    asyncio.run(tasks())
    assert inner.events == [EVENT]


def test_background_publisher_logs_delivery_failures(caplog):
    """Test that a slow or failing webhook never reaches the booking response."""
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    tasks = BackgroundTasks()
    publisher = BackgroundEventPublisher(WebhookEventPublisher(url="https://hooks.example.com/b", client=client), tasks)

    publisher.publish(EVENT)
    with caplog.at_level(logging.ERROR, logger="booking_core.infrastructure.events.background_publisher"):
        asyncio.run(tasks())

    failures = [r for r in caplog.records if r.name == "booking_core.infrastructure.events.background_publisher"]
    assert len(failures) == 1
    assert failures[0].booking_id == "b1"


def test_ledger_events_are_deferred(catalog, store, clock):
    """Test that a booking commits before any event is delivered."""
    inner = MemoryEventPublisher()
    tasks = BackgroundTasks()
    ledger = BookingLedger(catalog, store, clock, BackgroundEventPublisher(inner, tasks))

    booking = book(ledger)

    assert store.get(booking.booking_id) is not None
    assert inner.events == []
    asyncio.run(tasks())
    assert inner.names() == [BOOKING_CREATED]
