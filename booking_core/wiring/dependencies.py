from functools import lru_cache
import logging

from fastapi import BackgroundTasks

from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.ports.catalog import CatalogPort
from booking_core.application.ports.clock import ClockPort
from booking_core.application.ports.event_publisher import EventPublisherPort
from booking_core.application.use_cases.booking_ledger import BookingLedger
from booking_core.application.use_cases.booking_queries import BookingQueriesUseCase
from booking_core.application.use_cases.compute_slots import ComputeSlotsUseCase
from booking_core.application.use_cases.payment_verification import PaymentVerificationUseCase
from booking_core.application.utils.booking_lifecycle import LifecyclePolicy
from booking_core.core.config import settings
from booking_core.infrastructure.catalog.catalog_store import MemoryCatalogStore
from booking_core.infrastructure.clock.system_clock import SystemClock
from booking_core.infrastructure.events.background_publisher import BackgroundEventPublisher
from booking_core.infrastructure.events.logging_publisher import LoggingEventPublisher
from booking_core.infrastructure.events.webhook_publisher import WebhookEventPublisher
from booking_core.infrastructure.store.json_store import JsonBookingStore
from booking_core.infrastructure.store.memory_store import MemoryBookingStore


@lru_cache
def get_catalog() -> CatalogPort:
    return MemoryCatalogStore()


@lru_cache
def get_booking_repository() -> BookingRepositoryPort:
    logger = logging.getLogger(__name__)
    if settings.STORE_PROVIDER.lower() == "json":
        logger.info("Using JsonBookingStore", extra={"reason": settings.BOOKING_DATA_DIR})
        return JsonBookingStore(data_dir=settings.BOOKING_DATA_DIR)
    if settings.ENV.lower() not in {"dev", "local", "test"}:
        logger.warning("Using MemoryBookingStore outside dev; bookings are lost on restart")
    return MemoryBookingStore()


@lru_cache
def get_clock() -> ClockPort:
    return SystemClock(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_event_publisher() -> EventPublisherPort:
    if settings.EVENT_WEBHOOK_URL and settings.EVENT_WEBHOOK_URL.strip():
        return WebhookEventPublisher(
            url=settings.EVENT_WEBHOOK_URL,
            timeout=settings.EVENT_WEBHOOK_TIMEOUT_SECONDS,
        )
    return LoggingEventPublisher()


def get_compute_slots_use_case() -> ComputeSlotsUseCase:
    return ComputeSlotsUseCase(
        catalog=get_catalog(),
        repository=get_booking_repository(),
        clock=get_clock(),
        step_minutes=settings.SLOT_STEP_MINUTES,
    )


def get_booking_ledger(background_tasks: BackgroundTasks) -> BookingLedger:
    return BookingLedger(
        catalog=get_catalog(),
        repository=get_booking_repository(),
        clock=get_clock(),
        publisher=BackgroundEventPublisher(get_event_publisher(), background_tasks),
        step_minutes=settings.SLOT_STEP_MINUTES,
        policy=LifecyclePolicy(customer_can_cancel_confirmed=settings.CUSTOMER_CAN_CANCEL_CONFIRMED),
        auto_confirm_cash=settings.AUTO_CONFIRM_CASH_BOOKINGS,
        write_retries=settings.BOOKING_WRITE_RETRIES,
    )


def get_payment_verification_use_case(background_tasks: BackgroundTasks) -> PaymentVerificationUseCase:
    return PaymentVerificationUseCase(
        repository=get_booking_repository(),
        clock=get_clock(),
        publisher=BackgroundEventPublisher(get_event_publisher(), background_tasks),
        write_retries=settings.BOOKING_WRITE_RETRIES,
    )


def get_booking_queries_use_case() -> BookingQueriesUseCase:
    return BookingQueriesUseCase(repository=get_booking_repository(), clock=get_clock())
