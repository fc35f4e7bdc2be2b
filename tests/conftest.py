from __future__ import annotations

from datetime import date, datetime

import pytest

from booking_core.application.use_cases.booking_ledger import BookingLedger
from booking_core.application.use_cases.booking_queries import BookingQueriesUseCase
from booking_core.application.use_cases.compute_slots import ComputeSlotsUseCase
from booking_core.application.use_cases.payment_verification import PaymentVerificationUseCase
from booking_core.domain.entities.actor import Actor, ActorRole
from booking_core.domain.entities.booking import CustomerInfo
from booking_core.domain.entities.catalog import PaymentMethod, Service, StaffMember
from booking_core.infrastructure.catalog.catalog_store import MemoryCatalogStore
from booking_core.infrastructure.clock.fixed_clock import FixedClock
from booking_core.infrastructure.events.memory_publisher import MemoryEventPublisher
from booking_core.infrastructure.store.memory_store import MemoryBookingStore

DAY = date(2030, 3, 4)

STAFF = Actor(actor_id="staff-1", role=ActorRole.staff)
ADMIN = Actor(actor_id="admin-1", role=ActorRole.admin)
CUSTOMER = Actor(actor_id="cust-1", role=ActorRole.customer)
OTHER_CUSTOMER = Actor(actor_id="cust-2", role=ActorRole.customer)

CUSTOMER_INFO = CustomerInfo(name="Andi Pratama", email="andi@example.com", phone="081234567890", notes="")


def build_catalog() -> MemoryCatalogStore:
    return MemoryCatalogStore(
        services={
            "svc30": Service(service_id="svc30", name="Haircut", category="haircut", price=20, duration_minutes=30),
            "svc60": Service(service_id="svc60", name="Coloring", category="treatment", price=80, duration_minutes=60),
            "svc15": Service(service_id="svc15", name="Beard Trim", category="shaving", price=10, duration_minutes=15),
            "retired": Service(
                service_id="retired", name="Old Perm", category="treatment", price=50, duration_minutes=30, active=False
            ),
        },
        staff={
            "1": StaffMember(staff_id="1", name="Raka", role="Barber", work_start="09:00", work_end="17:00"),
            "2": StaffMember(staff_id="2", name="Dimas", role="Barber", work_start="12:00", work_end="20:00"),
            "off": StaffMember(
                staff_id="off", name="Bagas", role="Barber", work_start="09:00", work_end="17:00", available=False
            ),
            "empty": StaffMember(staff_id="empty", name="Yusuf", role="Barber", work_start="10:00", work_end="10:00"),
        },
        payment_methods={
            "cash": PaymentMethod(method_id="cash", name="Pay on Arrival", kind="cash"),
            "bca": PaymentMethod(method_id="bca", name="Bank BCA", kind="bank", account_number="1234567890"),
            "qris": PaymentMethod(method_id="qris", name="QRIS", kind="qris"),
        },
    )


@pytest.fixture
def clock() -> FixedClock:
    # The day before DAY, so every slot on DAY is in the future.
    return FixedClock(datetime(2030, 3, 3, 12, 0))


@pytest.fixture
def catalog() -> MemoryCatalogStore:
    return build_catalog()


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore()


@pytest.fixture
def publisher() -> MemoryEventPublisher:
    return MemoryEventPublisher()


@pytest.fixture
def ledger(catalog, store, clock, publisher) -> BookingLedger:
    return BookingLedger(catalog=catalog, repository=store, clock=clock, publisher=publisher, step_minutes=30)


@pytest.fixture
def payments(store, clock, publisher) -> PaymentVerificationUseCase:
    return PaymentVerificationUseCase(repository=store, clock=clock, publisher=publisher)


@pytest.fixture
def slots(catalog, store, clock) -> ComputeSlotsUseCase:
    return ComputeSlotsUseCase(catalog=catalog, repository=store, clock=clock, step_minutes=30)


@pytest.fixture
def queries(store, clock) -> BookingQueriesUseCase:
    return BookingQueriesUseCase(repository=store, clock=clock)


def book(
    ledger: BookingLedger,
    start: str = "10:00",
    services: list[str] | None = None,
    staff_id: str = "1",
    day: date = DAY,
    payment: str = "cash",
    actor: Actor = CUSTOMER,
    customer: CustomerInfo = CUSTOMER_INFO,
):
    return ledger.create_booking(
        staff_id=staff_id,
        day=day,
        start_time=start,
        service_ids=services or ["svc30"],
        customer=customer,
        payment_method_id=payment,
        actor=actor,
    )
