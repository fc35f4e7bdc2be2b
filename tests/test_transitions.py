"""
Tests for the booking status lifecycle: allowed moves, who may make them, and what they emit.
"""

from __future__ import annotations

from dataclasses import replace
from itertools import product

import pytest

from booking_core.application.exceptions import ConcurrencyError, InvalidTransitionError, NotFoundError
from booking_core.application.ports.event_publisher import EventPublisherPort
from booking_core.application.use_cases.booking_ledger import BookingLedger
from booking_core.application.utils.booking_lifecycle import TRANSITIONS, LifecyclePolicy
from booking_core.domain.entities.booking import BookingStatus, PaymentStatus
from booking_core.domain.entities.booking_event import BOOKING_CREATED, BOOKING_STATUS_CHANGED
from booking_core.infrastructure.store.memory_store import MemoryBookingStore

from conftest import ADMIN, CUSTOMER, OTHER_CUSTOMER, STAFF, book


def _force(store, booking, **changes):
    """Put a booking into an arbitrary state, bypassing the lifecycle rules."""
    forced = replace(booking, version=booking.version + 1, **changes)
    assert store.replace(forced, expected_version=booking.version)
    return forced


class _FailingPublisher(EventPublisherPort):
    def publish(self, event):
        raise RuntimeError("webhook down")


STAFF_MOVES = {
    (BookingStatus.pending, BookingStatus.confirmed),
    (BookingStatus.pending, BookingStatus.cancelled),
    (BookingStatus.confirmed, BookingStatus.completed),
    (BookingStatus.confirmed, BookingStatus.cancelled),
}


@pytest.mark.parametrize("source,target", list(product(BookingStatus, BookingStatus)))
def test_every_status_pair(ledger, store, source, target):
    """Test each (from, to) pair for staff on a cash booking; refused moves change nothing."""
    booking = _force(store, book(ledger), status=source)

    if (source, target) in STAFF_MOVES:
        updated = ledger.transition(booking.booking_id, target, STAFF)
        assert updated.status == target
        assert updated.version == booking.version + 1
        assert store.get(booking.booking_id).status == target
    else:
        with pytest.raises(InvalidTransitionError) as exc:
            ledger.transition(booking.booking_id, target, STAFF)
        assert exc.value.current_status == source.value
        stored = store.get(booking.booking_id)
        assert stored.status == source
        assert stored.version == booking.version


def test_transition_table_has_no_way_out_of_terminal_states():
    """Test that completed and cancelled never appear as a source."""
    sources = {source for source, _ in TRANSITIONS}

    assert BookingStatus.completed not in sources
    assert BookingStatus.cancelled not in sources


def test_customers_cannot_confirm_or_complete(ledger):
    """Test that customers may only cancel."""
    booking = book(ledger, actor=CUSTOMER)

    with pytest.raises(InvalidTransitionError):
        ledger.transition(booking.booking_id, BookingStatus.confirmed, CUSTOMER)

    ledger.transition(booking.booking_id, BookingStatus.confirmed, STAFF)
    with pytest.raises(InvalidTransitionError):
        ledger.transition(booking.booking_id, BookingStatus.completed, CUSTOMER)


def test_customer_can_only_cancel_own_booking(ledger, store):
    """Test that another customer's cancel is refused and leaves the booking alone."""
    booking = book(ledger, actor=CUSTOMER)

    with pytest.raises(InvalidTransitionError):
        ledger.cancel_booking(booking.booking_id, OTHER_CUSTOMER)
    assert store.get(booking.booking_id).status == BookingStatus.pending

    cancelled = ledger.cancel_booking(booking.booking_id, CUSTOMER)
    assert cancelled.status == BookingStatus.cancelled


def test_customer_cannot_cancel_walk_in(ledger):
    """Test that a booking without an owning customer can only be changed by staff."""
    walk_in = book(ledger, actor=STAFF)

    with pytest.raises(InvalidTransitionError):
        ledger.cancel_booking(walk_in.booking_id, CUSTOMER)
    assert ledger.cancel_booking(walk_in.booking_id, ADMIN).status == BookingStatus.cancelled


def test_customer_cancel_of_confirmed_follows_policy(catalog, store, clock, publisher):
    """Test the confirmed-cancel policy switch for customers."""
    strict = BookingLedger(catalog, store, clock, publisher, policy=LifecyclePolicy(customer_can_cancel_confirmed=False))
    booking = book(strict, actor=CUSTOMER)
    strict.transition(booking.booking_id, BookingStatus.confirmed, STAFF)

    with pytest.raises(InvalidTransitionError):
        strict.cancel_booking(booking.booking_id, CUSTOMER)
    assert strict.cancel_booking(booking.booking_id, STAFF).status == BookingStatus.cancelled

    lenient = BookingLedger(catalog, store, clock, publisher)
    other = book(lenient, start="11:00", actor=CUSTOMER)
    lenient.transition(other.booking_id, BookingStatus.confirmed, STAFF)
    assert lenient.cancel_booking(other.booking_id, CUSTOMER).status == BookingStatus.cancelled


def test_confirm_requires_verified_payment(ledger, store):
    """Test that transfer bookings cannot be confirmed before payment is verified."""
    booking = book(ledger, payment="bca")

    for payment_status in (PaymentStatus.pending, PaymentStatus.waiting_verification, PaymentStatus.rejected):
        current = _force(store, store.get(booking.booking_id), payment_status=payment_status)
        with pytest.raises(InvalidTransitionError) as exc:
            ledger.transition(booking.booking_id, BookingStatus.confirmed, STAFF)
        assert exc.value.payment_status == payment_status.value
        assert store.get(booking.booking_id).version == current.version

    _force(store, store.get(booking.booking_id), payment_status=PaymentStatus.paid)
    assert ledger.transition(booking.booking_id, BookingStatus.confirmed, STAFF).status == BookingStatus.confirmed


def test_unknown_target_status(ledger):
    """Test that a status name outside the lifecycle is refused with the current state."""
    booking = book(ledger)

    with pytest.raises(InvalidTransitionError) as exc:
        ledger.transition(booking.booking_id, "archived", STAFF)
    assert exc.value.current_status == "pending"
    assert exc.value.payment_status == "not_applicable"

    assert ledger.transition(booking.booking_id, "confirmed", STAFF).status == BookingStatus.confirmed


def test_unknown_booking(ledger):
    with pytest.raises(NotFoundError):
        ledger.transition("missing", BookingStatus.confirmed, STAFF)


def test_status_changed_event(ledger, publisher):
    """Test that each successful move emits one booking.status_changed with the old and new status."""
    booking = book(ledger)
    ledger.transition(booking.booking_id, BookingStatus.confirmed, STAFF)
    ledger.transition(booking.booking_id, BookingStatus.completed, ADMIN)

    assert publisher.names() == [BOOKING_CREATED, BOOKING_STATUS_CHANGED, BOOKING_STATUS_CHANGED]
    first, second = publisher.events[1:]
    assert first.payload == {"previous_status": "pending", "new_status": "confirmed", "actor_role": "staff"}
    assert second.payload == {"previous_status": "confirmed", "new_status": "completed", "actor_role": "admin"}


def test_refused_move_emits_nothing(ledger, publisher):
    booking = book(ledger)

    with pytest.raises(InvalidTransitionError):
        ledger.transition(booking.booking_id, BookingStatus.completed, STAFF)

    assert publisher.names() == [BOOKING_CREATED]


def test_publish_failure_keeps_the_change(catalog, store, clock):
    """Test that a broken notifier does not undo a committed booking or transition."""
    ledger = BookingLedger(catalog, store, clock, _FailingPublisher())

    booking = book(ledger)
    confirmed = ledger.transition(booking.booking_id, BookingStatus.confirmed, STAFF)

    assert confirmed.status == BookingStatus.confirmed
    assert store.get(booking.booking_id).status == BookingStatus.confirmed


class _RacingStore(MemoryBookingStore):
    """Cancels the booking behind the writer's back on the first replace."""

    def __init__(self) -> None:
        super().__init__()
        self.raced = False

    def replace(self, booking, expected_version):
        if not self.raced:
            self.raced = True
            current = self.get(booking.booking_id)
            super().replace(
                replace(current, status=BookingStatus.cancelled, version=current.version + 1),
                expected_version=current.version,
            )
        return super().replace(booking, expected_version)


class _StuckStore(MemoryBookingStore):
    def replace(self, booking, expected_version):
        return False


def test_lost_race_is_decided_again(catalog, clock, publisher):
    """Test that a write that lost a version race re-reads and re-checks the rules."""
    store = _RacingStore()
    ledger = BookingLedger(catalog, store, clock, publisher)
    booking = book(ledger)

    with pytest.raises(InvalidTransitionError) as exc:
        ledger.transition(booking.booking_id, BookingStatus.confirmed, STAFF)

    assert exc.value.current_status == "cancelled"
    assert store.get(booking.booking_id).status == BookingStatus.cancelled


def test_writer_gives_up_after_retries(catalog, clock, publisher):
    store = _StuckStore()
    ledger = BookingLedger(catalog, store, clock, publisher, write_retries=3)
    booking = book(ledger)

    with pytest.raises(ConcurrencyError):
        ledger.transition(booking.booking_id, BookingStatus.confirmed, STAFF)
    assert store.get(booking.booking_id).status == BookingStatus.pending
