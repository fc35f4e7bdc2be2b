from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from booking_core.application.exceptions import InvalidTransitionError
from booking_core.domain.entities.actor import SYSTEM_ACTOR, Actor, ActorRole
from booking_core.domain.entities.booking import TERMINAL_STATUSES, Booking, BookingStatus, PaymentStatus

_STAFF = frozenset({ActorRole.staff, ActorRole.admin})

# (from, to) -> roles allowed to request it. Ownership and payment coupling are checked separately.
TRANSITIONS: dict[tuple[BookingStatus, BookingStatus], frozenset[ActorRole]] = {
    (BookingStatus.pending, BookingStatus.confirmed): _STAFF | {ActorRole.system},
    (BookingStatus.pending, BookingStatus.cancelled): _STAFF | {ActorRole.customer},
    (BookingStatus.confirmed, BookingStatus.completed): _STAFF,
    (BookingStatus.confirmed, BookingStatus.cancelled): _STAFF | {ActorRole.customer},
}

# Payment states from which a booking may be confirmed.
CONFIRMABLE_PAYMENT = frozenset({PaymentStatus.not_applicable, PaymentStatus.paid})


@dataclass(frozen=True)
class LifecyclePolicy:
    customer_can_cancel_confirmed: bool = True


def _denied(booking: Booking, message: str) -> InvalidTransitionError:
    return InvalidTransitionError(
        message,
        current_status=booking.status.value,
        payment_status=booking.payment_status.value,
    )


def _touch(booking: Booking, now: datetime, **changes) -> Booking:
    return replace(booking, updated_at=now, version=booking.version + 1, **changes)


def owns_booking(booking: Booking, actor: Actor) -> bool:
    return booking.customer_id is not None and booking.customer_id == actor.actor_id


def check_transition(
    booking: Booking,
    target: BookingStatus,
    actor: Actor,
    policy: LifecyclePolicy,
) -> None:
    allowed_roles = TRANSITIONS.get((booking.status, target))
    if allowed_roles is None:
        raise _denied(booking, f"Cannot move booking from {booking.status.value} to {target.value}")
    if actor.role not in allowed_roles:
        raise _denied(
            booking,
            f"{actor.role.value} may not move booking from {booking.status.value} to {target.value}",
        )

    if actor.role == ActorRole.customer:
        if not owns_booking(booking, actor):
            raise _denied(booking, "Customers may only change their own bookings")
        if booking.status == BookingStatus.confirmed and not policy.customer_can_cancel_confirmed:
            raise _denied(booking, "Confirmed bookings can only be cancelled by staff")

    if target == BookingStatus.confirmed and booking.payment_status not in CONFIRMABLE_PAYMENT:
        raise _denied(booking, "Booking cannot be confirmed until payment is verified")


def apply_transition(
    booking: Booking,
    target: BookingStatus,
    actor: Actor,
    policy: LifecyclePolicy,
    now: datetime,
) -> Booking:
    check_transition(booking, target, actor, policy)
    return _touch(booking, now, status=target)


def submit_proof(booking: Booking, proof_reference: str, actor: Actor, now: datetime) -> Booking:
    """pending/rejected -> waiting_verification. A resubmission while waiting replaces the proof."""
    if not (actor.role in _STAFF or owns_booking(booking, actor)):
        raise _denied(booking, "Only the booking customer or staff may submit payment proof")
    if booking.status in TERMINAL_STATUSES:
        raise _denied(booking, f"Cannot submit payment proof for a {booking.status.value} booking")
    if booking.payment_status == PaymentStatus.not_applicable:
        raise _denied(booking, "Payment method does not take proof of payment")
    if booking.payment_status == PaymentStatus.paid:
        raise _denied(booking, "Payment is already verified")

    return _touch(
        booking,
        now,
        payment_status=PaymentStatus.waiting_verification,
        payment_proof=proof_reference,
    )


def approve_payment(booking: Booking, actor: Actor, now: datetime) -> Booking:
    """waiting_verification -> paid, confirming a pending booking in the same write.

    Approving an already paid booking returns it untouched.
    """
    if actor.role not in _STAFF:
        raise _denied(booking, "Only staff may verify payments")
    if booking.payment_status == PaymentStatus.paid:
        return booking
    if booking.payment_status != PaymentStatus.waiting_verification:
        raise _denied(booking, "No payment proof is waiting for verification")
    if booking.status in TERMINAL_STATUSES:
        raise _denied(booking, f"Cannot verify payment for a {booking.status.value} booking")

    paid = replace(booking, payment_status=PaymentStatus.paid)
    if paid.status == BookingStatus.pending:
        check_transition(paid, BookingStatus.confirmed, SYSTEM_ACTOR, LifecyclePolicy())
        paid = replace(paid, status=BookingStatus.confirmed)
    return _touch(paid, now)


def reject_payment(booking: Booking, actor: Actor, now: datetime) -> Booking:
    """waiting_verification -> rejected. The proof is dropped and the booking status is left alone."""
    if actor.role not in _STAFF:
        raise _denied(booking, "Only staff may verify payments")
    if booking.payment_status != PaymentStatus.waiting_verification:
        raise _denied(booking, "No payment proof is waiting for verification")
    if booking.status in TERMINAL_STATUSES:
        raise _denied(booking, f"Cannot verify payment for a {booking.status.value} booking")

    return _touch(booking, now, payment_status=PaymentStatus.rejected, payment_proof=None)
