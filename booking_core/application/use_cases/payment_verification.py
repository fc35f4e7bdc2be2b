from __future__ import annotations

import logging

from booking_core.application.exceptions import ValidationError
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.ports.clock import ClockPort
from booking_core.application.ports.event_publisher import EventPublisherPort
from booking_core.application.utils.booking_lifecycle import approve_payment, reject_payment, submit_proof
from booking_core.application.utils.booking_writer import BookingWriter, status_changed_event
from booking_core.domain.entities.actor import SYSTEM_ACTOR, Actor
from booking_core.domain.entities.booking import Booking
from booking_core.domain.entities.booking_event import PAYMENT_VERIFIED, BookingEvent


class PaymentVerificationUseCase:
    """
    Proof-of-payment workflow for transfer and QRIS bookings.

    Customers upload a proof reference, staff approve or reject it. Approval
    confirms a pending booking in the same write; rejection sends the customer
    back to upload again.
    """

    def __init__(
        self,
        repository: BookingRepositoryPort,
        clock: ClockPort,
        publisher: EventPublisherPort,
        write_retries: int = 5,
    ) -> None:
        self._writer = BookingWriter(repository, clock, publisher, retries=write_retries)
        self._logger = logging.getLogger(__name__)

    def submit_proof(self, booking_id: str, proof_reference: str, actor: Actor) -> Booking:
        proof = (proof_reference or "").strip()
        if not proof:
            raise ValidationError("Payment proof reference is required")

        _, updated = self._writer.update(
            booking_id,
            lambda booking, now: submit_proof(booking, proof, actor, now),
        )
        self._logger.info(
            "Payment proof submitted",
            extra={"booking_id": booking_id, "status": updated.payment_status.value},
        )
        return updated

    def verify_payment(self, booking_id: str, approve: bool, actor: Actor) -> Booking:
        decide = approve_payment if approve else reject_payment
        previous, updated = self._writer.update(
            booking_id,
            lambda booking, now: decide(booking, actor, now),
        )
        if updated is previous:
            self._logger.info("Payment already verified", extra={"booking_id": booking_id})
            return updated

        now = self._writer.now()
        events = [
            BookingEvent(
                name=PAYMENT_VERIFIED,
                booking_id=booking_id,
                occurred_at=now,
                payload={
                    "approved": approve,
                    "payment_status": updated.payment_status.value,
                    "actor_role": actor.role.value,
                },
            )
        ]
        if updated.status != previous.status:
            events.append(status_changed_event(previous, updated, SYSTEM_ACTOR, now))

        self._logger.info(
            "Payment verified",
            extra={
                "booking_id": booking_id,
                "status": updated.status.value,
                "reason": "approved" if approve else "rejected",
            },
        )
        self._writer.publish(events)
        return updated
