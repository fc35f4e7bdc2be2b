from __future__ import annotations

import logging
import uuid
from datetime import date

from booking_core.application.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.ports.catalog import CatalogPort
from booking_core.application.ports.clock import ClockPort
from booking_core.application.ports.event_publisher import EventPublisherPort
from booking_core.application.utils.booking_lifecycle import LifecyclePolicy, apply_transition
from booking_core.application.utils.booking_writer import BookingWriter, status_changed_event
from booking_core.application.utils.catalog_lookup import resolve_services, resolve_staff
from booking_core.application.utils.slot_grid import find_overlap, work_window
from booking_core.domain.entities.actor import SYSTEM_ACTOR, Actor, ActorRole
from booking_core.domain.entities.booking import (
    BookedService,
    Booking,
    BookingStatus,
    CustomerInfo,
    PaymentStatus,
)
from booking_core.domain.entities.booking_event import BOOKING_CREATED, BookingEvent
from booking_core.domain.rules.time_grid import format_hhmm, is_grid_aligned, parse_hhmm

_BOOKING_ROLES = (ActorRole.customer, ActorRole.staff, ActorRole.admin)


class BookingLedger:
    """Creates bookings and moves them through their status lifecycle."""

    def __init__(
        self,
        catalog: CatalogPort,
        repository: BookingRepositoryPort,
        clock: ClockPort,
        publisher: EventPublisherPort,
        step_minutes: int = 30,
        policy: LifecyclePolicy | None = None,
        auto_confirm_cash: bool = False,
        write_retries: int = 5,
    ) -> None:
        if step_minutes <= 0:
            raise ValueError("step_minutes must be positive")
        self._catalog = catalog
        self._repository = repository
        self._clock = clock
        self._step_minutes = step_minutes
        self._policy = policy or LifecyclePolicy()
        self._auto_confirm_cash = auto_confirm_cash
        self._writer = BookingWriter(repository, clock, publisher, retries=write_retries)
        self._logger = logging.getLogger(__name__)

    def create_booking(
        self,
        staff_id: str,
        day: date,
        start_time: str,
        service_ids: list[str],
        customer: CustomerInfo,
        payment_method_id: str,
        actor: Actor | None,
    ) -> Booking:
        if actor is None:
            raise ValidationError("You must be signed in to book")
        if actor.role not in _BOOKING_ROLES:
            raise ValidationError(f"{actor.role.value} actors cannot create bookings")
        self._validate_customer(customer)

        services = resolve_services(self._catalog, service_ids)
        staff = resolve_staff(self._catalog, staff_id)
        if not staff.available:
            raise ValidationError(f"{staff.name} is not taking bookings")

        payment_method = self._catalog.get_payment_method(payment_method_id)
        if payment_method is None:
            raise NotFoundError(f"Payment method {payment_method_id} not found")

        try:
            start = parse_hhmm(start_time)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        now = self._clock.now()
        if day < now.date() or (day == now.date() and start <= now.hour * 60 + now.minute):
            raise ValidationError("Cannot book a time that has already passed")

        window = work_window(staff)
        if window is None:
            raise ValidationError(f"{staff.name} has no working hours set")

        total_duration = sum(s.duration_minutes for s in services)
        # A time that is already taken is reported as a conflict even when it is also off-grid.
        if find_overlap(self._repository.list_for_staff_day(staff.staff_id, day), start, start + total_duration):
            raise ConflictError()
        if not is_grid_aligned(start, window[0], self._step_minutes):
            raise ValidationError(
                f"Start time {start_time} is not on the {self._step_minutes}-minute booking grid"
            )
        if start + total_duration > window[1]:
            raise ValidationError(
                f"Appointment would run past {staff.name}'s working hours ({staff.work_start}-{staff.work_end})"
            )

        booking = Booking(
            booking_id=uuid.uuid4().hex,
            staff_id=staff.staff_id,
            date=day,
            start_time=format_hhmm(start),
            services=tuple(
                BookedService(
                    service_id=s.service_id,
                    name=s.name,
                    price=s.price,
                    duration_minutes=s.duration_minutes,
                )
                for s in services
            ),
            total_price=sum(s.price for s in services),
            total_duration=total_duration,
            customer=customer,
            customer_id=actor.actor_id if actor.role == ActorRole.customer else None,
            payment_method_id=payment_method.method_id,
            payment_status=PaymentStatus.pending if payment_method.requires_proof else PaymentStatus.not_applicable,
            status=BookingStatus.pending,
            created_at=now,
            updated_at=now,
        )

        if not self._repository.insert_if_free(booking):
            self._logger.info(
                "Booking conflict at commit",
                extra={"staff_id": staff_id, "date": day.isoformat(), "start_time": start_time},
            )
            raise ConflictError()

        self._logger.info(
            "Booking created",
            extra={"booking_id": booking.booking_id, "staff_id": staff_id, "status": booking.status.value},
        )
        self._writer.publish(
            [
                BookingEvent(
                    name=BOOKING_CREATED,
                    booking_id=booking.booking_id,
                    occurred_at=now,
                    payload={
                        "staff_id": booking.staff_id,
                        "date": booking.date.isoformat(),
                        "start_time": booking.start_time,
                        "total_price": booking.total_price,
                        "total_duration": booking.total_duration,
                        "payment_status": booking.payment_status.value,
                        "customer_id": booking.customer_id,
                    },
                )
            ]
        )

        if self._auto_confirm_cash and booking.payment_status == PaymentStatus.not_applicable:
            return self._apply(booking.booking_id, BookingStatus.confirmed, SYSTEM_ACTOR)
        return booking

    def transition(self, booking_id: str, target_status: BookingStatus | str, actor: Actor) -> Booking:
        if isinstance(target_status, BookingStatus):
            target = target_status
        else:
            try:
                target = BookingStatus(target_status)
            except ValueError:
                current = self._writer.load(booking_id)
                raise InvalidTransitionError(
                    f"Unknown booking status {target_status!r}",
                    current_status=current.status.value,
                    payment_status=current.payment_status.value,
                )
        return self._apply(booking_id, target, actor)

    def cancel_booking(self, booking_id: str, actor: Actor) -> Booking:
        return self.transition(booking_id, BookingStatus.cancelled, actor)

    def _apply(self, booking_id: str, target: BookingStatus, actor: Actor) -> Booking:
        previous, updated = self._writer.update(
            booking_id,
            lambda booking, now: apply_transition(booking, target, actor, self._policy, now),
        )
        self._logger.info(
            "Booking status changed",
            extra={
                "booking_id": booking_id,
                "status": updated.status.value,
                "reason": f"{previous.status.value}->{updated.status.value} by {actor.role.value}",
            },
        )
        self._writer.publish([status_changed_event(previous, updated, actor, self._writer.now())])
        return updated

    def _validate_customer(self, customer: CustomerInfo) -> None:
        if not customer.name or not customer.name.strip():
            raise ValidationError("Customer name is required")
        if not customer.email or "@" not in customer.email:
            raise ValidationError("A valid customer email is required")
        if not customer.phone or not customer.phone.strip():
            raise ValidationError("Customer phone number is required")
