from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from booking_core.application.exceptions import NotFoundError
from booking_core.application.ports.booking_repository import BookingRepositoryPort
from booking_core.application.ports.clock import ClockPort
from booking_core.domain.entities.booking import Booking, BookingStatus, PaymentStatus


@dataclass(frozen=True)
class ServiceStats:
    service_id: str
    name: str
    bookings: int
    revenue: int


@dataclass(frozen=True)
class BookingStats:
    total_bookings: int
    today_bookings: int
    revenue: int
    awaiting_verification: int
    by_status: dict[str, int] = field(default_factory=dict)
    top_services: list[ServiceStats] = field(default_factory=list)


class BookingQueriesUseCase:
    def __init__(self, repository: BookingRepositoryPort, clock: ClockPort) -> None:
        self._repository = repository
        self._clock = clock

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._repository.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def list_bookings(
        self,
        status: BookingStatus | None = None,
        payment_status: PaymentStatus | None = None,
        day: date | None = None,
        staff_id: str | None = None,
        customer_id: str | None = None,
        search: str | None = None,
    ) -> list[Booking]:
        """Bookings matching every given filter, newest first."""
        needle = (search or "").strip().lower()
        results: list[Booking] = []
        for booking in self._repository.list_all():
            if status is not None and booking.status != status:
                continue
            if payment_status is not None and booking.payment_status != payment_status:
                continue
            if day is not None and booking.date != day:
                continue
            if staff_id is not None and booking.staff_id != staff_id:
                continue
            if customer_id is not None and booking.customer_id != customer_id:
                continue
            if needle and not _matches(booking, needle):
                continue
            results.append(booking)
        results.sort(key=lambda b: b.created_at, reverse=True)
        return results

    def customer_bookings(self, customer_id: str) -> list[Booking]:
        return self.list_bookings(customer_id=customer_id)

    def stats(self, today: date | None = None) -> BookingStats:
        today = today or self._clock.now().date()
        bookings = self._repository.list_all()

        by_status = {s.value: 0 for s in BookingStatus}
        per_service: dict[str, ServiceStats] = {}
        revenue = 0
        for booking in bookings:
            by_status[booking.status.value] += 1
            if booking.status == BookingStatus.cancelled:
                continue
            revenue += booking.total_price
            for item in booking.services:
                current = per_service.get(item.service_id)
                per_service[item.service_id] = ServiceStats(
                    service_id=item.service_id,
                    name=item.name,
                    bookings=(current.bookings if current else 0) + 1,
                    revenue=(current.revenue if current else 0) + item.price,
                )

        return BookingStats(
            total_bookings=len(bookings),
            today_bookings=sum(1 for b in bookings if b.date == today),
            revenue=revenue,
            awaiting_verification=sum(
                1 for b in bookings if b.payment_status == PaymentStatus.waiting_verification
            ),
            by_status=by_status,
            top_services=sorted(per_service.values(), key=lambda s: (-s.revenue, s.name)),
        )


def _matches(booking: Booking, needle: str) -> bool:
    haystack = (
        booking.booking_id,
        booking.customer.name,
        booking.customer.email,
        booking.customer.phone,
    )
    return any(needle in value.lower() for value in haystack if value)
