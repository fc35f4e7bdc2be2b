import datetime as dt
from enum import Enum

from pydantic import BaseModel, Field

from booking_core.application.use_cases.booking_queries import BookingStats
from booking_core.domain.entities.booking import Booking, BookingStatus, PaymentStatus
from booking_core.domain.entities.catalog import PaymentMethod, Service, StaffMember
from booking_core.domain.entities.time_slot import SlotState, TimeSlot


class VerifyAction(str, Enum):
    approve = "approve"
    reject = "reject"


class ServiceSchema(BaseModel):
    service_id: str
    name: str
    category: str
    price: int
    duration_minutes: int
    active: bool
    description: str | None = None

    @classmethod
    def from_entity(cls, service: Service) -> "ServiceSchema":
        return cls(
            service_id=service.service_id,
            name=service.name,
            category=service.category,
            price=service.price,
            duration_minutes=service.duration_minutes,
            active=service.active,
            description=service.description,
        )


class StaffMemberSchema(BaseModel):
    staff_id: str
    name: str
    role: str
    work_start: str
    work_end: str
    available: bool

    @classmethod
    def from_entity(cls, staff: StaffMember) -> "StaffMemberSchema":
        return cls(
            staff_id=staff.staff_id,
            name=staff.name,
            role=staff.role,
            work_start=staff.work_start,
            work_end=staff.work_end,
            available=staff.available,
        )


class PaymentMethodSchema(BaseModel):
    method_id: str
    name: str
    kind: str
    requires_proof: bool
    account_number: str | None = None
    account_name: str | None = None

    @classmethod
    def from_entity(cls, method: PaymentMethod) -> "PaymentMethodSchema":
        return cls(
            method_id=method.method_id,
            name=method.name,
            kind=method.kind,
            requires_proof=method.requires_proof,
            account_number=method.account_number,
            account_name=method.account_name,
        )


class TimeSlotSchema(BaseModel):
    time: str
    state: SlotState

    @classmethod
    def from_entity(cls, slot: TimeSlot) -> "TimeSlotSchema":
        return cls(time=slot.time, state=slot.state)


class BookedIntervalSchema(BaseModel):
    start_time: str
    end_time: str


class CustomerInfoSchema(BaseModel):
    name: str
    email: str
    phone: str
    notes: str = ""


class CreateBookingRequestSchema(BaseModel):
    staff_id: str
    date: dt.date
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    service_ids: list[str] = Field(min_length=1)
    customer: CustomerInfoSchema
    payment_method_id: str


class TransitionRequestSchema(BaseModel):
    status: str


class PaymentProofRequestSchema(BaseModel):
    proof_reference: str


class VerifyPaymentRequestSchema(BaseModel):
    action: VerifyAction


class BookedServiceSchema(BaseModel):
    service_id: str
    name: str
    price: int
    duration_minutes: int


class BookingSchema(BaseModel):
    booking_id: str
    staff_id: str
    date: dt.date
    start_time: str
    end_time: str
    services: list[BookedServiceSchema]
    total_price: int
    total_duration: int
    customer: CustomerInfoSchema
    customer_id: str | None = None
    payment_method_id: str
    payment_status: PaymentStatus
    payment_proof: str | None = None
    status: BookingStatus
    created_at: dt.datetime
    updated_at: dt.datetime | None = None
    version: int

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingSchema":
        return cls(
            booking_id=booking.booking_id,
            staff_id=booking.staff_id,
            date=booking.date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            services=[
                BookedServiceSchema(
                    service_id=s.service_id,
                    name=s.name,
                    price=s.price,
                    duration_minutes=s.duration_minutes,
                )
                for s in booking.services
            ],
            total_price=booking.total_price,
            total_duration=booking.total_duration,
            customer=CustomerInfoSchema(
                name=booking.customer.name,
                email=booking.customer.email,
                phone=booking.customer.phone,
                notes=booking.customer.notes,
            ),
            customer_id=booking.customer_id,
            payment_method_id=booking.payment_method_id,
            payment_status=booking.payment_status,
            payment_proof=booking.payment_proof,
            status=booking.status,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            version=booking.version,
        )


class ServiceStatsSchema(BaseModel):
    service_id: str
    name: str
    bookings: int
    revenue: int


class BookingStatsSchema(BaseModel):
    total_bookings: int
    today_bookings: int
    revenue: int
    awaiting_verification: int
    by_status: dict[str, int] = Field(default_factory=dict)
    top_services: list[ServiceStatsSchema] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, stats: BookingStats) -> "BookingStatsSchema":
        return cls(
            total_bookings=stats.total_bookings,
            today_bookings=stats.today_bookings,
            revenue=stats.revenue,
            awaiting_verification=stats.awaiting_verification,
            by_status=dict(stats.by_status),
            top_services=[
                ServiceStatsSchema(service_id=s.service_id, name=s.name, bookings=s.bookings, revenue=s.revenue)
                for s in stats.top_services
            ],
        )
