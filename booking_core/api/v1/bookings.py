from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from booking_core.api.v1.actors import get_actor, get_staff_actor
from booking_core.api.v1.errors import to_http_exception
from booking_core.api.v1.schemas import (
    BookedIntervalSchema,
    BookingSchema,
    BookingStatsSchema,
    CreateBookingRequestSchema,
    PaymentProofRequestSchema,
    TimeSlotSchema,
    TransitionRequestSchema,
    VerifyAction,
    VerifyPaymentRequestSchema,
)
from booking_core.application.exceptions import BookingError
from booking_core.application.use_cases.booking_ledger import BookingLedger
from booking_core.application.use_cases.booking_queries import BookingQueriesUseCase
from booking_core.application.use_cases.compute_slots import ComputeSlotsUseCase
from booking_core.application.use_cases.payment_verification import PaymentVerificationUseCase
from booking_core.domain.entities.actor import Actor
from booking_core.domain.entities.booking import BookingStatus, CustomerInfo, PaymentStatus
from booking_core.wiring.dependencies import (
    get_booking_ledger,
    get_booking_queries_use_case,
    get_compute_slots_use_case,
    get_payment_verification_use_case,
)

router = APIRouter()


@router.get("/staff/{staff_id}/slots", response_model=list[TimeSlotSchema])
def get_slots(
    staff_id: str,
    date: date,
    duration: int | None = None,
    service_ids: list[str] | None = Query(None),
    uc: ComputeSlotsUseCase = Depends(get_compute_slots_use_case),
):
    if duration is None and not service_ids:
        raise HTTPException(status_code=400, detail="Pass either duration or service_ids")
    try:
        if service_ids:
            slots = uc.execute_for_services(staff_id, date, service_ids)
        else:
            slots = uc.execute(staff_id, date, duration)
    except BookingError as e:
        raise to_http_exception(e)
    return [TimeSlotSchema.from_entity(s) for s in slots]


@router.get("/staff/{staff_id}/booked-slots", response_model=list[BookedIntervalSchema])
def get_booked_slots(
    staff_id: str,
    date: date,
    uc: ComputeSlotsUseCase = Depends(get_compute_slots_use_case),
):
    try:
        intervals = uc.booked_intervals(staff_id, date)
    except BookingError as e:
        raise to_http_exception(e)
    return [BookedIntervalSchema(start_time=start, end_time=end) for start, end in intervals]


@router.post("/bookings", response_model=BookingSchema, status_code=201)
def create_booking(
    req: CreateBookingRequestSchema,
    actor: Actor = Depends(get_actor),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    try:
        booking = ledger.create_booking(
            staff_id=req.staff_id,
            day=req.date,
            start_time=req.start_time,
            service_ids=req.service_ids,
            customer=CustomerInfo(
                name=req.customer.name,
                email=req.customer.email,
                phone=req.customer.phone,
                notes=req.customer.notes,
            ),
            payment_method_id=req.payment_method_id,
            actor=actor,
        )
    except BookingError as e:
        raise to_http_exception(e)
    return BookingSchema.from_entity(booking)


@router.get("/bookings", response_model=list[BookingSchema])
def list_bookings(
    status: BookingStatus | None = None,
    payment_status: PaymentStatus | None = None,
    date: date | None = None,
    staff_id: str | None = None,
    search: str | None = None,
    actor: Actor = Depends(get_staff_actor),
    uc: BookingQueriesUseCase = Depends(get_booking_queries_use_case),
):
    bookings = uc.list_bookings(
        status=status,
        payment_status=payment_status,
        day=date,
        staff_id=staff_id,
        search=search,
    )
    return [BookingSchema.from_entity(b) for b in bookings]


@router.get("/bookings/stats", response_model=BookingStatsSchema)
def booking_stats(
    actor: Actor = Depends(get_staff_actor),
    uc: BookingQueriesUseCase = Depends(get_booking_queries_use_case),
):
    return BookingStatsSchema.from_entity(uc.stats())


@router.get("/bookings/mine", response_model=list[BookingSchema])
def my_bookings(
    actor: Actor = Depends(get_actor),
    uc: BookingQueriesUseCase = Depends(get_booking_queries_use_case),
):
    return [BookingSchema.from_entity(b) for b in uc.customer_bookings(actor.actor_id)]


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    uc: BookingQueriesUseCase = Depends(get_booking_queries_use_case),
):
    try:
        booking = uc.get_booking(booking_id)
    except BookingError as e:
        raise to_http_exception(e)
    if not actor.is_staff and booking.customer_id != actor.actor_id:
        raise HTTPException(status_code=404, detail=f"Booking {booking_id} not found")
    return BookingSchema.from_entity(booking)


@router.post("/bookings/{booking_id}/transitions", response_model=BookingSchema)
def transition_booking(
    booking_id: str,
    req: TransitionRequestSchema,
    actor: Actor = Depends(get_actor),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    try:
        booking = ledger.transition(booking_id, req.status, actor)
    except BookingError as e:
        raise to_http_exception(e)
    return BookingSchema.from_entity(booking)


@router.post("/bookings/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    try:
        booking = ledger.cancel_booking(booking_id, actor)
    except BookingError as e:
        raise to_http_exception(e)
    return BookingSchema.from_entity(booking)


@router.post("/bookings/{booking_id}/payment-proof", response_model=BookingSchema)
def submit_payment_proof(
    booking_id: str,
    req: PaymentProofRequestSchema,
    actor: Actor = Depends(get_actor),
    uc: PaymentVerificationUseCase = Depends(get_payment_verification_use_case),
):
    try:
        booking = uc.submit_proof(booking_id, req.proof_reference, actor)
    except BookingError as e:
        raise to_http_exception(e)
    return BookingSchema.from_entity(booking)


@router.put("/bookings/{booking_id}/verify-payment", response_model=BookingSchema)
def verify_payment(
    booking_id: str,
    req: VerifyPaymentRequestSchema,
    actor: Actor = Depends(get_staff_actor),
    uc: PaymentVerificationUseCase = Depends(get_payment_verification_use_case),
):
    try:
        booking = uc.verify_payment(booking_id, req.action == VerifyAction.approve, actor)
    except BookingError as e:
        raise to_http_exception(e)
    return BookingSchema.from_entity(booking)
