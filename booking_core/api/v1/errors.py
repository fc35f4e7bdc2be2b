from fastapi import HTTPException

from booking_core.application.exceptions import (
    BookingError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)


def to_http_exception(e: BookingError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ConflictError):
        return HTTPException(status_code=409, detail={"code": "slot_taken", "message": e.message})
    if isinstance(e, InvalidTransitionError):
        return HTTPException(
            status_code=409,
            detail={
                "code": "invalid_transition",
                "message": e.message,
                "current_status": e.current_status,
                "payment_status": e.payment_status,
            },
        )
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=e.message)
    return HTTPException(status_code=400, detail=e.message)
