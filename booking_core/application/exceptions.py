class BookingError(Exception):
    """Base for expected outcomes the caller can recover from."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Raised for malformed or out-of-range input (past dates, unaligned times, empty service lists)."""
    pass


class NotFoundError(BookingError):
    """Raised when a booking, service, staff member or payment method id does not resolve."""
    pass


class ConflictError(BookingError):
    """Raised when the requested slot was taken between display and commit."""

    def __init__(self, message: str = "This slot was just taken, please choose another time.") -> None:
        super().__init__(message)


class InvalidTransitionError(BookingError):
    """Raised when a status or payment transition is not allowed from the current state."""

    def __init__(self, message: str, current_status: str, payment_status: str) -> None:
        super().__init__(message)
        self.current_status = current_status
        self.payment_status = payment_status


class ConcurrencyError(RuntimeError):
    """Raised when an optimistic write keeps losing to concurrent writers."""
    pass


class StorageError(RuntimeError):
    """Raised when stored bookings cannot be read back; the stored data is left untouched."""
    pass
