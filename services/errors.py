class BookingError(Exception):
    """Base class for failures surfaced by the booking workflow."""

    kind = "booking_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Malformed or incomplete request: missing selection, out-of-hours time."""

    kind = "validation_error"
    status_code = 400


class ConflictError(BookingError):
    """The slot stopped being free between the availability query and the write."""

    kind = "conflict"
    status_code = 409


class NotFoundError(BookingError):
    """Unknown appointment, or one that is already cancelled or completed."""

    kind = "not_found"
    status_code = 404


class TransientStoreError(BookingError):
    """Network failure, timeout or unavailable database. Safe to retry."""

    kind = "store_unavailable"
    status_code = 503
