"""Error taxonomy for the booking engine.

Every error carries the HTTP status it maps to so request handlers can turn it
into a response without knowing which layer raised it. User-correctable
conditions are 400/404/409; ``BusyError`` is retryable; anything that is not a
``BookingEngineError`` is an internal failure.
"""


class BookingEngineError(Exception):
    status_code: int = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(BookingEngineError):
    status_code = 404


class StaffNotFound(NotFoundError):
    def __init__(self, staff_id: str) -> None:
        super().__init__(f"Staff member {staff_id} not found")
        self.staff_id = staff_id


class ServiceNotFound(NotFoundError):
    def __init__(self, service_id: str) -> None:
        super().__init__(f"Service {service_id} not found")
        self.service_id = service_id


class BusinessNotFound(NotFoundError):
    def __init__(self, business_id: str) -> None:
        super().__init__(f"Business {business_id} not found")
        self.business_id = business_id


class BookingNotFound(NotFoundError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class TimeOffNotFound(NotFoundError):
    def __init__(self, time_off_id: str) -> None:
        super().__init__(f"Time-off entry {time_off_id} not found")
        self.time_off_id = time_off_id


class ValidationError(BookingEngineError):
    status_code = 400


class InvalidDate(ValidationError):
    pass


class ConflictError(BookingEngineError):
    status_code = 409


class BusyError(BookingEngineError):
    """Lock acquisition timed out; the caller may retry with backoff."""

    status_code = 503
