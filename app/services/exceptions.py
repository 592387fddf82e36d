# app/services/exceptions.py
"""
Error taxonomy raised by the booking services.
main.py maps every BookingServiceError to an HTTP response using status_code;
anything else falls through to the global 500 handler.
"""


class BookingServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(BookingServiceError):
    status_code = 404


class Unauthorized(BookingServiceError):
    status_code = 401


class Forbidden(BookingServiceError):
    status_code = 403


class InvalidState(BookingServiceError):
    status_code = 400


class InvalidInput(BookingServiceError):
    status_code = 400


class CapacityExhausted(BookingServiceError):
    status_code = 400
