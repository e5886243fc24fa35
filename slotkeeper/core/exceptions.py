"""Custom application exceptions."""

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, detail: str = "Validation failed") -> None:
        super().__init__(status_code=422, detail=detail)


class InvertedWindowError(ValidationError):
    """Booking window does not end after it starts."""

    def __init__(self, detail: str = "Start time must be before end time") -> None:
        super().__init__(detail)


class NotInFutureError(ValidationError):
    """Booking window does not start in the future."""

    def __init__(self, detail: str = "Booking must be in the future") -> None:
        super().__init__(detail)


class BookingTooShortError(ValidationError):
    """Booking window is shorter than the configured minimum."""

    def __init__(self, minutes: int) -> None:
        self.minutes = minutes
        super().__init__(f"Booking duration must be at least {minutes} minutes")


class BookingTooLongError(ValidationError):
    """Booking window is longer than the configured maximum."""

    def __init__(self, limit: str) -> None:
        self.limit = limit
        super().__init__(f"Booking duration cannot exceed {limit}")


class NotFoundError(AppException):
    """Resource not found exception."""

    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    error_code = "UNAUTHORIZED"

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    error_code = "FORBIDDEN"

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class BookingConflictError(AppException):
    """Requested window overlaps an active booking on the same resource."""

    error_code = "CONFLICT"

    def __init__(self, resource_id: str | None = None, detail: str | None = None) -> None:
        if detail is None:
            detail = "The selected time slot is not available"
            if resource_id:
                detail = f"Resource '{resource_id}' is already booked for the selected time slot"
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidBookingStatus(AppException):
    """Invalid booking status for operation."""

    error_code = "INVALID_BOOKING_STATUS"

    def __init__(
        self,
        detail: str = "This operation is not allowed for the current booking status",
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)


class BookingAlreadyCanceledError(InvalidBookingStatus):
    """Booking has already reached the canceled state."""

    error_code = "ALREADY_CANCELED"

    def __init__(self, detail: str = "Booking is already canceled") -> None:
        super().__init__(detail, status_code=status.HTTP_409_CONFLICT)


class BookingAlreadyStartedError(InvalidBookingStatus):
    """Booking start time has been reached."""

    error_code = "ALREADY_STARTED"

    def __init__(self, detail: str = "Cannot cancel a booking that has already started") -> None:
        super().__init__(detail)


class StorageError(AppException):
    """Unexpected failure in the booking store."""

    error_code = "STORAGE_ERROR"

    def __init__(self, operation: str, detail: str | None = None) -> None:
        self.operation = operation
        message = f"Booking storage is unavailable ({operation})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=message)
