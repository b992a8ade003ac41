from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidDateRange(ServiceError):
    """Malformed date input, or a range whose end precedes its start."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class MissingReference(ServiceError):
    """A student, class or enrollment reference that does not resolve."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class UpstreamIOError(ServiceError):
    """The database could not be read or written. Safe to retry."""

    def __init__(self, message: str = "Storage is unavailable, please try again") -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)
