class DomainError(Exception):
    """Base exception for business rule violations."""

    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    http_status = 403


class AttendanceConflictError(DomainError):
    """A transition that would break the one-session-per-day invariant."""

    http_status = 409


class AlreadyCheckedInError(AttendanceConflictError):
    pass


class AlreadyCheckedOutError(AttendanceConflictError):
    pass


class NonWorkingDayError(AttendanceConflictError):
    """Check-in on a holiday, a Sunday or an approved leave day."""


class NoActiveSessionError(DomainError):
    http_status = 404


class GatewayError(Exception):
    """Base error for calls from the client library to the attendance gateway."""

    retryable = False


class GatewayRejectedError(GatewayError):
    """The gateway answered and refused the request."""

    def __init__(self, message: str, *, status_code: int):
        super().__init__(message)
        self.status_code = int(status_code)


class GatewayUnavailableError(GatewayError):
    """Network failure, timeout or server error. Safe to retry."""

    retryable = True
