class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is a stable identifier for callers; ``retryable`` tells whether the
    same action can succeed after the caller obtains fresh input (a new token).
    """

    code = "domain_error"
    retryable = False


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class UserNotFoundError(DomainError):
    """Raised when the identity lookup does not know the user."""

    code = "user_not_found"


class AlreadyMarkedError(DomainError):
    """Raised when a token is requested for a day that is already closed."""

    code = "already_marked"


class InvalidTokenError(DomainError):
    """Raised when a token matches no unused token."""

    code = "invalid_token"


class TokenExpiredError(DomainError):
    """Raised when a token exists but its time-to-live has lapsed."""

    code = "token_expired"
    retryable = True


class AttendanceCompleteError(DomainError):
    """Raised when a valid token is scanned for a day that is already closed."""

    code = "attendance_complete"


class ConflictError(DomainError):
    """Raised when a concurrent write won the race (duplicate row, lost lock)."""

    code = "conflict"
