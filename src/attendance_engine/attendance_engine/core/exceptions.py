class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateError(ValidationError):
    """Raised when a date is malformed or outside the allowed range."""


class InconsistentScheduleError(DomainError):
    """Raised when a subject is referenced that the weekly schedule does not contain."""


class UploadFailure(DomainError):
    """Transient failure while persisting staged attendance.

    The staged entries stay in the cache and are retried on the next flush.
    """

    def __init__(self, message: str, *, pending_count: int = 0):
        super().__init__(message)
        self.pending_count = pending_count


class ComputationSkipped(DomainError):
    """Nothing to calculate for the requested date/subject. Not a failure."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
