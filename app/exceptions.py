"""Domain exceptions shared by the services and the HTTP layer.

Each exception carries the HTTP status it is reported with. Conflicts are
reported as 400, not 409, to keep the status codes clients already rely on.
"""


class EventPlatformError(Exception):
    """Base exception for all business-rule failures."""
    status_code = 500

    def __init__(self, message: str = "An error occurred"):
        super().__init__(message)
        self.message = message


class ValidationError(EventPlatformError):
    """Raised when input is malformed or out of range."""
    status_code = 400


class InvalidRating(ValidationError):
    """Raised when a rating is not an integer between 1 and 5."""

    def __init__(self, message: str = "Rating must be between 1 and 5"):
        super().__init__(message)


class Unauthenticated(EventPlatformError):
    """Raised when no valid identity accompanies the request."""
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class Forbidden(EventPlatformError):
    """Raised on ownership or role violations."""
    status_code = 403


class NotFound(EventPlatformError):
    """Raised when the target record does not exist."""
    status_code = 404


class InvalidState(EventPlatformError):
    """Raised when an event's status forbids the operation."""
    status_code = 400


class NotEligible(EventPlatformError):
    """Raised when a user may not evaluate an event."""
    status_code = 400

    def __init__(self, message: str = "You must be registered for the event to evaluate it"):
        super().__init__(message)


class Conflict(EventPlatformError):
    """Raised when the operation collides with existing state."""
    status_code = 400


class EventFull(Conflict):
    """Raised when no seat is left."""

    def __init__(self, message: str = "Event is full"):
        super().__init__(message)


class AlreadyRegistered(Conflict):
    """Raised when an active registration already exists."""

    def __init__(self, message: str = "You are already registered for this event"):
        super().__init__(message)


class DuplicateEvaluation(Conflict):
    """Raised when the user already evaluated the event."""

    def __init__(self, message: str = "You have already evaluated this event"):
        super().__init__(message)


class DeleteBlocked(Conflict):
    """Raised when dependents prevent a delete."""

    def __init__(self, message: str = "Cannot delete: participants are registered for this event"):
        super().__init__(message)
