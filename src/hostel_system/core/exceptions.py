class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when an operation would break an occupancy or uniqueness rule."""


class CapacityExceededError(ConflictError):
    """Room already holds as many allottees as its capacity allows."""


class AlreadyAllocatedError(ConflictError):
    """Allottee already occupies a room."""

    def __init__(self, room_number: str):
        super().__init__(f"Allotee is already allotted to room {room_number}")
        self.room_number = room_number


class NotAllocatedHereError(ConflictError):
    """Allottee is not an occupant of the room being vacated."""


class UnauthorizedError(DomainError):
    """Raised when the acting identity is not a recognized admin."""

    status_code = 403
