"""Domain errors raised by the service layer.

Each error carries the HTTP status and machine-readable code the API layer
renders; see ``keystay.main`` for the handler.
"""


class KeyStayError(Exception):
    """Base error for business-rule violations."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(KeyStayError):
    """Referenced booking, room, code, or property does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"{resource} not found")


class ForbiddenError(KeyStayError):
    """Caller does not own the resource."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Not authorized to access this property"):
        super().__init__(message)


class ConflictError(KeyStayError):
    status_code = 409
    code = "CONFLICT"


class RoomNotAvailableError(ConflictError):
    code = "ROOM_NOT_AVAILABLE"

    def __init__(self, message: str = "Room is not available for selected dates"):
        super().__init__(message)


class InvalidTransitionError(ConflictError):
    """Booking status change not allowed from the current status."""

    code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change booking status from '{current}' to '{target}'")


class GenerationExhaustedError(KeyStayError):
    """Every attempt to draw an unused access code collided."""

    status_code = 503
    code = "GENERATION_EXHAUSTED"

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Failed to generate a unique access code after {attempts} attempts")


class ValidationError(KeyStayError):
    """Malformed input rejected before touching the store."""

    status_code = 422
    code = "VALIDATION_ERROR"


class CodeInvalidError(KeyStayError):
    """An access code was presented at the door and refused."""

    status_code = 400
    code = "CODE_INVALID"
