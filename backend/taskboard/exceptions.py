"""Domain exceptions.

Services raise these; the handlers registered in ``taskboard.main`` turn them
into ``{"message": ...}`` responses with the matching status code.
"""


class TaskboardError(Exception):
    """Base exception for domain errors."""

    status_code: int = 500

    def __init__(self, message: str, code: str = "TASKBOARD_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(TaskboardError):
    """Malformed or missing input. Raised before any persistence access."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class AuthenticationError(TaskboardError):
    """Missing, invalid or expired credentials."""

    status_code = 401

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="AUTHENTICATION_ERROR")


class ForbiddenError(TaskboardError):
    """The actor can see the resource but may not perform this action on it.

    Only comment deletion by a non-author uses this; every other failed
    access check is reported as not found.
    """

    status_code = 403

    def __init__(self, message: str):
        super().__init__(message, code="FORBIDDEN")


class NotFoundError(TaskboardError):
    """Entity is absent, or exists but is not visible to the requester."""

    status_code = 404

    def __init__(self, message: str):
        super().__init__(message, code="NOT_FOUND")
