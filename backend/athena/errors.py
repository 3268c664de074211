"""Error taxonomy for the chat backend.

Every error carries the HTTP status it maps to. The FastAPI exception handlers
in ``athena.main`` turn them into ``{"error": message}`` responses.
"""


class AthenaError(Exception):
    """Base exception for all handled errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthError(AthenaError):
    """Caller is not authenticated."""

    status_code = 401


class ValidationError(AthenaError):
    """Required fields are missing or invalid."""

    status_code = 400


class NotFoundError(AthenaError):
    """Chat is absent or not owned by the caller."""

    status_code = 404


class ConflictError(AthenaError):
    """Chat was written by another request since it was loaded."""

    status_code = 409


class ExternalServiceError(AthenaError):
    """The generative model call failed.

    Absorbed by the model invoker and never surfaced as a failed response.
    """

    status_code = 502


class InternalError(AthenaError):
    """Storage or unexpected failure."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
