"""Error taxonomy shared by services and the HTTP layer."""

from fastapi import status


class PhotoShareError(Exception):
    """Base error. Each subclass maps to exactly one HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgument(PhotoShareError):
    """Malformed id or missing required field."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid argument"


class Unauthorized(PhotoShareError):
    """No active session where one is required."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(PhotoShareError):
    """Session present but the actor lacks rights over the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(PhotoShareError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(PhotoShareError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class Internal(PhotoShareError):
    """Storage or file-system failure."""
