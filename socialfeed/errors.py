"""Error taxonomy shared by services and routers.

Every error is an :class:`HTTPException` so services can raise it directly and
FastAPI maps it onto a status code. The handler registered in ``main`` renders
the body as ``{"success": false, "message": ..., "error": ...}``.
"""
from __future__ import annotations

from fastapi import HTTPException, status


class SocialError(HTTPException):
    """Base class for failures surfaced to API clients."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    kind: str = "error"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.detail)

    @property
    def retryable(self) -> bool:
        return False


class InvalidInput(SocialError):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "invalid_input"
    default_message = "Missing fields"


class MediaMissing(InvalidInput):
    default_message = "No file uploaded"


class EmptyComment(InvalidInput):
    default_message = "Comment cannot be empty"


class EmptyMessage(InvalidInput):
    default_message = "Message cannot be empty"


class NotAuthenticated(SocialError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "not_authenticated"
    default_message = "Not logged in"


class InvalidCredentials(NotAuthenticated):
    default_message = "Invalid username or password"


class Forbidden(SocialError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"
    default_message = "Not allowed"


class NotFound(SocialError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"
    default_message = "Not found"


class Conflict(SocialError):
    status_code = status.HTTP_409_CONFLICT
    kind = "conflict"
    default_message = "Conflict"


class UsernameTaken(Conflict):
    default_message = "Username already taken"


class UpstreamFailure(SocialError):
    status_code = status.HTTP_502_BAD_GATEWAY
    kind = "upstream_failure"
    default_message = "Upstream service unavailable"

    @property
    def retryable(self) -> bool:
        return True


__all__ = [
    "SocialError",
    "InvalidInput",
    "MediaMissing",
    "EmptyComment",
    "EmptyMessage",
    "NotAuthenticated",
    "InvalidCredentials",
    "Forbidden",
    "NotFound",
    "Conflict",
    "UsernameTaken",
    "UpstreamFailure",
]
