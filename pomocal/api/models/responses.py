"""Pydantic response models for API endpoints."""

from pydantic import BaseModel

from pomocal.storage.models import ApiModel, FocusBlock


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy"
    version: str
    calendar_configured: bool
    calendar_cache_fresh: bool
    timestamp: str  # ISO 8601 UTC


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    CALENDAR_UNAVAILABLE = "CALENDAR_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class MessageResponse(BaseModel):
    message: str


class UserSummary(BaseModel):
    id: str
    username: str


class LoginResponse(BaseModel):
    user: UserSummary


class SessionInfo(ApiModel):
    authenticated: bool
    user_id: str | None = None


class FocusBlockResponse(FocusBlock):
    """Stored focus block plus a warning when the calendar write failed."""

    warning: str | None = None
    warning_code: str | None = None
