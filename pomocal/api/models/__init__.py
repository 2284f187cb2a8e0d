"""API request/response models."""

from .responses import (
    ErrorCodes,
    ErrorResponse,
    FocusBlockResponse,
    HealthResponse,
    LoginResponse,
    MessageResponse,
    SessionInfo,
    UserSummary,
)

__all__ = [
    "ErrorCodes",
    "ErrorResponse",
    "FocusBlockResponse",
    "HealthResponse",
    "LoginResponse",
    "MessageResponse",
    "SessionInfo",
    "UserSummary",
]
