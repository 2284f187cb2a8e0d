"""Focus block recording."""

from pomocal.focus.recorder import (
    CALENDAR_NOT_CONFIGURED,
    CALENDAR_WRITE_FAILED,
    DEFAULT_FOCUS_TITLE,
    FocusBlockRecorder,
    FocusBlockResult,
)

__all__ = [
    "CALENDAR_NOT_CONFIGURED",
    "CALENDAR_WRITE_FAILED",
    "DEFAULT_FOCUS_TITLE",
    "FocusBlockRecorder",
    "FocusBlockResult",
]
