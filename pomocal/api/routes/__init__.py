"""API route modules."""

from .auth import router as auth_router
from .calendar import router as calendar_router
from .health import router as health_router
from .tasks import router as tasks_router

__all__ = ["auth_router", "calendar_router", "health_router", "tasks_router"]
