"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from pomocal import __version__
from pomocal.api.models.responses import ErrorCodes, ErrorResponse
from pomocal.api.routes import (
    auth_router,
    calendar_router,
    health_router,
    tasks_router,
)
from pomocal.config import Settings, get_settings
from pomocal.errors import (
    CalendarUnavailableError,
    ConfigurationError,
    InvalidInputError,
    NotFoundError,
)
from pomocal.runtime import (
    RuntimeContext,
    build_runtime_context,
    shutdown_runtime,
    start_runtime,
)
from pomocal.utils.logger import get_logger

logger = get_logger(__name__)


def _error(status_code: int, error: str, code: str, details: list[str] | None = None):
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code, details=details or []).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        details = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        return _error(400, "Invalid request", ErrorCodes.INVALID_REQUEST, details)

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        return _error(400, str(exc), ErrorCodes.INVALID_REQUEST, exc.details)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(404, f"{exc.resource} not found", ErrorCodes.NOT_FOUND)

    @app.exception_handler(ConfigurationError)
    async def configuration_handler(request: Request, exc: ConfigurationError):
        logger.warning("Configuration error", path=request.url.path, error=str(exc))
        return _error(500, str(exc), ErrorCodes.CONFIGURATION_ERROR)

    @app.exception_handler(CalendarUnavailableError)
    async def calendar_unavailable_handler(
        request: Request, exc: CalendarUnavailableError
    ):
        logger.warning("Calendar unavailable", path=request.url.path, error=str(exc))
        return _error(503, "Calendar service unavailable", ErrorCodes.CALENDAR_UNAVAILABLE)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Routes raise HTTPException with an ErrorResponse-shaped detail
        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = ErrorResponse(
                error=str(exc.detail),
                code=_code_for_status(exc.status_code),
            ).model_dump()
        return JSONResponse(
            status_code=exc.status_code, content=content, headers=exc.headers
        )

    # Global exception handler for unexpected errors
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled API error", path=request.url.path, error=str(exc), exc_info=True
        )
        return _error(500, "Internal server error", ErrorCodes.INTERNAL_ERROR)


def _code_for_status(status_code: int) -> str:
    if status_code == 401:
        return ErrorCodes.UNAUTHORIZED
    if status_code == 404:
        return ErrorCodes.NOT_FOUND
    if status_code < 500:
        return ErrorCodes.INVALID_REQUEST
    return ErrorCodes.INTERNAL_ERROR


def create_app(
    context: RuntimeContext | None = None, settings: Settings | None = None
) -> FastAPI:
    """Build the HTTP application around a runtime context."""
    settings = settings or (context.settings if context else get_settings())
    context = context or build_runtime_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        await start_runtime(context, logger)
        yield
        await shutdown_runtime(context, logger)

    app = FastAPI(
        title="Pomocal API",
        description="Calendar-aware Pomodoro timer backend",
        version=__version__,
        debug=settings.api_debug,
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret.get_secret_value(),
        max_age=settings.session_max_age_seconds,
        https_only=settings.is_production,
    )

    # CORS middleware (for development)
    if settings.api_debug:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(calendar_router)
    app.include_router(tasks_router)

    return app
