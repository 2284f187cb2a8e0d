"""Demo login, session info and Google OAuth endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from pomocal.api.dependencies import SESSION_USER_KEY, get_context
from pomocal.api.models.responses import (
    ErrorCodes,
    LoginResponse,
    MessageResponse,
    SessionInfo,
    UserSummary,
)
from pomocal.errors import NotFoundError
from pomocal.runtime import RuntimeContext
from pomocal.utils.logger import get_logger

router = APIRouter(prefix="/api")
logger = get_logger(__name__)


def _bad_request(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": message, "code": ErrorCodes.INVALID_REQUEST, "details": []},
    )


@router.post("/login", response_model=LoginResponse)
async def login(request: Request, context: RuntimeContext = Depends(get_context)):
    """Log in as the demo user (there is no real account system)."""
    username = context.settings.demo_username
    user = await context.storage.get_user_by_username(username)
    if user is None:
        raise NotFoundError("User", username)

    request.session[SESSION_USER_KEY] = user.id
    logger.info("User logged in", user_id=user.id)
    return LoginResponse(user=UserSummary(id=user.id, username=user.username))


@router.get("/me", response_model=SessionInfo, response_model_exclude_none=True)
async def me(request: Request):
    user_id = request.session.get(SESSION_USER_KEY)
    return SessionInfo(authenticated=bool(user_id), user_id=user_id)


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, context: RuntimeContext = Depends(get_context)):
    await context.oauth.revoke()
    context.cache.invalidate()
    request.session.clear()
    return MessageResponse(message="Logged out successfully")


@router.get("/auth")
async def start_oauth(context: RuntimeContext = Depends(get_context)):
    """Redirect to the Google consent screen."""
    return RedirectResponse(context.oauth.get_auth_url())


@router.get("/oauth2callback")
async def oauth_callback(
    code: str | None = None,
    error: str | None = None,
    context: RuntimeContext = Depends(get_context),
):
    if error:
        raise _bad_request(f"OAuth error: {error}")
    if not code:
        raise _bad_request("Missing authorization code")

    await context.oauth.exchange_code(code)
    context.cache.invalidate()
    return RedirectResponse("/")
