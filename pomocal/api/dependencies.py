"""FastAPI dependencies for session authentication and shared services."""

from fastapi import HTTPException, Request, status

from pomocal.api.models.responses import ErrorCodes
from pomocal.runtime import RuntimeContext

SESSION_USER_KEY = "user_id"


def get_context(request: Request) -> RuntimeContext:
    return request.app.state.context


async def require_user(request: Request) -> str:
    """
    Return the logged-in user id from the session cookie.

    Raises:
        HTTPException: 401 if nobody is logged in
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Authentication required",
                "code": ErrorCodes.UNAUTHORIZED,
                "details": [],
            },
        )
    return user_id
