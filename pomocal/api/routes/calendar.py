"""Calendar overview and focus block endpoints."""

from fastapi import APIRouter, Depends, Query

from pomocal.api.dependencies import get_context, require_user
from pomocal.api.models.responses import FocusBlockResponse
from pomocal.calendar import CalendarOverview
from pomocal.runtime import RuntimeContext
from pomocal.storage.models import FocusBlockCreate

router = APIRouter(prefix="/api")


@router.get("/next-events", response_model=CalendarOverview)
async def next_events(
    window: int | None = Query(default=None, ge=1, le=24 * 60),
    context: RuntimeContext = Depends(get_context),
):
    """Upcoming events, the next meeting and a smart adjust suggestion if any."""
    return await context.sync.overview(window)


@router.post("/focus-block", response_model=FocusBlockResponse)
async def create_focus_block(
    payload: FocusBlockCreate,
    user_id: str = Depends(require_user),
    context: RuntimeContext = Depends(get_context),
):
    result = await context.recorder.record(
        payload.title, payload.duration, payload.task_id, user_id=user_id
    )
    return FocusBlockResponse(
        **result.focus_block.model_dump(),
        warning=result.warning,
        warning_code=result.warning_code,
    )
