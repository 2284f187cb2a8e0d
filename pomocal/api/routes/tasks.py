"""Task management endpoints."""

from fastapi import APIRouter, Depends

from pomocal.api.dependencies import get_context, require_user
from pomocal.api.models.responses import MessageResponse
from pomocal.runtime import RuntimeContext
from pomocal.storage.models import Task, TaskCreate, TaskUpdate

router = APIRouter(prefix="/api/tasks")


@router.get("", response_model=list[Task])
async def list_tasks(
    user_id: str = Depends(require_user),
    context: RuntimeContext = Depends(get_context),
):
    return await context.storage.list_tasks(user_id)


@router.post("", response_model=Task)
async def create_task(
    payload: TaskCreate,
    user_id: str = Depends(require_user),
    context: RuntimeContext = Depends(get_context),
):
    return await context.storage.create_task(payload, user_id=user_id)


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    user_id: str = Depends(require_user),
    context: RuntimeContext = Depends(get_context),
):
    return await context.storage.update_task(task_id, payload, user_id=user_id)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    user_id: str = Depends(require_user),
    context: RuntimeContext = Depends(get_context),
):
    await context.storage.delete_task(task_id, user_id=user_id)
    return MessageResponse(message="Task deleted successfully")
