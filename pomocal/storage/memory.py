"""In-memory storage for users, tasks and focus blocks.

Nothing survives a restart. All operations are scoped by user; a record
owned by somebody else is reported as not found.
"""

from typing import Any

from pomocal.errors import InvalidInputError, NotFoundError
from pomocal.storage.models import (
    FocusBlock,
    FocusBlockCreate,
    Task,
    TaskCreate,
    TaskUpdate,
    User,
    parse_input,
)
from pomocal.utils.mixins import LoggerMixin

DEMO_TASKS: list[dict[str, Any]] = [
    {"title": "Meditation", "completed": True, "pomodoros_completed": 1, "pomodoros_required": 1},
    {"title": "Read an article on Design Trends", "completed": True, "pomodoros_completed": 1, "pomodoros_required": 1},
    {"title": "Practice Motion Design (After Effects)", "pomodoros_completed": 1, "pomodoros_required": 2},
    {"title": "Watch a movie", "pomodoros_required": 2},
    {"title": "Evening Workout", "pomodoros_required": 2},
    {"title": "Sketch wireframe for Mingle Landing Page", "pomodoros_required": 2},
    {"title": "Continue a design system portfolio", "pomodoros_required": 3},
]


class MemoryStorage(LoggerMixin):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._tasks: dict[str, Task] = {}
        self._focus_blocks: dict[str, FocusBlock] = {}

    # === users ===

    async def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return next(
            (user for user in self._users.values() if user.username == username),
            None,
        )

    async def create_user(self, username: str, password: str = "") -> User:
        if not username.strip():
            raise InvalidInputError("Invalid user data", ["username: must not be empty"])
        if await self.get_user_by_username(username):
            raise InvalidInputError("Invalid user data", [f"username: {username} already exists"])
        user = User(username=username, password=password)
        self._users[user.id] = user
        return user

    # === tasks ===

    async def list_tasks(self, user_id: str) -> list[Task]:
        tasks = [task for task in self._tasks.values() if task.user_id == user_id]
        return sorted(tasks, key=lambda task: task.created_at)

    async def get_task(self, task_id: str, *, user_id: str | None = None) -> Task:
        task = self._tasks.get(task_id)
        if task is None or (user_id is not None and task.user_id != user_id):
            raise NotFoundError("Task", task_id)
        return task

    async def create_task(
        self, data: TaskCreate | dict[str, Any], *, user_id: str | None = None
    ) -> Task:
        payload = parse_input(TaskCreate, data)
        task = Task(user_id=user_id, **payload.model_dump())
        self._tasks[task.id] = task
        self.logger.debug("Task created", task_id=task.id, user_id=user_id)
        return task

    async def update_task(
        self,
        task_id: str,
        data: TaskUpdate | dict[str, Any],
        *,
        user_id: str | None = None,
    ) -> Task:
        payload = parse_input(TaskUpdate, data)
        task = await self.get_task(task_id, user_id=user_id)
        changes = payload.model_dump(exclude_unset=True)
        updated = Task.model_validate({**task.model_dump(), **changes})
        self._tasks[task_id] = updated
        return updated

    async def delete_task(self, task_id: str, *, user_id: str | None = None) -> None:
        await self.get_task(task_id, user_id=user_id)
        del self._tasks[task_id]

    async def increment_pomodoros(
        self, task_id: str, *, user_id: str | None = None
    ) -> Task:
        """Count one finished pomodoro; the task completes once the requirement is met."""
        task = await self.get_task(task_id, user_id=user_id)
        completed_count = task.pomodoros_completed + 1
        updated = task.model_copy(
            update={
                "pomodoros_completed": completed_count,
                "completed": task.completed or completed_count >= task.pomodoros_required,
            }
        )
        self._tasks[task_id] = updated
        self.logger.info(
            "Pomodoro counted",
            task_id=task_id,
            completed=updated.completed,
            pomodoros=f"{completed_count}/{task.pomodoros_required}",
        )
        return updated

    # === focus blocks ===

    async def create_focus_block(
        self,
        data: FocusBlockCreate | dict[str, Any],
        *,
        user_id: str | None = None,
        event_id: str | None = None,
    ) -> FocusBlock:
        payload = parse_input(FocusBlockCreate, data)
        block = FocusBlock(user_id=user_id, event_id=event_id, **payload.model_dump())
        self._focus_blocks[block.id] = block
        return block

    async def list_focus_blocks(self, user_id: str) -> list[FocusBlock]:
        return [block for block in self._focus_blocks.values() if block.user_id == user_id]


async def seed_demo_data(storage: MemoryStorage, username: str = "demo") -> User:
    """Create the demo user and sample tasks unless they already exist."""
    existing = await storage.get_user_by_username(username)
    if existing is not None:
        return existing

    user = await storage.create_user(username, password=username)
    for task in DEMO_TASKS:
        await storage.create_task(task, user_id=user.id)

    storage.logger.info("Demo data seeded", username=username, tasks=len(DEMO_TASKS))
    return user
