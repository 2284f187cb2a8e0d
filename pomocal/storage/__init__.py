"""Storage collaborator: users, tasks and focus blocks."""

from pomocal.storage.memory import DEMO_TASKS, MemoryStorage, seed_demo_data
from pomocal.storage.models import (
    FocusBlock,
    FocusBlockCreate,
    Task,
    TaskCreate,
    TaskUpdate,
    User,
    parse_input,
)

__all__ = [
    "DEMO_TASKS",
    "FocusBlock",
    "FocusBlockCreate",
    "MemoryStorage",
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "User",
    "parse_input",
    "seed_demo_data",
]
