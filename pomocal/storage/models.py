"""Records kept by the storage collaborator and their input models."""

from datetime import UTC, datetime
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from pomocal.errors import InvalidInputError

MAX_FOCUS_BLOCK_MINUTES = 24 * 60


def new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ApiModel(BaseModel):
    """Base for models exchanged with the web client (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InputModel(ApiModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class User(ApiModel):
    id: str = Field(default_factory=new_id)
    username: str
    password: str = Field(default="", exclude=True)


class Task(ApiModel):
    id: str = Field(default_factory=new_id)
    user_id: str | None = None
    title: str
    completed: bool = False
    pomodoros_completed: int = Field(default=0, ge=0)
    pomodoros_required: int = Field(default=1, ge=1)
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def remaining_pomodoros(self) -> int:
        return max(0, self.pomodoros_required - self.pomodoros_completed)


class TaskCreate(InputModel):
    title: str = Field(min_length=1, max_length=500)
    completed: bool = False
    pomodoros_completed: int = Field(default=0, ge=0)
    pomodoros_required: int = Field(default=1, ge=1)


class TaskUpdate(InputModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    completed: bool | None = None
    pomodoros_completed: int | None = Field(default=None, ge=0)
    pomodoros_required: int | None = Field(default=None, ge=1)

    @field_validator(
        "title", "completed", "pomodoros_completed", "pomodoros_required", mode="before"
    )
    @classmethod
    def _reject_explicit_null(cls, value: Any) -> Any:
        # Omit a field to leave it unchanged
        if value is None:
            raise ValueError("must not be null")
        return value


class FocusBlock(ApiModel):
    id: str = Field(default_factory=new_id)
    user_id: str | None = None
    task_id: str | None = None
    title: str
    duration: int
    event_id: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)


class FocusBlockCreate(InputModel):
    title: str = Field(min_length=1, max_length=500)
    duration: int = Field(ge=1, le=MAX_FOCUS_BLOCK_MINUTES)
    task_id: str | None = None


InputT = TypeVar("InputT", bound=BaseModel)


def parse_input(model: type[InputT], data: Any) -> InputT:
    """Validate ``data`` or raise :class:`InvalidInputError` with readable details."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        details = [
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        ]
        raise InvalidInputError(f"Invalid {model.__name__} data", details) from e
