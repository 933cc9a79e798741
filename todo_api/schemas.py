import uuid
from datetime import datetime
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

from todo_api.models import TodoStatus


def _check_email(value: str) -> str:
    # Validate only; the address is stored exactly as the client sent it.
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(str(exc)) from exc
    return value


def _check_iso_datetime(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or "T" not in value.upper():
        raise ValueError("must be an ISO-8601 datetime string")
    return value


Email = Annotated[str, AfterValidator(_check_email)]
IsoDateTime = Annotated[datetime, BeforeValidator(_check_iso_datetime)]
Priority = Annotated[int, Field(ge=0, le=10, strict=True)]


class ApiModel(BaseModel):
    """Base for request/response bodies: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# Auth


class RegisterRequest(ApiModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "user@example.com",
                "password": "password123",
                "name": "Jane Doe",
            }
        }
    )

    email: Email
    password: str = Field(min_length=6)
    name: str = Field(min_length=2)


class LoginRequest(ApiModel):
    email: Email
    password: str = Field(min_length=1)


class UserRead(ApiModel):
    """Public view of a user; never carries the password hash."""

    id: uuid.UUID
    email: str
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AuthResponse(ApiModel):
    user: UserRead
    token: str


# Todos


class TodoCreate(ApiModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "status": "pending",
                "dueDate": "2025-02-01T09:00:00Z",
                "priority": 3,
            }
        }
    )

    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    status: TodoStatus = TodoStatus.PENDING
    due_date: IsoDateTime | None = None
    priority: Priority = 0


class TodoUpdate(ApiModel):
    """All fields optional; only supplied, non-null fields are applied.

    ``description`` and ``dueDate`` may be sent as null, which leaves them
    unchanged. The other fields reject null.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    status: TodoStatus | None = None
    due_date: IsoDateTime | None = None
    priority: Priority | None = None

    @field_validator("title", "status", "priority", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class TodoRead(ApiModel):
    id: uuid.UUID
    title: str
    description: str | None = None
    status: TodoStatus
    due_date: datetime | None = None
    priority: int
    created_at: datetime
    updated_at: datetime
    user_id: uuid.UUID


class TodoPage(ApiModel):
    todos: list[TodoRead]
    total: int
    page: int
    total_pages: int


class TodoStatistics(ApiModel):
    total: int
    pending: int
    in_progress: int
    completed: int


# Misc


class MessageResponse(ApiModel):
    message: str


class ErrorResponse(ApiModel):
    error: str
    message: str
    status_code: int


class HealthResponse(ApiModel):
    status: str
    timestamp: datetime
    uptime: float
