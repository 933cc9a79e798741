import uuid

from fastapi import APIRouter, Query, status

from todo_api.core.errors import NotFoundError
from todo_api.dependencies import CurrentUser, TodoServiceDep
from todo_api.models import TodoStatus
from todo_api.schemas import (
    ErrorResponse,
    MessageResponse,
    TodoCreate,
    TodoPage,
    TodoRead,
    TodoStatistics,
    TodoUpdate,
)

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Todo not found"}}


def _todo_not_found() -> NotFoundError:
    return NotFoundError("Todo not found")


@router.post("", response_model=TodoRead, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=TodoRead, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_todo(data: TodoCreate, current_user: CurrentUser, service: TodoServiceDep):
    """Create a new todo"""
    return await service.create(data, current_user.user_id)


@router.get("", response_model=TodoPage)
@router.get("/", response_model=TodoPage, include_in_schema=False)
async def list_todos(
    current_user: CurrentUser,
    service: TodoServiceDep,
    status: TodoStatus | None = Query(default=None, description="Filter by status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
):
    """List the caller's todos, newest first"""
    return await service.list(current_user.user_id, status=status, page=page, limit=limit)


@router.get("/statistics", response_model=TodoStatistics)
async def todo_statistics(current_user: CurrentUser, service: TodoServiceDep):
    """Count the caller's todos per status"""
    return await service.statistics(current_user.user_id)


@router.get("/{todo_id}", response_model=TodoRead, responses=_NOT_FOUND)
async def get_todo(todo_id: uuid.UUID, current_user: CurrentUser, service: TodoServiceDep):
    """Get a specific todo by ID"""
    todo = await service.get(todo_id, current_user.user_id)
    if not todo:
        raise _todo_not_found()
    return todo


@router.put("/{todo_id}", response_model=TodoRead, responses=_NOT_FOUND)
async def update_todo(
    todo_id: uuid.UUID,
    data: TodoUpdate,
    current_user: CurrentUser,
    service: TodoServiceDep,
):
    todo = await service.update(todo_id, current_user.user_id, data)
    if not todo:
        raise _todo_not_found()
    return todo


@router.delete("/{todo_id}", response_model=MessageResponse, responses=_NOT_FOUND)
async def delete_todo(todo_id: uuid.UUID, current_user: CurrentUser, service: TodoServiceDep):
    """Delete a todo"""
    if not await service.delete(todo_id, current_user.user_id):
        raise _todo_not_found()
    return MessageResponse(message="Todo deleted successfully")
