import asyncio
import logging
import math
import uuid

from sqlalchemy.ext.asyncio import async_sessionmaker

from todo_api.models import Todo, TodoStatus, get_utc_now
from todo_api.repositories import TodoRepository
from todo_api.schemas import TodoCreate, TodoPage, TodoRead, TodoStatistics, TodoUpdate

logger = logging.getLogger(__name__)


class TodoService:
    """Todo use cases; every call is scoped to the owner passed in."""

    def __init__(self, todos: TodoRepository, session_factory: async_sessionmaker):
        self.todos = todos
        self.session_factory = session_factory

    async def create(self, data: TodoCreate, owner_id: uuid.UUID) -> Todo:
        todo = Todo.model_validate(data.model_dump(), update={"user_id": owner_id})
        todo = await self.todos.save(todo)
        logger.info("User %s created todo %s", owner_id, todo.id)
        return todo

    async def list(
        self,
        owner_id: uuid.UUID,
        *,
        status: TodoStatus | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> TodoPage:
        todos, total = await self.todos.find_page(
            owner_id, status=status, offset=(page - 1) * limit, limit=limit
        )
        return TodoPage(
            todos=[TodoRead.model_validate(t) for t in todos],
            total=total,
            page=page,
            total_pages=math.ceil(total / limit),
        )

    async def get(self, todo_id: uuid.UUID, owner_id: uuid.UUID) -> Todo | None:
        return await self.todos.find_one(todo_id, owner_id)

    # Fetch, merge, save: concurrent updates to one todo are last-writer-wins.
    async def update(
        self, todo_id: uuid.UUID, owner_id: uuid.UUID, data: TodoUpdate
    ) -> Todo | None:
        todo = await self.todos.find_one(todo_id, owner_id)
        if not todo:
            return None
        todo.sqlmodel_update(data.changes())
        todo.updated_at = get_utc_now()
        return await self.todos.save(todo)

    async def delete(self, todo_id: uuid.UUID, owner_id: uuid.UUID) -> bool:
        deleted = await self.todos.delete(todo_id, owner_id)
        if deleted:
            logger.info("User %s deleted todo %s", owner_id, todo_id)
        return deleted

    async def statistics(self, owner_id: uuid.UUID) -> TodoStatistics:
        total, pending, in_progress, completed = await asyncio.gather(
            self._count(owner_id),
            self._count(owner_id, TodoStatus.PENDING),
            self._count(owner_id, TodoStatus.IN_PROGRESS),
            self._count(owner_id, TodoStatus.COMPLETED),
        )
        return TodoStatistics(
            total=total, pending=pending, in_progress=in_progress, completed=completed
        )

    async def _count(self, owner_id: uuid.UUID, status: TodoStatus | None = None) -> int:
        # A session cannot run statements concurrently, so each count gets its own.
        async with self.session_factory() as session:
            return await TodoRepository(session).count(owner_id, status)
