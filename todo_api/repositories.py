import uuid

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from todo_api.models import Todo, TodoStatus, User


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, user_id: uuid.UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.exec(select(User).where(User.email == email))
        return result.first()

    async def save(self, user: User) -> User:
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user


class TodoRepository:
    """Todo storage; every read and write is filtered by the owning user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, todo: Todo) -> Todo:
        self.db.add(todo)
        await self.db.commit()
        await self.db.refresh(todo)
        return todo

    async def find_one(self, todo_id: uuid.UUID, user_id: uuid.UUID) -> Todo | None:
        result = await self.db.exec(
            select(Todo).where(Todo.id == todo_id, Todo.user_id == user_id)
        )
        return result.first()

    async def find_page(
        self,
        user_id: uuid.UUID,
        *,
        status: TodoStatus | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Todo], int]:
        query = select(Todo).where(Todo.user_id == user_id)
        if status is not None:
            query = query.where(Todo.status == status)

        total = await self.count(user_id, status)
        query = query.order_by(Todo.created_at.desc()).offset(offset).limit(limit)
        result = await self.db.exec(query)
        return list(result.all()), total

    async def count(self, user_id: uuid.UUID, status: TodoStatus | None = None) -> int:
        query = select(func.count()).select_from(Todo).where(Todo.user_id == user_id)
        if status is not None:
            query = query.where(Todo.status == status)
        result = await self.db.exec(query)
        return result.one()

    async def delete(self, todo_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        # Single statement: ownership check and removal cannot interleave.
        result = await self.db.exec(
            delete(Todo).where(Todo.id == todo_id, Todo.user_id == user_id)
        )
        await self.db.commit()
        return result.rowcount > 0
