import logging
import uuid
from functools import lru_cache

from sqlalchemy.exc import IntegrityError
from starlette.concurrency import run_in_threadpool

from todo_api.core.errors import ConflictError
from todo_api.core.security import hash_password, verify_password
from todo_api.models import User
from todo_api.repositories import UserRepository
from todo_api.schemas import LoginRequest, RegisterRequest, UserRead

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Email is already registered"


@lru_cache
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def _verify_against_dummy(password: str) -> bool:
    return verify_password(password, _dummy_hash())


class AuthService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def register(self, data: RegisterRequest) -> UserRead:
        if await self.users.find_by_email(data.email) is not None:
            raise ConflictError(EMAIL_TAKEN)

        # bcrypt is CPU bound; keep it off the event loop.
        hashed = await run_in_threadpool(hash_password, data.password)
        user = User(email=data.email, hashed_password=hashed, name=data.name)
        try:
            user = await self.users.save(user)
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email.
            await self.users.db.rollback()
            raise ConflictError(EMAIL_TAKEN)

        logger.info("Registered user %s", user.id)
        return UserRead.model_validate(user)

    async def login(self, data: LoginRequest) -> User | None:
        """Return the user for valid credentials, otherwise None."""
        user = await self.users.find_by_email(data.email)
        if user is None:
            # Unknown emails pay for one bcrypt check too.
            await run_in_threadpool(_verify_against_dummy, data.password)
            logger.info("Login failed: unknown email")
            return None

        if not await run_in_threadpool(verify_password, data.password, user.hashed_password):
            logger.info("Login failed: bad password for user %s", user.id)
            return None

        return user

    async def get_by_id(self, user_id: uuid.UUID) -> UserRead | None:
        user = await self.users.find_by_id(user_id)
        if user is None:
            return None
        return UserRead.model_validate(user)
