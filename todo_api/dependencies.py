from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession
from typing_extensions import Annotated

from todo_api.core.config import SettingsDep
from todo_api.core.errors import AuthenticationError
from todo_api.core.security import TokenClaims, decode_token
from todo_api.database import Database, get_database, get_db
from todo_api.repositories import TodoRepository, UserRepository
from todo_api.services.auth_service import AuthService
from todo_api.services.todo_service import TodoService

bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued by /api/auth/login")


async def get_current_user(
    settings: SettingsDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims:
    """Verify the bearer token and return the caller's identity."""
    if credentials is None:
        raise AuthenticationError("Invalid or missing token")
    return decode_token(settings, credentials.credentials)


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(UserRepository(db))


def get_todo_service(
    db: AsyncSession = Depends(get_db),
    database: Database = Depends(get_database),
) -> TodoService:
    return TodoService(TodoRepository(db), database.session_factory)


CurrentUser = Annotated[TokenClaims, Depends(get_current_user)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
TodoServiceDep = Annotated[TodoService, Depends(get_todo_service)]
