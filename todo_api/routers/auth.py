from fastapi import APIRouter, status

from todo_api.core.config import SettingsDep
from todo_api.core.errors import AuthenticationError, NotFoundError
from todo_api.core.security import create_access_token
from todo_api.dependencies import AuthServiceDep, CurrentUser
from todo_api.schemas import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    UserRead,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Invalid data or email taken"}},
)
async def register(data: RegisterRequest, service: AuthServiceDep, settings: SettingsDep):
    """Create a user account and return it with an access token"""
    user = await service.register(data)
    token = create_access_token(settings, subject=user.id, email=user.email)
    return AuthResponse(user=user, token=token)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
async def login(data: LoginRequest, service: AuthServiceDep, settings: SettingsDep):
    """Authenticate with email and password"""
    user = await service.login(data)
    if user is None:
        # Same response for unknown email and wrong password.
        raise AuthenticationError("Invalid email or password")

    token = create_access_token(settings, subject=user.id, email=user.email)
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.get(
    "/profile",
    response_model=UserRead,
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def profile(current_user: CurrentUser, service: AuthServiceDep):
    """Get the authenticated user's profile"""
    user = await service.get_by_id(current_user.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
