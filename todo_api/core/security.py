import uuid
from datetime import datetime, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from todo_api.core.config import Settings
from todo_api.core.errors import AuthenticationError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class TokenClaims(BaseModel):
    """Decoded JWT payload."""

    sub: uuid.UUID
    email: str
    iat: int
    exp: int

    @property
    def user_id(self) -> uuid.UUID:
        return self.sub


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored digest; unusable digests never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(settings: Settings, *, subject: uuid.UUID | str, email: str) -> str:
    """Create a signed JWT identifying the given user."""
    issued_at = int(datetime.now(timezone.utc).timestamp())
    payload: Dict[str, Any] = {
        "sub": str(subject),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + settings.jwt_expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(settings: Settings, token: str) -> TokenClaims:
    """Decode and validate a JWT, returning a typed payload."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
        return TokenClaims(**payload)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except (jwt.InvalidTokenError, PydanticValidationError):
        raise AuthenticationError("Invalid token")
