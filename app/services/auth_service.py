import asyncio
import logging
from typing import Annotated, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from app.core import security
from app.core.config import Settings
from app.core.deps import get_settings
from app.core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    ValidationFailedError,
)
from app.database.user_repo import UserRepo
from app.schemas.context import UserContext
from app.schemas.user import TokenResponse, User, UserLogin, UserPublic, UserRegister

logger = logging.getLogger("auth.service")

bearer = HTTPBearer(auto_error=False)


def _claims_for(user: User) -> dict:
    return {
        "sub": str(user.id),
        "id": user.id,
        "email": user.email,
        "role": user.role.value,
        "name": user.name,
    }


class AuthService:

    @staticmethod
    async def register(data: UserRegister, repo: UserRepo, settings: Settings) -> UserPublic:
        if len(data.password.encode("utf-8")) > security.BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationFailedError("Password must be at most 72 bytes")

        password_hash = await asyncio.to_thread(
            security.hash_password, data.password, settings.bcrypt_rounds
        )
        user = await repo.create_unique(
            email=data.email, password_hash=password_hash, role=data.role, name=data.name
        )
        if user is None:
            raise DuplicateEmailError()
        logger.info("Registered %s user %s", user.role.value, user.id)
        return user.public()

    @staticmethod
    async def authenticate(data: UserLogin, repo: UserRepo, settings: Settings) -> TokenResponse:
        user = await repo.find_by_email(data.email)
        if user is None:
            logger.warning("Login failed: unknown email")
            raise InvalidCredentialsError()

        valid = await asyncio.to_thread(security.verify_password, data.password, user.passwordHash)
        if not valid:
            logger.warning("Login failed for user %s", user.id)
            raise InvalidCredentialsError()

        token = security.create_access_token(_claims_for(user), settings)
        return TokenResponse(token=token, user=user.public())

    @staticmethod
    def validate_token(token: Optional[str], settings: Settings) -> UserContext:
        if not token:
            raise MissingTokenError()
        try:
            payload = security.decode_access_token(token, settings)
            return UserContext(
                user_id=payload["id"],
                email=payload["email"],
                role=payload["role"],
                name=payload.get("name") or "",
            )
        except (jwt.PyJWTError, KeyError, ValidationError) as exc:
            raise InvalidTokenError() from exc

    @staticmethod
    def get_current_user(
        settings: Annotated[Settings, Depends(get_settings)],
        credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer)],
    ) -> UserContext:
        token = credentials.credentials if credentials else None
        return AuthService.validate_token(token, settings)
