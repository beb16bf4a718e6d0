"""
Inkpost Backend — User Service
================================

What:  Registration and credential exchange (email + password → bearer token).
How:   Passwords are hashed with werkzeug; tokens are signed by
       inkpost.security.create_access_token.
Who:   Called by inkpost.routes.auth.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.config import Settings
from inkpost.exceptions import AuthenticationError, DatabaseError, IntegrityViolationError
from inkpost.models import User
from inkpost.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from inkpost.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:

    async def register(self, db: AsyncSession, payload: RegisterRequest) -> UserResponse:
        """
        Create a user.

        Raises:
            IntegrityViolationError: email already registered (→ 409)
        """
        user = User(
            name=payload.name.strip(),
            email=_normalize_email(payload.email),
            password_hash=hash_password(payload.password),
        )
        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            logger.info("Registration rejected: email already in use")
            raise IntegrityViolationError(
                message="A user with this email already exists",
                context={"field": "email"},
            )
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        logger.info("User %s registered", user.id)
        return UserResponse.model_validate(user)

    async def login(
        self,
        db: AsyncSession,
        settings: Settings,
        payload: LoginRequest,
    ) -> TokenResponse:
        """
        Exchange credentials for a bearer token.

        Unknown email and wrong password produce the same error.
        """
        try:
            result = await db.execute(
                select(User).where(User.email == _normalize_email(payload.email))
            )
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None or not verify_password(user.password_hash, payload.password):
            raise AuthenticationError("Invalid email or password")

        token = create_access_token(settings, user.id, email=user.email)
        return TokenResponse(token=token, user=UserResponse.model_validate(user))


user_service = UserService()
