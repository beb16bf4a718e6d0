"""
Inkpost Backend — Authentication Gate
=======================================

What:  Issues and verifies bearer tokens, hashes passwords, and provides the
       `require_identity` dependency that guards mutating routes.
How:   HS256 JWTs (PyJWT) signed with `settings.jwt_secret_key`. The token
       subject is the user id. Password hashing is werkzeug's salted PBKDF2/
       scrypt scheme.
Who:   `require_identity` is attached to gated routes in inkpost.routes;
       `create_access_token` and the password helpers are used by UserService.

Failure messages (all 401):
    - no bearer credential       → "Access token required"
    - token past its expiry      → "Access token has expired"
    - anything else wrong        → "Invalid access token"

Verification is synchronous and side-effect free; the resulting `Identity`
is handed to the handler as a parameter.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from werkzeug.security import check_password_hash, generate_password_hash

from inkpost.config import Settings
from inkpost.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is reported through AuthenticationError
bearer_scheme = HTTPBearer(auto_error=False, description="Bearer access token")


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as decoded from a valid token."""
    user_id: uuid.UUID
    email: Optional[str] = None


# ── Passwords ─────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


# ── Tokens ────────────────────────────────────────────────────────────────

def create_access_token(
    settings: Settings,
    user_id: uuid.UUID,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token for `user_id` that expires after the configured lifetime."""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)

    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }
    if email:
        payload["email"] = email

    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(settings: Settings, token: str) -> Identity:
    """
    Verify signature and expiry, then build the Identity.

    Raises:
        AuthenticationError: expired, badly signed, malformed, or missing subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Access token has expired")
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(
            "Invalid access token",
            context={"reason": type(e).__name__},
        )

    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise AuthenticationError(
            "Invalid access token",
            context={"reason": "malformed subject"},
        )

    return Identity(user_id=user_id, email=payload.get("email"))


# ── FastAPI dependency ────────────────────────────────────────────────────

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    Authentication Gate for a single request.

    HTTPBearer returns None both when the header is absent and when it uses
    another scheme (e.g. "Basic ..."); both count as a missing credential.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")

    identity = decode_access_token(settings, credentials.credentials)
    logger.debug("Authenticated user %s", identity.user_id)
    return identity
