"""Registration and login. Both are public; login is where bearer tokens come from."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.config import Settings
from inkpost.database import get_db_session
from inkpost.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from inkpost.schemas.common import ErrorResponse
from inkpost.security import get_settings
from inkpost.services.user_service import user_service

router = APIRouter(tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=UserResponse,
    summary="Register a user",
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.register(db, payload)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Exchange email and password for a bearer token",
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    return await user_service.login(db, settings, payload)
