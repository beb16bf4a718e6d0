"""
Inkpost Backend — Post Route Handlers
=======================================

What:  HTTP handlers for the Post resource.
How:   Two routers so the composition layer can mount reads and writes
       separately:

           read_router   GET /            published posts with author
                         GET /{post_id}   one post with author + comments
           write_router  POST /           create (author = caller)
                         PUT /{post_id}   partial update
                         DELETE /{post_id}

       write_router carries the Authentication Gate as a router dependency,
       so every mount point of a write operation is gated.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.database import get_db_session
from inkpost.schemas.common import ErrorResponse, MessageResponse
from inkpost.schemas.post import (
    PostCreate,
    PostDetail,
    PostResponse,
    PostUpdate,
    PostWithAuthor,
)
from inkpost.security import Identity, require_identity
from inkpost.services.post_service import post_service

read_router = APIRouter(tags=["Posts"])

write_router = APIRouter(
    tags=["Posts"],
    dependencies=[Depends(require_identity)],
    responses={401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}},
)


@read_router.get(
    "/",
    response_model=List[PostWithAuthor],
    summary="List published posts",
    responses={500: {"description": "Server error", "model": ErrorResponse}},
)
async def list_posts(db: AsyncSession = Depends(get_db_session)) -> List[PostWithAuthor]:
    return await post_service.list_published(db)


@read_router.get(
    "/{post_id}",
    response_model=PostDetail,
    summary="Get a post with its author and comments",
    description="Unpublished posts are returned as well; there is no visibility check by id.",
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
)
async def get_post(post_id: UUID, db: AsyncSession = Depends(get_db_session)) -> PostDetail:
    return await post_service.get_post(db, post_id)


@write_router.post(
    "/",
    response_model=PostResponse,
    summary="Create a post",
    responses={409: {"description": "Author no longer exists", "model": ErrorResponse}},
)
async def create_post(
    payload: PostCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.create_post(db, identity, payload)


@write_router.put(
    "/{post_id}",
    response_model=PostResponse,
    summary="Update a post",
    description="Only the fields present in the body are changed.",
    responses={
        400: {"description": "Empty update", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
    },
)
async def update_post(
    post_id: UUID,
    payload: PostUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PostResponse:
    return await post_service.update_post(db, post_id, payload)


@write_router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete a post and its comments",
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
)
async def delete_post(post_id: UUID, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await post_service.delete_post(db, post_id)
    return MessageResponse(message="Post deleted")
