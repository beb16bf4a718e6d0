"""
Inkpost Backend — Comment Route Handlers
==========================================

    read_router   GET /post/{post_id}    comments of a post, with author name
    write_router  POST /                 create (author = caller)
                  DELETE /{comment_id}
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.database import get_db_session
from inkpost.schemas.comment import CommentCreate, CommentResponse, CommentWithAuthor
from inkpost.schemas.common import ErrorResponse, MessageResponse
from inkpost.security import Identity, require_identity
from inkpost.services.comment_service import comment_service

read_router = APIRouter(tags=["Comments"])

write_router = APIRouter(
    tags=["Comments"],
    dependencies=[Depends(require_identity)],
    responses={401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}},
)


@read_router.get(
    "/post/{post_id}",
    response_model=List[CommentWithAuthor],
    summary="List comments of a post",
)
async def list_comments(
    post_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[CommentWithAuthor]:
    return await comment_service.list_for_post(db, post_id)


@write_router.post(
    "/",
    response_model=CommentResponse,
    summary="Comment on a post",
    responses={409: {"description": "Post does not exist", "model": ErrorResponse}},
)
async def create_comment(
    payload: CommentCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.create_comment(db, identity, payload)


@write_router.delete(
    "/{comment_id}",
    response_model=MessageResponse,
    summary="Delete a comment",
    responses={404: {"description": "Comment not found", "model": ErrorResponse}},
)
async def delete_comment(
    comment_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await comment_service.delete_comment(db, comment_id)
    return MessageResponse(message="Comment deleted")
