"""
Inkpost Backend — Comment Service (Data Access Layer)
=======================================================

What:  List-by-post, create and delete for comments.
How:   Same translation rules as PostService. Existence of the parent post is
       checked by the foreign key only; a dangling postId becomes an
       IntegrityViolationError when the insert is flushed.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from inkpost.exceptions import DatabaseError, IntegrityViolationError, NotFoundError
from inkpost.models import Comment
from inkpost.schemas.comment import CommentCreate, CommentResponse, CommentWithAuthor
from inkpost.security import Identity

logger = logging.getLogger(__name__)


class CommentService:

    async def list_for_post(self, db: AsyncSession, post_id: UUID) -> List[CommentWithAuthor]:
        """Comments whose parent is `post_id`, with author name. Unknown post → []."""
        try:
            result = await db.execute(
                select(Comment)
                .where(Comment.post_id == post_id)
                .options(joinedload(Comment.author))
            )
            comments = result.scalars().all()
            return [CommentWithAuthor.model_validate(comment) for comment in comments]

        except SQLAlchemyError as e:
            logger.error("Database error listing comments for %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve comments. Please try again.",
                context={"post_id": str(post_id)},
            )

    async def create_comment(
        self,
        db: AsyncSession,
        identity: Identity,
        payload: CommentCreate,
    ) -> CommentResponse:
        """
        Insert a comment authored by `identity` under `payload.post_id`.

        Raises:
            IntegrityViolationError: post (or author) does not exist (→ 409)
        """
        comment = Comment(
            content=payload.content,
            post_id=payload.post_id,
            author_id=identity.user_id,
        )
        try:
            db.add(comment)
            await db.flush()
        except IntegrityError as e:
            logger.warning(
                "Rejected comment on post %s by %s: %s",
                payload.post_id,
                identity.user_id,
                str(e.orig),
            )
            raise IntegrityViolationError(
                message=f"Post with ID '{payload.post_id}' does not exist",
                context={"post_id": str(payload.post_id), "author_id": str(identity.user_id)},
            )
        except SQLAlchemyError as e:
            logger.error("Database error creating comment: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the comment. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Comment %s created on post %s", comment.id, comment.post_id)
        return CommentResponse.model_validate(comment)

    async def delete_comment(self, db: AsyncSession, comment_id: UUID) -> None:
        try:
            comment = await db.get(Comment, comment_id)
            if comment is None:
                raise NotFoundError(resource="comment", resource_id=str(comment_id))

            await db.delete(comment)
            await db.flush()

        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting comment %s: %s", comment_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the comment. Please try again.",
                context={"comment_id": str(comment_id)},
            )

        logger.info("Comment %s deleted", comment_id)


comment_service = CommentService()
