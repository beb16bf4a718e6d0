"""
Inkpost Backend — Post Service (Data Access Layer)
====================================================

What:  One database operation per method for the Post resource.
How:   Methods receive an explicit AsyncSession (injected per request) and
       return Pydantic response models. Writes are flushed here so constraint
       failures surface as IntegrityViolationError before the handler returns;
       the commit happens in get_db_session.
Who:   Called by inkpost.routes.posts.

Error translation:
    row missing               → NotFoundError            (404)
    IntegrityError            → IntegrityViolationError  (409)
    any other SQLAlchemyError → DatabaseError            (500)
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from inkpost.exceptions import (
    DatabaseError,
    IntegrityViolationError,
    NotFoundError,
    ValidationError,
)
from inkpost.models import Comment, Post
from inkpost.schemas.post import (
    PostCreate,
    PostDetail,
    PostResponse,
    PostUpdate,
    PostWithAuthor,
)
from inkpost.security import Identity

logger = logging.getLogger(__name__)


class PostService:
    """
    Stateless post operations.

    Responsibilities:
        - list_published(): public listing, author joined
        - get_post(): single post with author and comments, no visibility filter
        - create_post() / update_post() / delete_post(): gated writes
    """

    async def list_published(self, db: AsyncSession) -> List[PostWithAuthor]:
        """
        Every post with published = true, each with its author's name and email.

        No pagination and no ordering beyond the storage default.
        """
        try:
            result = await db.execute(
                select(Post)
                .where(Post.published.is_(True))
                .options(joinedload(Post.author))
            )
            posts = result.scalars().all()
            return [PostWithAuthor.model_validate(post) for post in posts]

        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve posts. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_post(self, db: AsyncSession, post_id: UUID) -> PostDetail:
        """
        One post with author (name, email) and all comments (with author name).

        Raises:
            NotFoundError: no post with this id (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Post)
                .where(Post.id == post_id)
                .options(
                    joinedload(Post.author),
                    joinedload(Post.comments).joinedload(Comment.author),
                )
            )
            # unique() is required with joinedload over a one-to-many collection
            post = result.unique().scalar_one_or_none()

        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the post. Please try again.",
                context={"post_id": str(post_id)},
            )

        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))

        return PostDetail.model_validate(post)

    async def create_post(
        self,
        db: AsyncSession,
        identity: Identity,
        payload: PostCreate,
    ) -> PostResponse:
        """Insert a post authored by `identity`; `published` falls back to False."""
        post = Post(
            title=payload.title,
            content=payload.content,
            published=bool(payload.published),
            author_id=identity.user_id,
        )
        try:
            db.add(post)
            await db.flush()
        except IntegrityError as e:
            logger.warning("Rejected post for author %s: %s", identity.user_id, str(e.orig))
            raise IntegrityViolationError(
                message="The post references a user that does not exist",
                context={"author_id": str(identity.user_id)},
            )
        except SQLAlchemyError as e:
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the post. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Post %s created by %s (published=%s)", post.id, post.author_id, post.published)
        return PostResponse.model_validate(post)

    async def update_post(
        self,
        db: AsyncSession,
        post_id: UUID,
        payload: PostUpdate,
    ) -> PostResponse:
        """
        Overwrite only the fields supplied in `payload`.

        Raises:
            ValidationError: nothing to change
            NotFoundError: no post with this id
        """
        changes = payload.changes()
        if not changes:
            raise ValidationError(
                message="Provide at least one of title, content or published",
            )

        try:
            post = await db.get(Post, post_id)
            if post is None:
                raise NotFoundError(resource="post", resource_id=str(post_id))

            for field, value in changes.items():
                setattr(post, field, value)
            await db.flush()

        except NotFoundError:
            raise
        except IntegrityError as e:
            logger.warning("Rejected update of post %s: %s", post_id, str(e.orig))
            raise IntegrityViolationError(context={"post_id": str(post_id)})
        except SQLAlchemyError as e:
            logger.error("Database error updating post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the post. Please try again.",
                context={"post_id": str(post_id)},
            )

        logger.info("Post %s updated: %s", post_id, ", ".join(sorted(changes)))
        return PostResponse.model_validate(post)

    async def delete_post(self, db: AsyncSession, post_id: UUID) -> None:
        """
        Physically delete a post. Its comments are deleted with it.

        Raises:
            NotFoundError: no post with this id
        """
        try:
            post = await db.get(Post, post_id)
            if post is None:
                raise NotFoundError(resource="post", resource_id=str(post_id))

            # AsyncSession.delete loads the comments collection for the cascade
            await db.delete(post)
            await db.flush()

        except NotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the post. Please try again.",
                context={"post_id": str(post_id)},
            )

        logger.info("Post %s deleted", post_id)


post_service = PostService()
