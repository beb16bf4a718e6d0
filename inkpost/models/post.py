"""
Inkpost Backend — Post SQLAlchemy Model
=========================================

What:  ORM model for the `posts` table.
Who:   Read and written by PostService.

Lifecycle:
    1. Created by an authenticated user (published defaults to False)
    2. Updated field by field (title, content, published)
    3. Deleted physically; its comments are deleted with it
       (ORM cascade + ON DELETE CASCADE on comments.post_id)

The `published` flag only filters the public listing; get-by-id ignores it.
"""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, ForeignKey, String, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpost.database import Base

if TYPE_CHECKING:
    from inkpost.models.comment import Comment
    from inkpost.models.user import User


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
        index=True,
    )

    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    author: Mapped["User"] = relationship(back_populates="posts")

    comments: Mapped[List["Comment"]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, published={self.published})>"
