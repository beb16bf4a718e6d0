"""
Inkpost Backend — User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table.
Who:   Created by UserService.register(); read as the author of posts/comments.

Users are never updated or deleted by the API.
"""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkpost.database import Base

if TYPE_CHECKING:
    from inkpost.models.comment import Comment
    from inkpost.models.post import Post


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    # werkzeug "method$salt$hash" string; never serialized
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    posts: Mapped[List["Post"]] = relationship(back_populates="author")
    comments: Mapped[List["Comment"]] = relationship(back_populates="author")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
