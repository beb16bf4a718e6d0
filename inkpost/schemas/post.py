"""
Inkpost Backend — Post Schemas
================================

Response models mirror the joins each endpoint performs:

    PostResponse        create / update              (no relations)
    PostWithAuthor      GET /api/posts/              (+ author name, email)
    PostDetail          GET /api/posts/{id}          (+ author, comments with author name)
"""

import uuid
from typing import List, Optional

from pydantic import Field

from inkpost.schemas.comment import CommentWithAuthor
from inkpost.schemas.common import CamelModel


class AuthorSummary(CamelModel):
    name: str
    email: str


class PostResponse(CamelModel):
    id: uuid.UUID = Field(description="Unique post identifier (UUID)")
    title: str
    content: str
    published: bool
    author_id: uuid.UUID


class PostWithAuthor(PostResponse):
    author: Optional[AuthorSummary] = None


class PostDetail(PostWithAuthor):
    comments: List[CommentWithAuthor] = Field(default_factory=list)


class PostCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    # null behaves like an absent flag
    published: Optional[bool] = Field(default=False)


class PostUpdate(CamelModel):
    """
    Partial update: only fields present and non-null in the body are written.

    An empty body is rejected by PostService.update_post().
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    published: Optional[bool] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)
