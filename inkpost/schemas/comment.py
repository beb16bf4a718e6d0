"""
Inkpost Backend — Comment Schemas
===================================

CommentCreate deliberately has no author field: the author always comes from
the authenticated identity, and unknown body keys (e.g. `authorId`) are ignored.
"""

import uuid
from typing import Optional

from pydantic import Field

from inkpost.schemas.common import CamelModel


class CommentAuthor(CamelModel):
    """Author fields joined onto a comment."""
    name: str


class CommentResponse(CamelModel):
    id: uuid.UUID
    content: str
    post_id: uuid.UUID = Field(description="Parent post")
    author_id: uuid.UUID = Field(description="Authoring user")


class CommentWithAuthor(CommentResponse):
    author: Optional[CommentAuthor] = None


class CommentCreate(CamelModel):
    content: str = Field(min_length=1, description="Comment body")
    post_id: uuid.UUID = Field(description="Post being commented on")
