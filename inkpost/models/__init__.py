"""ORM models. Importing this package registers every table on `Base.metadata`."""

from inkpost.models.user import User
from inkpost.models.post import Post
from inkpost.models.comment import Comment

__all__ = ["User", "Post", "Comment"]
