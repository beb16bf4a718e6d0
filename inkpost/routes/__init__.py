"""
Inkpost Backend — API Routes Package & Composition
====================================================

Route Inventory:
    - auth.py:      POST /api/auth/register, POST /api/auth/login
    - posts.py:     /api/posts/...     and /api/admin/posts/...
    - comments.py:  /api/comments/...  and /api/admin/comments/...
    - health.py:    GET  /health

Mounting:

    prefix                 reads            writes
    /api/posts             public           gated (router dependency)
    /api/comments          public           gated (router dependency)
    /api/admin/posts       gated            gated
    /api/admin/comments    gated            gated

Write operations carry the Authentication Gate themselves, so the URL prefix
never decides whether a mutation is authenticated.
"""

from fastapi import Depends, FastAPI

from inkpost.routes import auth, comments, health, posts
from inkpost.security import require_identity

ADMIN_PREFIX = "/api/admin"


def mount_routes(app: FastAPI) -> None:
    """Include every router at its public and gated prefixes."""
    app.include_router(auth.router, prefix="/api/auth")

    app.include_router(posts.read_router, prefix="/api/posts")
    app.include_router(posts.write_router, prefix="/api/posts")
    app.include_router(comments.read_router, prefix="/api/comments")
    app.include_router(comments.write_router, prefix="/api/comments")

    gate = [Depends(require_identity)]
    for name, resource in (("posts", posts), ("comments", comments)):
        prefix = f"{ADMIN_PREFIX}/{name}"
        app.include_router(resource.read_router, prefix=prefix, dependencies=gate)
        app.include_router(resource.write_router, prefix=prefix, dependencies=gate)

    app.include_router(health.router)
