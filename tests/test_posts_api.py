"""
Inkpost Backend — Post Endpoint Tests
=======================================

What:  End-to-end tests of /api/posts and /api/admin/posts against SQLite.

What we test:
    ✅ Listing shows only published posts, with author name and email
    ✅ Unpublished posts stay readable by id
    ✅ Unknown id → 404 (never a generic error)
    ✅ Create defaults published to False; PUT publishes it
    ✅ Partial updates keep untouched fields
    ✅ Delete removes exactly one post and cascades its comments
    ✅ Writes are gated on both the public and the admin prefix
    ✅ Datastore failures surface as a generic 500, driver text withheld
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession


async def _create_post(client, headers, prefix="/api/admin/posts", **fields):
    body = {"title": "Title", "content": "Body"}
    body.update(fields)
    response = await client.post(f"{prefix}/", json=body, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


class TestPublishFlow:

    @pytest.mark.asyncio
    async def test_created_post_defaults_to_unpublished_until_put(self, test_client, auth_headers):
        """POST without `published` → hidden from listing until PUT sets it."""
        created = await _create_post(test_client, auth_headers, title="A", content="B")

        assert created["title"] == "A"
        assert created["content"] == "B"
        assert created["published"] is False

        listing = (await test_client.get("/api/posts/")).json()
        assert created["id"] not in [p["id"] for p in listing]

        response = await test_client.put(
            f"/api/admin/posts/{created['id']}",
            json={"published": True},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["published"] is True

        listing = (await test_client.get("/api/posts/")).json()
        assert created["id"] in [p["id"] for p in listing]

    @pytest.mark.asyncio
    async def test_listing_includes_author_name_and_email(self, test_client, auth_headers):
        await _create_post(test_client, auth_headers, title="Visible", published=True)
        await _create_post(test_client, auth_headers, title="Draft", published=False)

        response = await test_client.get("/api/posts/")

        assert response.status_code == 200
        posts = response.json()
        assert [p["title"] for p in posts] == ["Visible"]
        assert posts[0]["author"] == {"name": "Ada Lovelace", "email": "ada@example.com"}
        assert "authorId" in posts[0]

    @pytest.mark.asyncio
    async def test_unpublished_post_is_readable_by_id(self, test_client, auth_headers):
        draft = await _create_post(test_client, auth_headers, title="Draft")

        response = await test_client.get(f"/api/posts/{draft['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["published"] is False
        assert body["author"]["name"] == "Ada Lovelace"
        assert body["comments"] == []

    @pytest.mark.asyncio
    async def test_null_published_behaves_like_absent(self, test_client, auth_headers):
        created = await _create_post(test_client, auth_headers, published=None)
        assert created["published"] is False


class TestGetById:

    @pytest.mark.asyncio
    async def test_unknown_id_returns_404(self, test_client):
        response = await test_client.get(f"/api/posts/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_malformed_id_is_a_validation_error(self, test_client):
        response = await test_client.get("/api/posts/not-a-uuid")

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_detail_includes_comments_with_author_name(
        self, test_client, auth_headers, second_user_headers
    ):
        post = await _create_post(test_client, auth_headers, published=True)
        response = await test_client.post(
            "/api/comments/",
            json={"content": "Nice", "postId": post["id"]},
            headers=second_user_headers,
        )
        assert response.status_code == 200

        detail = (await test_client.get(f"/api/posts/{post['id']}")).json()

        assert len(detail["comments"]) == 1
        comment = detail["comments"][0]
        assert comment["content"] == "Nice"
        assert comment["author"] == {"name": "Grace Hopper"}


class TestUpdate:

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, test_client, auth_headers):
        post = await _create_post(test_client, auth_headers, title="Old", content="Keep me")

        response = await test_client.put(
            f"/api/posts/{post['id']}",
            json={"title": "New"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "New"
        assert body["content"] == "Keep me"
        assert body["published"] is False

    @pytest.mark.asyncio
    async def test_empty_update_is_rejected(self, test_client, auth_headers):
        post = await _create_post(test_client, auth_headers)

        response = await test_client.put(
            f"/api/admin/posts/{post['id']}", json={}, headers=auth_headers
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert "details" not in body

    @pytest.mark.asyncio
    async def test_update_unknown_post_returns_404(self, test_client, auth_headers):
        response = await test_client.put(
            f"/api/admin/posts/{uuid4()}", json={"title": "x"}, headers=auth_headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_any_authenticated_user_may_update(
        self, test_client, auth_headers, second_user_headers
    ):
        post = await _create_post(test_client, auth_headers)

        response = await test_client.put(
            f"/api/admin/posts/{post['id']}",
            json={"content": "edited by someone else"},
            headers=second_user_headers,
        )

        assert response.status_code == 200
        assert response.json()["authorId"] == post["authorId"]


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_only_that_post_and_cascades_comments(
        self, test_client, auth_headers
    ):
        doomed = await _create_post(test_client, auth_headers, title="Doomed", published=True)
        survivor = await _create_post(test_client, auth_headers, title="Survivor", published=True)
        for post in (doomed, survivor):
            response = await test_client.post(
                "/api/comments/",
                json={"content": f"on {post['title']}", "postId": post["id"]},
                headers=auth_headers,
            )
            assert response.status_code == 200

        response = await test_client.delete(
            f"/api/admin/posts/{doomed['id']}", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Post deleted"}
        assert (await test_client.get(f"/api/posts/{doomed['id']}")).status_code == 404
        assert (await test_client.get(f"/api/comments/post/{doomed['id']}")).json() == []

        remaining = (await test_client.get(f"/api/comments/post/{survivor['id']}")).json()
        assert [c["content"] for c in remaining] == ["on Survivor"]
        listing = (await test_client.get("/api/posts/")).json()
        assert [p["id"] for p in listing] == [survivor["id"]]

    @pytest.mark.asyncio
    async def test_delete_unknown_post_returns_404(self, test_client, auth_headers):
        response = await test_client.delete(
            f"/api/admin/posts/{uuid4()}", headers=auth_headers
        )
        assert response.status_code == 404


class TestWriteGate:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prefix", ["/api/posts", "/api/admin/posts"])
    async def test_create_without_token_is_rejected(self, test_client, prefix):
        response = await test_client.post(f"{prefix}/", json={"title": "A", "content": "B"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prefix", ["/api/posts", "/api/admin/posts"])
    async def test_update_and_delete_without_token_are_rejected(
        self, test_client, auth_headers, prefix
    ):
        post = await _create_post(test_client, auth_headers)

        put = await test_client.put(f"{prefix}/{post['id']}", json={"title": "hijack"})
        delete = await test_client.delete(f"{prefix}/{post['id']}")

        assert put.status_code == 401
        assert delete.status_code == 401
        detail = (await test_client.get(f"/api/posts/{post['id']}")).json()
        assert detail["title"] == "Title"

    @pytest.mark.asyncio
    async def test_public_prefix_accepts_authenticated_writes(self, test_client, auth_headers):
        created = await _create_post(test_client, auth_headers, prefix="/api/posts")
        assert created["published"] is False

    @pytest.mark.asyncio
    async def test_admin_prefix_gates_reads(self, test_client, auth_headers):
        assert (await test_client.get("/api/admin/posts/")).status_code == 401

        response = await test_client.get("/api/admin/posts/", headers=auth_headers)
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_author_comes_from_token_not_body(self, test_client, auth_headers):
        created = await _create_post(
            test_client, auth_headers, authorId=str(uuid4())
        )
        detail = (await test_client.get(f"/api/posts/{created['id']}")).json()
        assert detail["author"]["email"] == "ada@example.com"


class TestDatastoreFailure:

    @pytest.mark.asyncio
    async def test_listing_failure_is_a_generic_500(self, test_client, monkeypatch):
        monkeypatch.setattr(
            AsyncSession,
            "execute",
            AsyncMock(side_effect=OperationalError("SELECT ...", {}, Exception("secret driver text"))),
        )

        response = await test_client.get("/api/posts/")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "secret driver text" not in response.text
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_detail_failure_is_a_generic_500(self, test_client, monkeypatch):
        monkeypatch.setattr(
            AsyncSession,
            "execute",
            AsyncMock(side_effect=OperationalError("SELECT ...", {}, Exception("secret driver text"))),
        )

        response = await test_client.get(f"/api/posts/{uuid4()}")

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"
        assert "secret driver text" not in response.text
