"""
CodeShelf Backend — API Route Tests
=====================================

What:  End-to-end tests of the HTTP surface through the ASGI app.
How:   HTTPX AsyncClient over ASGITransport, with get_db_session pointed at
       the in-memory SQLite database (see conftest.py).
"""

import pytest
from httpx import ASGITransport, AsyncClient

from codeshelf.middleware.rate_limit import RateLimitMiddleware

GOOD = {"title": "Hi", "language": "Python", "code": " print(1) "}


async def _create(client, **overrides):
    response = await client.post("/api/snippets", json={**GOOD, **overrides})
    assert response.status_code == 201
    return response.json()["snippet"]


# ══════════════════════════════════════════════════════════════════════════
# POST /api/snippets
# ══════════════════════════════════════════════════════════════════════════


class TestCreateSnippet:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_normalized_snippet(self, test_client):
        response = await test_client.post("/api/snippets", json=GOOD)

        assert response.status_code == 201
        snippet = response.json()["snippet"]
        assert snippet["title"] == "Hi"
        assert snippet["language"] == "python"
        assert snippet["code"] == "print(1)"
        assert snippet["id"]
        assert "createdAt" in snippet
        assert "created_at" not in snippet

    @pytest.mark.asyncio
    async def test_missing_field_returns_missing_map(self, test_client):
        response = await test_client.post(
            "/api/snippets", json={"title": "x", "language": "", "code": "y"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Title, language, and code are required."
        assert body["missing"] == {"title": False, "language": True, "code": False}
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_empty_body_marks_every_field_missing(self, test_client):
        response = await test_client.post("/api/snippets")

        assert response.status_code == 400
        assert response.json()["missing"] == {"title": True, "language": True, "code": True}

    @pytest.mark.asyncio
    async def test_title_over_limit_is_rejected(self, test_client):
        response = await test_client.post("/api/snippets", json={**GOOD, "title": "a" * 101})

        assert response.status_code == 400
        body = response.json()
        assert "100" in body["message"]
        assert "missing" not in body

        listed = await test_client.get("/api/snippets")
        assert listed.json()["count"] == 0

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/api/snippets",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_non_string_field_is_400(self, test_client):
        response = await test_client.post("/api/snippets", json={**GOOD, "code": 123})
        assert response.status_code == 400


# ══════════════════════════════════════════════════════════════════════════
# GET /api/snippets
# ══════════════════════════════════════════════════════════════════════════


class TestListSnippets:

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client):
        response = await test_client.get("/api/snippets")

        assert response.status_code == 200
        assert response.json() == {"snippets": [], "count": 0}
        assert response.headers["X-API-Version"] == "1"

    @pytest.mark.asyncio
    async def test_created_snippet_is_listed(self, test_client):
        created = await _create(test_client)

        body = (await test_client.get("/api/snippets")).json()

        assert body["count"] == 1
        assert body["snippets"][0]["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_search_and_language_filters(self, test_client):
        await _create(test_client, title="Fetch JSON", language="JavaScript", code="fetch(u)")
        await _create(test_client, title="Sort", language="Python", code="sorted(xs)")
        await _create(test_client, title="Hello", language="Java", code="println")

        by_search = (await test_client.get("/api/snippets", params={"search": "SORT"})).json()
        assert [s["title"] for s in by_search["snippets"]] == ["Sort"]

        by_lang = (await test_client.get("/api/snippets", params={"language": "java"})).json()
        assert sorted(s["language"] for s in by_lang["snippets"]) == ["java", "javascript"]

        both = (
            await test_client.get("/api/snippets", params={"search": "fetch", "language": "py"})
        ).json()
        assert both == {"snippets": [], "count": 0}

    @pytest.mark.asyncio
    async def test_blank_search_is_ignored(self, test_client):
        await _create(test_client)

        body = (await test_client.get("/api/snippets", params={"search": "   "})).json()

        assert body["count"] == 1


# ══════════════════════════════════════════════════════════════════════════
# GET / PUT / DELETE /api/snippets/{id}
# ══════════════════════════════════════════════════════════════════════════


class TestSingleSnippet:

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client):
        created = await _create(test_client)

        response = await test_client.get(f"/api/snippets/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_unknown_id_is_404(self, test_client):
        response = await test_client.get("/api/snippets/does-not-exist")

        assert response.status_code == 404
        assert response.json()["message"] == "Snippet not found"

    @pytest.mark.asyncio
    async def test_update_changes_only_supplied_fields(self, test_client):
        created = await _create(test_client)

        response = await test_client.put(
            f"/api/snippets/{created['id']}", json={"title": "  New title ", "language": None}
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["title"] == "New title"
        assert updated["language"] == "python"
        assert updated["code"] == "print(1)"
        assert updated["id"] == created["id"]
        assert updated["createdAt"] == created["createdAt"]

    @pytest.mark.asyncio
    async def test_update_unknown_id_is_404(self, test_client):
        response = await test_client.put("/api/snippets/nope", json={"title": "x"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_invalid_field_is_400_and_keeps_record(self, test_client):
        created = await _create(test_client)

        response = await test_client.put(
            f"/api/snippets/{created['id']}", json={"code": "   "}
        )

        assert response.status_code == 400
        fetched = (await test_client.get(f"/api/snippets/{created['id']}")).json()
        assert fetched["code"] == "print(1)"

    @pytest.mark.asyncio
    async def test_delete_then_delete_again(self, test_client):
        created = await _create(test_client)

        first = await test_client.delete(f"/api/snippets/{created['id']}")
        second = await test_client.delete(f"/api/snippets/{created['id']}")

        assert first.status_code == 200
        assert first.json() == {"message": "Snippet removed"}
        assert second.status_code == 404
        assert (await test_client.get("/api/snippets")).json()["count"] == 0


# ══════════════════════════════════════════════════════════════════════════
# Ambient behaviour: unknown routes, health, request IDs, rate limiting
# ══════════════════════════════════════════════════════════════════════════


class TestAmbient:

    @pytest.mark.asyncio
    async def test_unknown_api_route(self, test_client):
        response = await test_client.get("/api/foo")

        assert response.status_code == 404
        assert response.json()["message"] == "API endpoint not found"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] in ("healthy", "degraded")
        assert body["environment"] == "testing"
        assert body["version"]
        assert body["uptime"] >= 0
        assert "timestamp" in body

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/snippets", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/api/snippets")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_rate_limit_returns_429(self, app):
        app.add_middleware(RateLimitMiddleware, max_requests=2, window=60)
        transport = ASGITransport(app=app)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/api/snippets")).status_code == 200
            assert (await client.get("/api/snippets")).status_code == 200
            limited = await client.get("/api/snippets")
            health = await client.get("/api/health")

        assert limited.status_code == 429
        assert limited.json()["error"] == "rate_limit_exceeded"
        assert int(limited.headers["Retry-After"]) > 0
        assert health.status_code == 200
