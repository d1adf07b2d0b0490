"""
NoteShelf Backend — Notes API Tests
=====================================

What:  End-to-end tests through the FastAPI app (HTTPX + ASGITransport)
       against an in-memory SQLite database.

What we test:
    ✅ List envelope, empty table, pagination parameters
    ✅ Create envelope, 201, category default
    ✅ Duplicate title → 409 fail envelope
    ✅ Lookup by id, 404, malformed id
    ✅ Body validation → 422 fail envelope
    ✅ Storage faults and unexpected errors → 500 fail envelope
    ✅ Request ID header and health check
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from httpx import AsyncClient, ASGITransport

NOTE_KEYS = {"id", "title", "content", "category", "published", "createdAt", "updatedAt"}


async def _create(client, **body):
    response = await client.post("/api/notes", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]["note"]


class TestListNotes:

    @pytest.mark.asyncio
    async def test_empty_table(self, test_client):
        response = await test_client.get("/api/notes", params={"page": 1, "limit": 10})

        assert response.status_code == 200
        assert response.json() == {"status": "success", "results": 0, "notes": []}

    @pytest.mark.asyncio
    async def test_defaults_without_query(self, test_client):
        for i in range(12):
            await _create(test_client, title=f"t{i}", content="c")

        body = (await test_client.get("/api/notes")).json()

        assert body["results"] == 10
        assert len(body["notes"]) == 10

    @pytest.mark.asyncio
    async def test_second_page(self, test_client):
        created = [await _create(test_client, title=f"t{i}", content="c") for i in range(5)]
        ordered_ids = sorted(note["id"] for note in created)

        body = (await test_client.get("/api/notes", params={"page": 2, "limit": 2})).json()

        assert body["results"] == 2
        assert [n["id"] for n in body["notes"]] == ordered_ids[2:4]

    @pytest.mark.asyncio
    async def test_note_shape(self, test_client):
        await _create(test_client, title="A", content="B")

        (note,) = (await test_client.get("/api/notes")).json()["notes"]

        assert set(note) == NOTE_KEYS
        assert note["published"] is False

    @pytest.mark.asyncio
    async def test_storage_fault(self, broken_client):
        response = await broken_client.get("/api/notes")

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "fail"
        assert body["message"].startswith("Database error: ")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params",
        [{"limit": 10**20}, {"page": 10**19, "limit": 10}],
    )
    async def test_oversized_window_is_storage_fault(self, test_client, params):
        response = await test_client.get("/api/notes", params=params)

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "fail"
        assert body["message"].startswith("Database error: ")


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create(self, test_client):
        response = await test_client.post(
            "/api/notes", json={"title": "A", "content": "B", "category": "ideas"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        note = body["data"]["note"]
        assert set(note) == NOTE_KEYS
        assert (note["title"], note["content"], note["category"]) == ("A", "B", "ideas")
        assert note["published"] is False
        assert note["createdAt"] and note["updatedAt"]

    @pytest.mark.asyncio
    async def test_category_omitted_is_empty_string(self, test_client):
        note = await _create(test_client, title="A", content="B")
        assert note["category"] == ""

    @pytest.mark.asyncio
    async def test_duplicate_title_scenario(self, test_client):
        await _create(test_client, title="A", content="B")

        conflict = await test_client.post("/api/notes", json={"title": "A", "content": "C"})

        assert conflict.status_code == 409
        assert conflict.json() == {
            "status": "fail",
            "message": "Note with that title already exists",
        }

        body = (await test_client.get("/api/notes", params={"page": 1, "limit": 10})).json()
        assert body["results"] == 1
        assert body["notes"][0]["title"] == "A"
        assert body["notes"][0]["content"] == "B"

    @pytest.mark.asyncio
    async def test_round_trip_through_list(self, test_client):
        created = await _create(test_client, title="Trip", content="Body", category="c")

        (listed,) = (await test_client.get("/api/notes", params={"limit": 50})).json()["notes"]

        assert listed == created

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"content": "no title"},
            {"title": "no content"},
            {"title": "", "content": "empty title"},
        ],
    )
    async def test_invalid_body(self, test_client, body):
        response = await test_client.post("/api/notes", json=body)

        assert response.status_code == 422
        payload = response.json()
        assert payload["status"] == "fail"
        assert payload["message"].startswith("Invalid request")

    @pytest.mark.asyncio
    async def test_storage_fault(self, broken_client):
        response = await broken_client.post("/api/notes", json={"title": "A", "content": "B"})

        assert response.status_code == 500
        assert response.json()["status"] == "fail"


class TestGetNote:

    @pytest.mark.asyncio
    async def test_get(self, test_client):
        created = await _create(test_client, title="A", content="B")

        response = await test_client.get(f"/api/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"status": "success", "data": {"note": created}}

    @pytest.mark.asyncio
    async def test_not_found(self, test_client):
        missing = uuid4()
        response = await test_client.get(f"/api/notes/{missing}")

        assert response.status_code == 404
        assert response.json() == {
            "status": "fail",
            "message": f"Note with ID: {missing} not found",
        }

    @pytest.mark.asyncio
    async def test_malformed_id(self, test_client):
        response = await test_client.get("/api/notes/not-a-uuid")
        assert response.status_code == 422


class TestCrossCutting:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/notes")
        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/notes", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_health_checker(self, test_client):
        response = await test_client.get("/api/healthchecker")

        assert response.status_code == 200
        assert response.json()["status"] == "success"

    @pytest.mark.asyncio
    async def test_health_checker_database_down(self, test_client, database):
        with patch.object(database, "ping", AsyncMock(side_effect=OSError("connection refused"))):
            response = await test_client.get("/api/healthchecker")

        assert response.status_code == 503
        assert response.json()["status"] == "fail"

    @pytest.mark.asyncio
    async def test_unexpected_error_envelope(self, database):
        from app.main import create_app

        # Starlette re-raises after the catch-all handler has answered
        transport = ASGITransport(app=create_app(database=database), raise_app_exceptions=False)
        with patch(
            "app.services.note_store.NoteStore.list_notes",
            AsyncMock(side_effect=RuntimeError("boom")),
        ):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/api/notes")

        assert response.status_code == 500
        assert response.json()["status"] == "fail"
