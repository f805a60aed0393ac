"""
Notes API — Notes Endpoint Tests
=================================

What:  HTTP contract of /notes through the full app (middleware, handlers,
       exception mapping) with a real SQLite-backed NoteStore.
"""

import logging
import uuid
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from notes_api.dependencies import get_note_store
from notes_api.exceptions import StoreUnavailableError
from notes_api.services.note_store import NoteStore


def _ts(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as emitted by pydantic ('Z' suffix included)."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def _create(client, **body):
    response = await client.post("/notes", json=body)
    assert response.status_code == 201
    return response.json()


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_post_returns_201_with_generated_fields(self, test_client):
        response = await test_client.post("/notes", json={"title": "a", "text": "b"})

        assert response.status_code == 201
        body = response.json()
        uuid.UUID(body["id"])
        assert body["title"] == "a"
        assert body["text"] == "b"
        assert body["createdAt"] == body["updatedAt"]

    @pytest.mark.asyncio
    async def test_post_empty_object_stores_empty_strings(self, test_client):
        body = await _create(test_client)

        assert body["title"] == ""
        assert body["text"] == ""

    @pytest.mark.asyncio
    async def test_post_without_body_stores_empty_strings(self, test_client):
        response = await test_client.post("/notes")

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == ""
        assert body["text"] == ""

    @pytest.mark.asyncio
    async def test_post_ignores_unknown_fields(self, test_client):
        body = await _create(test_client, title="t", text="x", id="forged", createdAt="1970-01-01")

        assert body["id"] != "forged"
        assert _ts(body["createdAt"]).year != 1970

    @pytest.mark.asyncio
    async def test_post_non_string_title_is_400(self, test_client):
        response = await test_client.post("/notes", json={"title": 42, "text": "x"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert "title" in response.json()["msg"]

    @pytest.mark.asyncio
    async def test_post_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/notes",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_post_array_body_is_400(self, test_client):
        response = await test_client.post("/notes", json=["title", "text"])

        assert response.status_code == 400


class TestReadNotes:

    @pytest.mark.asyncio
    async def test_list_returns_all_notes(self, test_client):
        first = await _create(test_client, title="one", text="1")
        second = await _create(test_client, title="two", text="2")

        response = await test_client.get("/notes")

        assert response.status_code == 200
        ids = {note["id"] for note in response.json()}
        assert ids == {first["id"], second["id"]}

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client):
        created = await _create(test_client, title="a", text="b")

        response = await test_client.get(f"/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_missing_is_404(self, test_client):
        response = await test_client.get(f"/notes/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_get_malformed_id_is_400(self, test_client):
        response = await test_client.get("/notes/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_id"


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_put_replaces_fields_without_merging(self, test_client):
        created = await _create(test_client, title="a", text="b")

        response = await test_client.put(f"/notes/{created['id']}", json={"title": "c"})

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["title"] == "c"
        assert body["text"] == ""
        assert body["createdAt"] == created["createdAt"]
        assert _ts(body["updatedAt"]) > _ts(body["createdAt"])

    @pytest.mark.asyncio
    async def test_put_without_body_clears_fields(self, test_client):
        created = await _create(test_client, title="a", text="b")

        response = await test_client.put(f"/notes/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == ""
        assert body["text"] == ""

    @pytest.mark.asyncio
    async def test_put_is_visible_to_get(self, test_client):
        created = await _create(test_client, title="a", text="b")
        await test_client.put(f"/notes/{created['id']}", json={"title": "t2", "text": "x2"})

        response = await test_client.get(f"/notes/{created['id']}")

        body = response.json()
        assert body["title"] == "t2"
        assert body["text"] == "x2"

    @pytest.mark.asyncio
    async def test_put_missing_is_404(self, test_client):
        response = await test_client.put(f"/notes/{uuid.uuid4()}", json={"title": "c"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_put_malformed_id_is_400(self, test_client):
        response = await test_client.put("/notes/123", json={"title": "c"})

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_id"

    @pytest.mark.asyncio
    async def test_put_non_string_text_is_400(self, test_client):
        created = await _create(test_client, title="a", text="b")

        response = await test_client.put(f"/notes/{created['id']}", json={"text": ["x"]})

        assert response.status_code == 400
        unchanged = await test_client.get(f"/notes/{created['id']}")
        assert unchanged.json()["text"] == "b"


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_twice_is_200_then_404(self, test_client):
        created = await _create(test_client, title="a", text="b")

        first = await test_client.delete(f"/notes/{created['id']}")
        second = await test_client.delete(f"/notes/{created['id']}")

        assert first.status_code == 200
        assert first.json() == {"msg": "Delete OK"}
        assert second.status_code == 404

    @pytest.mark.asyncio
    async def test_deleted_note_is_gone(self, test_client):
        created = await _create(test_client, title="a", text="b")
        await test_client.delete(f"/notes/{created['id']}")

        response = await test_client.get(f"/notes/{created['id']}")
        listing = await test_client.get("/notes")

        assert response.status_code == 404
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_delete_malformed_id_is_400(self, test_client):
        response = await test_client.delete("/notes/nope")

        assert response.status_code == 400


class TestStoreFailures:
    """The store is swapped for a mock that fails the way a dead database would."""

    @pytest.fixture
    def failing_store(self, app):
        store = MagicMock(spec=NoteStore)
        app.dependency_overrides[get_note_store] = lambda: store
        return store

    @pytest.mark.asyncio
    async def test_store_unavailable_is_generic_500(self, test_client, failing_store):
        failing_store.list_all = AsyncMock(
            side_effect=StoreUnavailableError(
                context={"error_type": "OperationalError", "detail": "password authentication failed"},
            )
        )

        response = await test_client.get("/notes")

        assert response.status_code == 500
        assert response.json()["error"] == "store_unavailable"
        assert "OperationalError" not in response.text
        assert "password" not in response.text

    @pytest.mark.asyncio
    async def test_unexpected_error_is_something_broke(self, test_client, failing_store):
        failing_store.create = AsyncMock(side_effect=RuntimeError("secret connection string"))

        response = await test_client.post("/notes", json={"title": "a"})

        assert response.status_code == 500
        assert response.json()["msg"] == "Something broke!"
        assert "secret" not in response.text

    @pytest.mark.asyncio
    async def test_failed_write_is_not_reported_as_success(self, test_client, failing_store):
        failing_store.delete = AsyncMock(side_effect=StoreUnavailableError())

        response = await test_client.delete(f"/notes/{uuid.uuid4()}")

        assert response.status_code == 500
        assert "Delete OK" not in response.text

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id_header(self, test_client, failing_store):
        failing_store.list_all = AsyncMock(side_effect=RuntimeError("boom"))

        response = await test_client.get("/notes", headers={"X-Request-ID": "trace-789"})

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "trace-789"
        assert response.json()["request_id"] == "trace-789"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_access_logged(self, test_client, failing_store, caplog):
        failing_store.list_all = AsyncMock(side_effect=RuntimeError("boom"))

        with caplog.at_level(logging.ERROR, logger="notes_api.access"):
            await test_client.get("/notes")

        lines = [r.getMessage() for r in caplog.records if r.name == "notes_api.access"]
        assert any("GET /notes 500" in line for line in lines)
