"""
Unit tests for the HTTP client wrapper.

Requests go through the recording transport, so every test can look at
exactly what left the client.
"""

import httpx
import pytest

from taskboard.core.http import ApiClient
from taskboard.core.storage import MemoryStorage, TokenStore
from taskboard.exceptions import ApiError, NetworkError, NotFoundError, UnauthorizedError
from tests.fake_backend import BASE_URL


class TestApiClient:
    @pytest.mark.asyncio
    async def test_attaches_stored_token(self, api_client, transport, logged_in):
        """Test that the stored token is sent as a bearer header."""
        await api_client.get("/api/users/me")

        request = transport.calls("GET", "/api/users/me")[0]
        assert request.headers["authorization"] == f"Bearer {logged_in}"
        assert request.headers["content-type"] == "application/json"

    @pytest.mark.asyncio
    async def test_no_token_no_header(self, api_client, transport):
        """Test that no Authorization header is sent without a token."""
        with pytest.raises(UnauthorizedError):
            await api_client.get("/api/users/me")

        assert "authorization" not in transport.calls()[0].headers

    @pytest.mark.asyncio
    async def test_token_is_read_per_request(self, api_client, transport, token_store, logged_in):
        """Test that a token change is picked up by the next request."""
        await api_client.get("/api/projects/")
        token_store.clear()

        with pytest.raises(UnauthorizedError):
            await api_client.get("/api/projects/")

        first, second = transport.calls("GET", "/api/projects/")
        assert "authorization" in first.headers
        assert "authorization" not in second.headers

    @pytest.mark.asyncio
    async def test_none_params_are_dropped(self, api_client, transport, logged_in):
        """Test that query parameters set to None are left out."""
        await api_client.get("/api/tasks/", params={"status": "DONE", "priority": None})

        assert transport.calls()[0].params == {"status": "DONE"}

    @pytest.mark.asyncio
    async def test_json_body(self, api_client, transport, logged_in):
        """Test sending a JSON body."""
        created = await api_client.post("/api/projects/", json={"name": "Launch"})

        assert transport.calls()[0].json() == {"name": "Launch"}
        assert created["name"] == "Launch"

    @pytest.mark.asyncio
    async def test_form_body(self, api_client, transport):
        """Test sending a form-encoded body."""
        body = await api_client.post_form(
            "/api/auth/login", data={"username": "alice@example.com", "password": "correct-horse"}
        )

        request = transport.calls()[0]
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert request.form() == {"username": "alice@example.com", "password": "correct-horse"}
        assert body["token_type"] == "bearer"

    @pytest.mark.asyncio
    async def test_empty_body_is_none(self, api_client, backend, logged_in):
        """Test that an empty response body decodes to None."""
        project = backend.add_project("Doomed")

        assert await api_client.delete(f"/api/projects/{project['id']}") is None

    @pytest.mark.asyncio
    async def test_non_2xx_raises_with_body(self, api_client, transport, logged_in):
        """Test that an error status raises with the decoded body."""
        transport.fail("GET", "/api/projects/", 500, {"detail": "boom"})

        with pytest.raises(ApiError) as exc_info:
            await api_client.get("/api/projects/")

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "boom"

    @pytest.mark.asyncio
    async def test_not_found(self, api_client, logged_in):
        """Test that a 404 raises a not-found error."""
        with pytest.raises(NotFoundError) as exc_info:
            await api_client.get("/api/projects/999")

        assert exc_info.value.detail == "Project not found"

    @pytest.mark.asyncio
    async def test_network_failure(self, api_client, transport, logged_in):
        """Test that a transport failure raises a network error."""
        transport.fail_network("GET", "/api/projects/")

        with pytest.raises(NetworkError) as exc_info:
            await api_client.get("/api/projects/")

        assert exc_info.value.status_code is None
        assert exc_info.value.details == {"method": "GET", "path": "/api/projects/"}

    @pytest.mark.asyncio
    async def test_no_retry_after_failure(self, api_client, transport, logged_in):
        """Test that a failed request is sent exactly once."""
        transport.fail("GET", "/api/projects/", 503)

        with pytest.raises(ApiError):
            await api_client.get("/api/projects/")

        assert len(transport.calls("GET", "/api/projects/")) == 1

    @pytest.mark.asyncio
    async def test_non_json_body_is_text(self):
        """Test that a non-JSON body is returned as text."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        async with ApiClient(
            BASE_URL, TokenStore(MemoryStorage()), transport=httpx.MockTransport(handler)
        ) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.get("/api/projects/")

        assert exc_info.value.body == "Bad Gateway"
        assert exc_info.value.detail is None
