"""HTTP client wrapper used by every resource service."""

import logging
from typing import Any

import httpx

from taskboard.core.storage import TokenStore
from taskboard.exceptions.base import NetworkError, api_error_for_status

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class ApiClient:
    """
    Thin pass-through to the task management API.

    Every request is sent to ``base_url + path`` with a JSON content type, and
    the stored bearer token (if any) is attached by a request hook right before
    the request leaves. Successful responses are returned as parsed bodies;
    failures are raised as :class:`ApiError` (a response arrived) or
    :class:`NetworkError` (nothing arrived). No retries are made.

    :ivar base_url: Root URL of the backend.
    :ivar token_store: Where the bearer token is read from.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.token_store = token_store

        client_kwargs: dict[str, Any] = {}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": JSON_CONTENT_TYPE},
            event_hooks={"request": [self._attach_token]},
            **client_kwargs,
        )

    async def _attach_token(self, request: httpx.Request) -> None:
        token = self.token_store.get()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the parsed response body.

        Raises:
            ApiError: The backend answered with a non-2xx status.
            NetworkError: The request never produced a response.
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug(f"{method} {path} params={query}")

        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=query or None,
                data=data,
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.error(f"Network error on {method} {path}: {str(e)}")
            raise NetworkError(
                message=str(e) or "Network request failed",
                details={"method": method, "path": path},
            ) from e

        body = self._parse_body(response)
        if not response.is_success:
            logger.debug(f"{method} {path} -> {response.status_code}")
            raise api_error_for_status(response.status_code, body)
        return body

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def post_form(self, path: str, data: dict[str, Any]) -> Any:
        return await self.request(
            "POST", path, data=data, headers={"Content-Type": FORM_CONTENT_TYPE}
        )

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
