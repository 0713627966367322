"""Async httpx client for the Appwrite REST API.

One `AppwriteClient` per process holds the pooled httpx connection and the
project/key headers. The `Databases` and `Messaging` services wrap it.
"""

from __future__ import annotations

import json
import logging
import secrets
import time
from typing import Any

import httpx

logger = logging.getLogger(__name__)

# Document metadata keys ($id, $createdAt, ...) follow the 1.5 response shape
_RESPONSE_FORMAT = "1.5.0"


class AppwriteError(Exception):
    """An Appwrite request failed (transport error or non-2xx response)."""

    def __init__(self, message: str, code: int | None = None, error_type: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.error_type = error_type

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"[{self.code} {self.error_type or 'unknown'}] {self.message}"


def unique_id() -> str:
    """Generate a document/message ID the way Appwrite's ID.unique() does.

    Hex-encoded current time in microseconds followed by random hex padding:
    sortable by creation time and safe for Appwrite's 36-char ID rules.
    """
    micros = time.time_ns() // 1000
    return f"{micros:x}{secrets.token_hex(3)}"


class Query:
    """Builders for Appwrite list queries (JSON-encoded, Appwrite >= 1.5)."""

    @staticmethod
    def order_desc(attribute: str) -> str:
        return json.dumps({"method": "orderDesc", "attribute": attribute})

    @staticmethod
    def limit(value: int) -> str:
        return json.dumps({"method": "limit", "values": [value]})

    @staticmethod
    def cursor_after(document_id: str) -> str:
        return json.dumps({"method": "cursorAfter", "values": [document_id]})


class AppwriteClient:
    """Thin async wrapper around the Appwrite REST endpoint.

    Auth: X-Appwrite-Project + X-Appwrite-Key headers (server API key).
    Every non-2xx response is raised as AppwriteError with the code and type
    from Appwrite's error body.
    """

    def __init__(
        self,
        endpoint: str,
        project_id: str,
        api_key: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._endpoint,
            headers={
                "X-Appwrite-Project": project_id,
                "X-Appwrite-Key": api_key,
                "X-Appwrite-Response-Format": _RESPONSE_FORMAT,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout, connect=5.0),
            transport=transport,
        )

    async def call(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body."""
        try:
            response = await self._client.request(method, path, params=params, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("Appwrite %s %s transport error: %s", method, path, exc)
            raise AppwriteError(f"Transport error: {exc}") from exc

        if response.is_error:
            raise self._error_from_response(response)

        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _error_from_response(response: httpx.Response) -> AppwriteError:
        try:
            body = response.json()
        except ValueError:
            return AppwriteError(response.text or response.reason_phrase, code=response.status_code)
        return AppwriteError(
            body.get("message", response.reason_phrase),
            code=body.get("code", response.status_code),
            error_type=body.get("type"),
        )

    async def close(self) -> None:
        await self._client.aclose()
