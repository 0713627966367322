"""Appwrite Databases service — document CRUD against a named collection."""

from __future__ import annotations

from typing import Any

from healthcare.appwrite.client import AppwriteClient


class Databases:
    """Document operations on `/databases/{database_id}/collections/{collection_id}`."""

    def __init__(self, client: AppwriteClient) -> None:
        self._client = client

    @staticmethod
    def _documents_path(database_id: str, collection_id: str) -> str:
        return f"/databases/{database_id}/collections/{collection_id}/documents"

    async def create_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._client.call(
            "POST",
            self._documents_path(database_id, collection_id),
            payload={"documentId": document_id, "data": data},
        )

    async def get_document(self, database_id: str, collection_id: str, document_id: str) -> dict[str, Any]:
        return await self._client.call(
            "GET",
            f"{self._documents_path(database_id, collection_id)}/{document_id}",
        )

    async def update_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        """Partial update — Appwrite only touches the attributes present in `data`."""
        return await self._client.call(
            "PATCH",
            f"{self._documents_path(database_id, collection_id)}/{document_id}",
            payload={"data": data},
        )

    async def list_documents(
        self,
        database_id: str,
        collection_id: str,
        queries: list[str] | None = None,
    ) -> dict[str, Any]:
        """Return `{"total": int, "documents": [...]}` for one page of results."""
        params = {"queries[]": queries} if queries else None
        return await self._client.call(
            "GET",
            self._documents_path(database_id, collection_id),
            params=params,
        )
