"""Supabase-backed document store."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx
from postgrest import APIError
from supabase import Client

from photogram.domain.models import DocumentId, StoredDocument
from photogram.services.documents import DocumentStore, RemoteServiceError

T = TypeVar("T")

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseDocumentStore(DocumentStore):
    """Stores each collection as a table of ``(id uuid, data jsonb)`` rows.

    Array updates go through the ``document_array_union`` and
    ``document_array_remove`` SQL functions so they apply atomically to one
    row.
    """

    client: Client

    async def find(
        self, collection: str, field: str, value: object, limit: int | None = None
    ) -> list[StoredDocument]:
        """Return documents whose field equals the value."""

        def run() -> list[dict[str, object]]:
            query = (
                self.client.table(collection)
                .select("id, data")
                .eq(_json_field(field), value)
            )
            if limit is not None:
                query = query.limit(limit)
            return query.execute().data or []

        rows = await self._call(run, action=f"find:{collection}.{field}")
        return [_to_document(row) for row in rows]

    async def find_in(
        self,
        collection: str,
        field: str,
        values: list[object],
        limit: int | None = None,
    ) -> list[StoredDocument]:
        """Return documents whose field is one of the values."""

        def run() -> list[dict[str, object]]:
            query = (
                self.client.table(collection)
                .select("id, data")
                .in_(_json_field(field), values)
            )
            if limit is not None:
                query = query.limit(limit)
            return query.execute().data or []

        rows = await self._call(run, action=f"find_in:{collection}.{field}")
        return [_to_document(row) for row in rows]

    async def list_documents(self, collection: str, limit: int) -> list[StoredDocument]:
        """Return up to ``limit`` documents from a collection."""

        def run() -> list[dict[str, object]]:
            response = (
                self.client.table(collection).select("id, data").limit(limit).execute()
            )
            return response.data or []

        rows = await self._call(run, action=f"list:{collection}")
        return [_to_document(row) for row in rows]

    async def insert(self, collection: str, data: dict[str, object]) -> DocumentId:
        """Insert a document and return its document id."""

        def run() -> list[dict[str, object]]:
            response = self.client.table(collection).insert({"data": data}).execute()
            return response.data or []

        rows = await self._call(run, action=f"insert:{collection}")
        if not rows:
            raise RuntimeError(f"Failed to create document in {collection}")
        return DocumentId(str(rows[0]["id"]))

    async def array_union(
        self, collection: str, doc_id: DocumentId, field: str, value: object
    ) -> None:
        """Add a value to an array field unless already present."""
        await self._rpc("document_array_union", collection, doc_id, field, value)

    async def array_remove(
        self, collection: str, doc_id: DocumentId, field: str, value: object
    ) -> None:
        """Remove every occurrence of a value from an array field."""
        await self._rpc("document_array_remove", collection, doc_id, field, value)

    async def _rpc(  # noqa: PLR0913
        self,
        function: str,
        collection: str,
        doc_id: DocumentId,
        field: str,
        value: object,
    ) -> None:
        params = {
            "collection": collection,
            "doc_id": str(doc_id),
            "field": field,
            "value": value,
        }

        def run() -> None:
            self.client.rpc(function, params).execute()

        await self._call(run, action=f"{function}:{collection}.{field}")

    async def _call(self, func: Callable[[], T], *, action: str) -> T:
        """Run a blocking client call in a worker thread."""
        try:
            return await asyncio.to_thread(func)
        except (APIError, httpx.HTTPError) as exc:
            _logger.warning("Supabase %s failed: %s", action, exc)
            raise RemoteServiceError(f"Supabase {action} failed") from exc


def _json_field(field: str) -> str:
    return f"data->>{field}"


def _to_document(row: dict[str, object]) -> StoredDocument:
    data = row.get("data") or {}
    return StoredDocument(doc_id=DocumentId(str(row["id"])), data=dict(data))
