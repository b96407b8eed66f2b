"""Remote document store interface."""

from typing import Protocol

from photogram.domain.models import DocumentId, StoredDocument

USERS = "users"
PHOTOS = "photos"


class RemoteServiceError(RuntimeError):
    """Raised when the remote data service rejects or fails a call."""


class DocumentStore(Protocol):
    """Query and mutation primitives offered by the remote data service.

    Documents are addressed by an opaque, service-assigned ``DocumentId``.
    Query results come back in service order unless the caller sorts them.
    ``array_union`` and ``array_remove`` are atomic on a single document.
    """

    async def find(
        self, collection: str, field: str, value: object, limit: int | None = None
    ) -> list[StoredDocument]:
        """Return documents whose field equals the value."""

    async def find_in(
        self,
        collection: str,
        field: str,
        values: list[object],
        limit: int | None = None,
    ) -> list[StoredDocument]:
        """Return documents whose field is one of the values."""

    async def list_documents(self, collection: str, limit: int) -> list[StoredDocument]:
        """Return up to ``limit`` documents from a collection."""

    async def insert(self, collection: str, data: dict[str, object]) -> DocumentId:
        """Insert a document and return its document id."""

    async def array_union(
        self, collection: str, doc_id: DocumentId, field: str, value: object
    ) -> None:
        """Add a value to an array field unless already present."""

    async def array_remove(
        self, collection: str, doc_id: DocumentId, field: str, value: object
    ) -> None:
        """Remove every occurrence of a value from an array field."""


async def toggle_array_value(  # noqa: PLR0913
    store: DocumentStore,
    collection: str,
    doc_id: DocumentId,
    field: str,
    value: object,
    *,
    currently_present: bool,
) -> None:
    """Remove the value if the caller says it is present, otherwise add it."""
    if currently_present:
        await store.array_remove(collection, doc_id, field, value)
    else:
        await store.array_union(collection, doc_id, field, value)
