"""Shared test fixtures."""

import copy
from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from photogram.config import Settings
from photogram.containers import AppContainer
from photogram.domain.models import DocumentId, StoredDocument
from photogram.services.cache import InMemoryCache
from photogram.services.documents import DocumentStore, RemoteServiceError
from photogram.services.engagement import EngagementService
from photogram.services.feed import FeedService
from photogram.services.follows import FollowService
from photogram.services.queries import QueryClient
from photogram.services.users import UserService


@dataclass
class InMemoryDocumentStore(DocumentStore):
    """In-memory document store for tests."""

    collections: dict[str, dict[DocumentId, dict[str, object]]] = field(
        default_factory=dict
    )
    calls: list[tuple[str, str]] = field(default_factory=list)
    failing: set[tuple[str, str]] = field(default_factory=set)

    def add(self, collection: str, data: dict[str, object]) -> DocumentId:
        """Seed a document directly."""
        doc_id = DocumentId(str(uuid4()))
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)
        return doc_id

    def get(self, collection: str, doc_id: DocumentId) -> dict[str, object]:
        return self.collections[collection][doc_id]

    def _record(self, action: str, collection: str) -> None:
        self.calls.append((action, collection))
        if (action, collection) in self.failing:
            raise RemoteServiceError(f"{action} on {collection} failed")

    def _documents(self, collection: str) -> list[StoredDocument]:
        return [
            StoredDocument(doc_id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self.collections.get(collection, {}).items()
        ]

    async def find(
        self, collection: str, field: str, value: object, limit: int | None = None
    ) -> list[StoredDocument]:
        self._record("find", collection)
        matches = [
            document
            for document in self._documents(collection)
            if document.data.get(field) == value
        ]
        return matches if limit is None else matches[:limit]

    async def find_in(
        self,
        collection: str,
        field: str,
        values: list[object],
        limit: int | None = None,
    ) -> list[StoredDocument]:
        self._record("find_in", collection)
        matches = [
            document
            for document in self._documents(collection)
            if document.data.get(field) in values
        ]
        return matches if limit is None else matches[:limit]

    async def list_documents(self, collection: str, limit: int) -> list[StoredDocument]:
        self._record("list_documents", collection)
        return self._documents(collection)[:limit]

    async def insert(self, collection: str, data: dict[str, object]) -> DocumentId:
        self._record("insert", collection)
        return self.add(collection, data)

    async def array_union(
        self, collection: str, doc_id: DocumentId, field: str, value: object
    ) -> None:
        self._record("array_union", collection)
        document = self._require(collection, doc_id)
        values = document.setdefault(field, [])
        if value not in values:
            values.append(copy.deepcopy(value))

    async def array_remove(
        self, collection: str, doc_id: DocumentId, field: str, value: object
    ) -> None:
        self._record("array_remove", collection)
        document = self._require(collection, doc_id)
        document[field] = [item for item in document.get(field, []) if item != value]

    def _require(self, collection: str, doc_id: DocumentId) -> dict[str, object]:
        document = self.collections.get(collection, {}).get(doc_id)
        if document is None:
            raise RemoteServiceError(f"No document {doc_id} in {collection}")
        return document


def user_document(
    user_id: str,
    username: str,
    following: list[str] | None = None,
    **extra: object,
) -> dict[str, object]:
    """Build a users collection document."""
    document: dict[str, object] = {
        "userId": user_id,
        "username": username,
        "fullName": username.title(),
        "emailAddress": f"{username}@example.com",
        "photoURL": f"https://img.example.com/{username}.jpg",
        "verifiedUser": False,
        "following": following or [],
        "followers": [],
        "savedPosts": [],
        "dateCreated": 1_600_000_000_000,
    }
    document.update(extra)
    return document


def photo_document(
    photo_id: str, user_id: str, date_created: int, **extra: object
) -> dict[str, object]:
    """Build a photos collection document."""
    document: dict[str, object] = {
        "photoId": photo_id,
        "userId": user_id,
        "imageSrc": f"https://img.example.com/p/{photo_id}.jpg",
        "caption": f"caption {photo_id}",
        "likes": [],
        "saved": [],
        "comments": [],
        "dateCreated": date_created,
    }
    document.update(extra)
    return document


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def container(settings: Settings, store: InMemoryDocumentStore) -> AppContainer:
    query_client = QueryClient(cache=InMemoryCache())

    async def close_resources() -> None:
        query_client.clear()

    return AppContainer(
        settings=settings,
        user_service=UserService(store),
        follow_service=FollowService(store),
        feed_service=FeedService(store),
        engagement_service=EngagementService(store),
        query_client=query_client,
        close_resources=close_resources,
    )
