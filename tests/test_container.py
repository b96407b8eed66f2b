"""Tests for container wiring."""

import asyncio

from photogram.adapters.supabase_document_store import SupabaseDocumentStore
from photogram.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.user_service.store, SupabaseDocumentStore)
    assert container.follow_service.suggestions_limit == 10
    assert container.feed_service.user_photos_limit == 25
    asyncio.run(container.close_resources())
