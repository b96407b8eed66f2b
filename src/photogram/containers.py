"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import ClientOptions, create_client

from photogram.adapters.supabase_document_store import SupabaseDocumentStore
from photogram.config import Settings
from photogram.services.cache import InMemoryCache
from photogram.services.engagement import EngagementService
from photogram.services.feed import FeedService
from photogram.services.follows import FollowService
from photogram.services.queries import QueryClient
from photogram.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    follow_service: FollowService
    feed_service: FeedService
    engagement_service: EngagementService
    query_client: QueryClient
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key,
        options=ClientOptions(
            postgrest_client_timeout=resolved_settings.request_timeout_seconds
        ),
    )
    store = SupabaseDocumentStore(supabase_client)
    query_client = QueryClient(
        cache=InMemoryCache(),
        stale_seconds=resolved_settings.query_stale_seconds,
        debug=resolved_settings.debug,
    )

    async def close_resources() -> None:
        query_client.clear()

    return AppContainer(
        settings=resolved_settings,
        user_service=UserService(store),
        follow_service=FollowService(
            store, suggestions_limit=resolved_settings.suggested_profiles_limit
        ),
        feed_service=FeedService(
            store, user_photos_limit=resolved_settings.user_photos_limit
        ),
        engagement_service=EngagementService(store),
        query_client=query_client,
        close_resources=close_resources,
    )
