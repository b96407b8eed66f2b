"""Feed and profile photo assembly."""

import logging
from dataclasses import dataclass

from photogram.domain.models import FeedPhoto, Photo, PhotoOwner, PostId, User, UserId
from photogram.services.documents import PHOTOS, USERS, DocumentStore

_logger = logging.getLogger(__name__)


@dataclass
class FeedService:
    """Service that reads photos for feeds, profiles and post pages."""

    store: DocumentStore
    user_photos_limit: int = 25

    async def get_following_user_photos(
        self, user_id: UserId, user_following: list[UserId]
    ) -> list[FeedPhoto]:
        """Return photos of followed users joined with their owners."""
        if not user_following:
            return []
        documents = await self.store.find_in(PHOTOS, "userId", list(user_following))
        photos = [Photo.from_document(document) for document in documents]
        owners = await self._load_owners({photo.user_id for photo in photos})

        feed: list[FeedPhoto] = []
        for photo in photos:
            owner = owners.get(photo.user_id)
            if owner is None:
                _logger.warning(
                    "Skipping photo without owner: doc_id=%s user_id=%s",
                    photo.doc_id,
                    photo.user_id,
                )
                continue
            feed.append(
                FeedPhoto(
                    photo=photo,
                    user=PhotoOwner.from_user(owner),
                    user_liked_photo=user_id in photo.likes,
                    user_saved_photo=user_id in photo.saved,
                )
            )
        return feed

    async def get_user_photos(
        self, user_id: UserId, limit: int | None = None
    ) -> list[Photo]:
        """Return a user's photos, newest first.

        The store returns up to ``limit`` photos in its own order and the
        sort happens afterwards, so older photos may be picked over newer
        ones when the user has more than ``limit``.
        """
        resolved_limit = self.user_photos_limit if limit is None else limit
        documents = await self.store.find(
            PHOTOS, "userId", user_id, limit=resolved_limit
        )
        photos = [Photo.from_document(document) for document in documents]
        return sorted(photos, key=lambda photo: photo.date_created, reverse=True)

    async def get_photo_by_post_id(self, post_id: PostId) -> Photo | None:
        """Return a single photo by its post id, if present."""
        documents = await self.store.find(PHOTOS, "photoId", post_id, limit=1)
        if not documents:
            return None
        return Photo.from_document(documents[0])

    async def _load_owners(self, user_ids: set[UserId]) -> dict[UserId, User]:
        """Fetch the owners of a set of photos in one query."""
        if not user_ids:
            return {}
        documents = await self.store.find_in(USERS, "userId", sorted(user_ids))
        owners: dict[UserId, User] = {}
        for document in documents:
            user = User.from_document(document)
            owners.setdefault(user.user_id, user)
        return owners
