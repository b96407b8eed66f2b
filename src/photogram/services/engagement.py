"""Likes, saves and comments on posts."""

import logging
from dataclasses import dataclass

from photogram.domain.models import Comment, DocumentId, PostId, User, UserId
from photogram.services.documents import (
    PHOTOS,
    USERS,
    DocumentStore,
    toggle_array_value,
)

_logger = logging.getLogger(__name__)


@dataclass
class EngagementService:
    """Service for post likes, saves and comments."""

    store: DocumentStore

    async def update_post_likes(
        self,
        post_doc_id: DocumentId,
        user_id: UserId,
        currently_liked: bool = False,
    ) -> None:
        """Add or remove the user in the post's likes."""
        await toggle_array_value(
            self.store,
            PHOTOS,
            post_doc_id,
            "likes",
            user_id,
            currently_present=currently_liked,
        )

    async def update_post_saved(
        self,
        post_doc_id: DocumentId,
        user_id: UserId,
        currently_saved: bool = False,
    ) -> None:
        """Add or remove the user in the post's saved list."""
        await toggle_array_value(
            self.store,
            PHOTOS,
            post_doc_id,
            "saved",
            user_id,
            currently_present=currently_saved,
        )

    async def update_user_saved_posts(
        self,
        user_doc_id: DocumentId,
        post_id: PostId,
        currently_saved: bool = False,
    ) -> None:
        """Add or remove the post in the user's saved posts."""
        await toggle_array_value(
            self.store,
            USERS,
            user_doc_id,
            "savedPosts",
            post_id,
            currently_present=currently_saved,
        )

    async def toggle_save(
        self,
        post_doc_id: DocumentId,
        post_id: PostId,
        user: User,
        currently_saved: bool,
    ) -> None:
        """Update both the post and the user for a save toggle.

        Not transactional: a failure on the user document leaves the post
        updated and propagates to the caller.
        """
        await self.update_post_saved(post_doc_id, user.user_id, currently_saved)
        await self.update_user_saved_posts(user.doc_id, post_id, currently_saved)
        _logger.info(
            "Save toggled: user_id=%s post_id=%s saved=%s",
            user.user_id,
            post_id,
            not currently_saved,
        )

    async def add_post_comment(self, post_doc_id: DocumentId, comment: Comment) -> None:
        """Append a comment to a post.

        Appending uses array union, so a record equal to an existing one is
        not added twice.
        """
        await self.store.array_union(
            PHOTOS, post_doc_id, "comments", comment.to_document()
        )
