"""Follow graph and profile suggestions."""

import logging
from dataclasses import dataclass

from photogram.domain.models import DocumentId, User, UserId
from photogram.services.documents import USERS, DocumentStore, toggle_array_value

_logger = logging.getLogger(__name__)


@dataclass
class FollowService:
    """Service for following users and suggesting profiles."""

    store: DocumentStore
    suggestions_limit: int = 10

    async def get_suggested_profiles(
        self,
        user_id: UserId,
        user_following: list[UserId],
        limit: int | None = None,
    ) -> list[User]:
        """Return profiles the user might follow.

        Up to ``limit`` users are fetched first and filtered afterwards, so
        fewer than ``limit`` suggestions can come back even when more
        eligible users exist.
        """
        resolved_limit = self.suggestions_limit if limit is None else limit
        documents = await self.store.list_documents(USERS, resolved_limit)
        excluded = set(user_following)
        profiles = [User.from_document(document) for document in documents]
        return [
            profile
            for profile in profiles
            if profile.user_id != user_id and profile.user_id not in excluded
        ]

    async def update_user_following(
        self,
        suggested_user_id: UserId,
        user_id: UserId,
        currently_following: bool = False,
    ) -> None:
        """Add or remove a user id in the acting user's following list."""
        documents = await self.store.find(USERS, "userId", user_id)
        for document in documents:
            await toggle_array_value(
                self.store,
                USERS,
                document.doc_id,
                "following",
                suggested_user_id,
                currently_present=currently_following,
            )

    async def update_user_followers(
        self,
        suggested_user_doc_id: DocumentId,
        user_id: UserId,
        currently_following: bool = False,
    ) -> None:
        """Add or remove the acting user in the target's followers list."""
        await toggle_array_value(
            self.store,
            USERS,
            suggested_user_doc_id,
            "followers",
            user_id,
            currently_present=currently_following,
        )

    async def toggle_follow(
        self, user: User, target: User, currently_following: bool
    ) -> None:
        """Update both sides of a follow relationship.

        The two writes are independent; if the second fails the first stays
        applied and the error propagates. Repeating the toggle is safe.
        """
        await self.update_user_following(
            target.user_id, user.user_id, currently_following
        )
        await self.update_user_followers(
            target.doc_id, user.user_id, currently_following
        )
        _logger.info(
            "Follow toggled: user_id=%s target=%s following=%s",
            user.user_id,
            target.user_id,
            not currently_following,
        )
