"""User lookup and registration."""

import logging
from dataclasses import dataclass

from photogram.domain.models import DocumentId, NewUser, User, UserId
from photogram.services.documents import USERS, DocumentStore

_logger = logging.getLogger(__name__)


class UsernameTakenError(ValueError):
    """Raised when registering a username that already exists."""


@dataclass
class UserService:
    """Application service for user lookups and creation."""

    store: DocumentStore

    async def does_user_exist(self, username: str) -> int:
        """Return how many users have the given username."""
        documents = await self.store.find(USERS, "username", username)
        return len(documents)

    async def get_user_by_user_id(self, user_id: UserId) -> User | None:
        """Return the user with the given user id, if present."""
        documents = await self.store.find(USERS, "userId", user_id)
        if not documents:
            return None
        return User.from_document(documents[0])

    async def get_user_by_username(self, username: str) -> User | None:
        """Return the user with the given username, if present."""
        documents = await self.store.find(USERS, "username", username)
        if not documents:
            return None
        return User.from_document(documents[0])

    async def create_user(self, new_user: NewUser) -> DocumentId:
        """Insert a user document as given."""
        return await self.store.insert(USERS, new_user.to_document())

    async def register_user(self, new_user: NewUser) -> DocumentId:
        """Create a user after checking the username is free.

        The check and the insert are separate calls, so two concurrent
        registrations of one username can both succeed.
        """
        if await self.does_user_exist(new_user.username) > 0:
            raise UsernameTakenError(f"Username {new_user.username!r} is taken")
        doc_id = await self.create_user(new_user)
        _logger.info("Registered user: user_id=%s doc_id=%s", new_user.user_id, doc_id)
        return doc_id
