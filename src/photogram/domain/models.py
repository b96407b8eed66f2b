"""Domain models for users, photos and comments."""

from dataclasses import dataclass, field
from typing import NewType

UserId = NewType("UserId", str)
PostId = NewType("PostId", str)
DocumentId = NewType("DocumentId", str)


@dataclass(frozen=True)
class StoredDocument:
    """A document as returned by the remote store, with its document id."""

    doc_id: DocumentId
    data: dict[str, object]


@dataclass(frozen=True)
class NewUser:
    """Registration payload written to the users collection."""

    user_id: UserId
    username: str
    full_name: str
    email_address: str
    date_created: int
    photo_url: str | None = None
    verified_user: bool = False

    def to_document(self) -> dict[str, object]:
        """Return the document body for insertion."""
        return {
            "userId": self.user_id,
            "username": self.username,
            "fullName": self.full_name,
            "emailAddress": self.email_address,
            "photoURL": self.photo_url,
            "verifiedUser": self.verified_user,
            "following": [],
            "followers": [],
            "savedPosts": [],
            "dateCreated": self.date_created,
        }


@dataclass(frozen=True)
class User:
    """Represents a user document."""

    doc_id: DocumentId
    user_id: UserId
    username: str
    full_name: str | None = None
    email_address: str | None = None
    photo_url: str | None = None
    verified_user: bool = False
    following: list[UserId] = field(default_factory=list)
    followers: list[UserId] = field(default_factory=list)
    saved_posts: list[PostId] = field(default_factory=list)
    date_created: int | None = None

    @classmethod
    def from_document(cls, document: StoredDocument) -> "User":
        data = document.data
        return cls(
            doc_id=document.doc_id,
            user_id=UserId(str(data["userId"])),
            username=str(data["username"]),
            full_name=data.get("fullName"),
            email_address=data.get("emailAddress"),
            photo_url=data.get("photoURL"),
            verified_user=bool(data.get("verifiedUser", False)),
            following=[UserId(value) for value in data.get("following") or []],
            followers=[UserId(value) for value in data.get("followers") or []],
            saved_posts=[PostId(value) for value in data.get("savedPosts") or []],
            date_created=data.get("dateCreated"),
        )


@dataclass(frozen=True)
class Comment:
    """A comment appended to a photo."""

    display_name: str
    comment: str
    date_created: int | None = None

    def to_document(self) -> dict[str, object]:
        """Return the comment as stored inside the photo document."""
        payload: dict[str, object] = {
            "displayName": self.display_name,
            "comment": self.comment,
        }
        if self.date_created is not None:
            payload["dateCreated"] = self.date_created
        return payload

    @classmethod
    def from_document(cls, data: dict[str, object]) -> "Comment":
        return cls(
            display_name=str(data.get("displayName", "")),
            comment=str(data.get("comment", "")),
            date_created=data.get("dateCreated"),
        )


@dataclass(frozen=True)
class Photo:
    """Represents a photo (post) document."""

    doc_id: DocumentId
    photo_id: PostId
    user_id: UserId
    date_created: int
    image_src: str | None = None
    caption: str | None = None
    likes: list[UserId] = field(default_factory=list)
    saved: list[UserId] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)

    @classmethod
    def from_document(cls, document: StoredDocument) -> "Photo":
        data = document.data
        return cls(
            doc_id=document.doc_id,
            photo_id=PostId(str(data.get("photoId") or document.doc_id)),
            user_id=UserId(str(data["userId"])),
            date_created=int(data.get("dateCreated") or 0),
            image_src=data.get("imageSrc"),
            caption=data.get("caption"),
            likes=[UserId(value) for value in data.get("likes") or []],
            saved=[UserId(value) for value in data.get("saved") or []],
            comments=[
                Comment.from_document(item) for item in data.get("comments") or []
            ],
        )


@dataclass(frozen=True)
class PhotoOwner:
    """Trimmed user projection joined onto feed photos."""

    username: str
    photo_url: str | None
    verified_user: bool
    doc_id: DocumentId

    @classmethod
    def from_user(cls, user: User) -> "PhotoOwner":
        return cls(
            username=user.username,
            photo_url=user.photo_url,
            verified_user=user.verified_user,
            doc_id=user.doc_id,
        )


@dataclass(frozen=True)
class FeedPhoto:
    """A photo from a followed user, with viewer flags and owner data."""

    photo: Photo
    user: PhotoOwner
    user_liked_photo: bool
    user_saved_photo: bool
