"""Pydantic models for API request bodies."""

from pydantic import BaseModel, Field


class RegisterUserRequest(BaseModel):
    """Sign-up payload."""

    user_id: str
    username: str = Field(min_length=1)
    full_name: str
    email_address: str
    photo_url: str | None = None
    verified_user: bool = False


class FollowRequest(BaseModel):
    """Follow or unfollow another user."""

    target_user_id: str
    currently_following: bool = False


class LikeRequest(BaseModel):
    """Like or unlike a post."""

    user_id: str
    currently_liked: bool = False


class SaveRequest(BaseModel):
    """Save or unsave a post."""

    user_id: str
    post_id: str
    currently_saved: bool = False


class CommentRequest(BaseModel):
    """Comment appended to a post."""

    display_name: str
    comment: str = Field(min_length=1)
