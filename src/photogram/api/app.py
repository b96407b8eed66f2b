"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from photogram.api.models import (
    CommentRequest,
    FollowRequest,
    LikeRequest,
    RegisterUserRequest,
    SaveRequest,
)
from photogram.app_logging import configure_logging
from photogram.containers import AppContainer
from photogram.domain.models import (
    Comment,
    DocumentId,
    NewUser,
    PostId,
    User,
    UserId,
)
from photogram.services.documents import RemoteServiceError
from photogram.services.users import UsernameTakenError


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RemoteServiceError)
    async def remote_service_error(
        request: Request, exc: RemoteServiceError
    ) -> JSONResponse:
        logger.error(
            "Remote data service failed: %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/users", status_code=status.HTTP_201_CREATED)
    async def register_user(
        payload: RegisterUserRequest, request: Request
    ) -> dict[str, object]:
        """Create a user after checking the username is free."""
        state_container: AppContainer = request.app.state.container
        new_user = NewUser(
            user_id=UserId(payload.user_id),
            username=payload.username,
            full_name=payload.full_name,
            email_address=payload.email_address,
            photo_url=payload.photo_url,
            verified_user=payload.verified_user,
            date_created=_now_millis(),
        )
        try:
            doc_id = await state_container.user_service.register_user(new_user)
        except UsernameTakenError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        state_container.query_client.invalidate("profile", new_user.username)
        return {"doc_id": doc_id, "user_id": new_user.user_id}

    @app.get("/users/exists/{username}")
    async def user_exists(username: str, request: Request) -> dict[str, object]:
        """Report whether a username is taken."""
        state_container: AppContainer = request.app.state.container
        count = await state_container.user_service.does_user_exist(username)
        return {"username": username, "count": count, "exists": count > 0}

    @app.get("/profiles/{username}")
    async def profile(username: str, request: Request) -> dict[str, object]:
        """Return a profile with the user's latest photos."""
        state_container: AppContainer = request.app.state.container
        queries = state_container.query_client
        user = await queries.fetch_query(
            ("profile", username),
            lambda: state_container.user_service.get_user_by_username(username),
        )
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found"
            )
        photos = await queries.fetch_query(
            ("photos", user.user_id, None),
            lambda: state_container.feed_service.get_user_photos(user.user_id),
        )
        return {"user": user, "photos": photos}

    @app.get("/users/{user_id}/suggestions")
    async def suggestions(
        user_id: str, request: Request, limit: int | None = None
    ) -> dict[str, object]:
        """Return suggested profiles for a user."""
        state_container: AppContainer = request.app.state.container
        user = await _require_user(state_container, UserId(user_id))
        profiles = await state_container.query_client.fetch_query(
            ("suggestions", user.user_id, limit),
            lambda: state_container.follow_service.get_suggested_profiles(
                user.user_id, user.following, limit
            ),
        )
        return {"profiles": profiles}

    @app.post("/users/{user_id}/following")
    async def follow(
        user_id: str, payload: FollowRequest, request: Request
    ) -> dict[str, object]:
        """Follow or unfollow another user."""
        state_container: AppContainer = request.app.state.container
        user = await _require_user(state_container, UserId(user_id), cached=False)
        target = await _require_user(
            state_container, UserId(payload.target_user_id), cached=False
        )
        await state_container.follow_service.toggle_follow(
            user, target, payload.currently_following
        )
        queries = state_container.query_client
        for key in (
            ("user", user.user_id),
            ("user", target.user_id),
            ("profile", user.username),
            ("profile", target.username),
            ("suggestions", user.user_id),
            ("feed", user.user_id),
        ):
            queries.invalidate(*key)
        return {"following": not payload.currently_following}

    @app.get("/users/{user_id}/feed")
    async def feed(user_id: str, request: Request) -> dict[str, object]:
        """Return photos from the users this user follows."""
        state_container: AppContainer = request.app.state.container
        user = await _require_user(state_container, UserId(user_id))
        photos = await state_container.query_client.fetch_query(
            ("feed", user.user_id),
            lambda: state_container.feed_service.get_following_user_photos(
                user.user_id, user.following
            ),
        )
        return {"photos": photos}

    @app.get("/users/{user_id}/photos")
    async def user_photos(
        user_id: str, request: Request, limit: int | None = None
    ) -> dict[str, object]:
        """Return a user's photos, newest first."""
        state_container: AppContainer = request.app.state.container
        photos = await state_container.query_client.fetch_query(
            ("photos", user_id, limit),
            lambda: state_container.feed_service.get_user_photos(
                UserId(user_id), limit
            ),
        )
        return {"photos": photos}

    @app.get("/posts/{post_id}")
    async def post(post_id: str, request: Request) -> dict[str, object]:
        """Return a single post."""
        state_container: AppContainer = request.app.state.container
        photo = await state_container.query_client.fetch_query(
            ("post", post_id),
            lambda: state_container.feed_service.get_photo_by_post_id(
                PostId(post_id)
            ),
        )
        if photo is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Post not found"
            )
        return {"photo": photo}

    @app.post("/posts/{post_doc_id}/likes")
    async def like(
        post_doc_id: str, payload: LikeRequest, request: Request
    ) -> dict[str, object]:
        """Like or unlike a post."""
        state_container: AppContainer = request.app.state.container
        await state_container.engagement_service.update_post_likes(
            DocumentId(post_doc_id), UserId(payload.user_id), payload.currently_liked
        )
        _invalidate_photo_queries(state_container)
        return {"liked": not payload.currently_liked}

    @app.post("/posts/{post_doc_id}/saves")
    async def save(
        post_doc_id: str, payload: SaveRequest, request: Request
    ) -> dict[str, object]:
        """Save or unsave a post for a user."""
        state_container: AppContainer = request.app.state.container
        user = await _require_user(state_container, UserId(payload.user_id))
        await state_container.engagement_service.toggle_save(
            DocumentId(post_doc_id),
            PostId(payload.post_id),
            user,
            payload.currently_saved,
        )
        _invalidate_photo_queries(state_container)
        state_container.query_client.invalidate("user", user.user_id)
        state_container.query_client.invalidate("profile", user.username)
        return {"saved": not payload.currently_saved}

    @app.post("/posts/{post_doc_id}/comments", status_code=status.HTTP_201_CREATED)
    async def comment(
        post_doc_id: str, payload: CommentRequest, request: Request
    ) -> dict[str, object]:
        """Append a comment to a post."""
        state_container: AppContainer = request.app.state.container
        new_comment = Comment(
            display_name=payload.display_name,
            comment=payload.comment,
            date_created=_now_millis(),
        )
        await state_container.engagement_service.add_post_comment(
            DocumentId(post_doc_id), new_comment
        )
        _invalidate_photo_queries(state_container)
        return {"comment": new_comment}

    return app


async def _require_user(
    container: AppContainer, user_id: UserId, *, cached: bool = True
) -> User:
    """Load a user or raise a 404."""
    if cached:
        user = await container.query_client.fetch_query(
            ("user", user_id),
            lambda: container.user_service.get_user_by_user_id(user_id),
        )
    else:
        user = await container.user_service.get_user_by_user_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )
    return user


def _invalidate_photo_queries(container: AppContainer) -> None:
    """Drop cached photo lists after a post changes."""
    for prefix in ("feed", "photos", "post"):
        container.query_client.invalidate(prefix)


def _now_millis() -> int:
    return int(datetime.now(tz=UTC).timestamp() * 1000)
