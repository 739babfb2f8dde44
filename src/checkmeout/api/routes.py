"""Store endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from checkmeout.api.schemas import (
    ChallengeView,
    PostActivityRequest,
    PostView,
    ProfileRequest,
    RoastRequest,
    RoastView,
    ScanLogView,
    ScanRequest,
    ShameRequest,
    SignInRequest,
    StoreState,
)
from checkmeout.config import parse_api_tokens
from checkmeout.domain.challenges import CHALLENGES, find_challenge
from checkmeout.domain.models import UserIdentity
from checkmeout.domain.results import FailureReason, MutationResult

if TYPE_CHECKING:
    from checkmeout.containers import AppContainer
    from checkmeout.services.store import ActivityStore

T = TypeVar("T")

_FAILURE_STATUS = {
    FailureReason.NOT_SIGNED_IN: status.HTTP_401_UNAUTHORIZED,
    FailureReason.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    FailureReason.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureReason.INVALID: status.HTTP_422_UNPROCESSABLE_CONTENT,
    FailureReason.REMOTE: status.HTTP_502_BAD_GATEWAY,
}


def _get_api_tokens(request: Request) -> set[str]:
    container: AppContainer = request.app.state.container
    return parse_api_tokens(container.settings.api_token)


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_tokens: set[str] = Depends(_get_api_tokens),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token not in api_tokens:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(tags=["store"], dependencies=[Depends(require_token)])


def _store(request: Request) -> ActivityStore:
    container: AppContainer = request.app.state.container
    return container.store


def _unwrap(result: MutationResult[T]) -> T | None:
    if result.ok:
        return result.value
    reason = result.reason or FailureReason.REMOTE
    raise HTTPException(
        status_code=_FAILURE_STATUS[reason],
        detail={"reason": str(reason), "message": result.detail},
    )


def _post_view(store: ActivityStore, post_id: UUID) -> PostView | None:
    post = store.caches.find_post(post_id)
    if post is None:
        return None
    return PostView.from_post(post, store.is_liked(post.id))


@router.post("/session")
async def sign_in(payload: SignInRequest, request: Request) -> dict[str, object]:
    """Adopt a signed-in user and reload every cache."""
    store = _store(request)
    user = UserIdentity(id=payload.user_id, email=payload.email)
    results = await store.sign_in(user)
    return {
        "loads": {
            name: "ok" if result.ok else str(result.reason)
            for name, result in results.items()
        }
    }


@router.delete("/session")
async def sign_out(request: Request) -> dict[str, str]:
    """Clear every cache."""
    _store(request).sign_out()
    return {"status": "signed_out"}


@router.get("/state")
async def get_state(request: Request) -> StoreState:
    """Return a snapshot of every published cache."""
    store = _store(request)
    profile = store.profile
    return StoreState(
        user_id=store.current_user.id if store.current_user else None,
        username=profile.username if profile else None,
        total_points=store.total_points,
        completed_challenges=sorted(store.completed_challenges),
        liked_post_ids=sorted(store.liked_post_ids),
        feed=[
            PostView.from_post(post, store.is_liked(post.id))
            for post in store.feed_posts
        ],
        scan_logs=[ScanLogView.from_scan_log(log) for log in store.scan_logs],
    )


@router.get("/challenges")
async def list_challenges(request: Request) -> dict[str, list[ChallengeView]]:
    """Return the challenge catalog with completion flags."""
    store = _store(request)
    return {
        "challenges": [
            ChallengeView(
                title=challenge.title,
                description=challenge.description,
                activity_type=challenge.activity_type,
                completed=store.is_challenge_completed(challenge.title),
            )
            for challenge in CHALLENGES
        ]
    }


@router.post("/challenges/{title}/complete")
async def complete_challenge(title: str, request: Request) -> dict[str, bool]:
    """Mark a catalog challenge as completed."""
    if find_challenge(title) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    newly_completed = _unwrap(await _store(request).complete_challenge(title))
    return {"newly_completed": bool(newly_completed)}


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def log_meal(payload: PostActivityRequest, request: Request) -> PostView:
    """Log a meal and share it on the feed."""
    store = _store(request)
    post = _unwrap(
        await store.log_meal(payload.image, payload.caption, payload.from_challenge)
    )
    return PostView.from_post(post, liked=False)


@router.post("/workouts", status_code=status.HTTP_201_CREATED)
async def log_workout(payload: PostActivityRequest, request: Request) -> PostView:
    """Log a workout and share it on the feed."""
    store = _store(request)
    post = _unwrap(
        await store.log_workout(payload.image, payload.caption, payload.from_challenge)
    )
    return PostView.from_post(post, liked=False)


@router.post("/scans", status_code=status.HTTP_201_CREATED)
async def log_scan(payload: ScanRequest, request: Request) -> ScanLogView:
    """Store a body scan and share it as a body check."""
    log = _unwrap(
        await _store(request).log_scan(
            payload.body_fat_percentage,
            payload.front_image,
            payload.side_image,
            payload.from_challenge,
        )
    )
    return ScanLogView.from_scan_log(log)


@router.post("/shame", status_code=status.HTTP_201_CREATED)
async def shame_friend(payload: ShameRequest, request: Request) -> PostView:
    """Shame a friend who skipped their workout."""
    post = _unwrap(
        await _store(request).shame_friend(payload.friend_name, payload.caption)
    )
    return PostView.from_post(post, liked=False)


@router.post("/posts/{post_id}/like")
async def toggle_like(post_id: UUID, request: Request) -> dict[str, object]:
    """Flip the like state of a post."""
    store = _store(request)
    liked = _unwrap(await store.toggle_like(post_id))
    post = _post_view(store, post_id)
    return {"liked": bool(liked), "likes": post.likes if post else None}


@router.post("/posts/{post_id}/roasts", status_code=status.HTTP_201_CREATED)
async def add_roast(
    post_id: UUID, payload: RoastRequest, request: Request
) -> RoastView:
    """Attach a roast to a post."""
    roast = _unwrap(
        await _store(request).add_roast(
            post_id, payload.text, payload.image, payload.from_challenge
        )
    )
    return RoastView.from_roast(roast)


@router.delete("/posts/{post_id}")
async def delete_post(post_id: UUID, request: Request) -> dict[str, str]:
    """Delete an owned post with its roasts and likes."""
    _unwrap(await _store(request).delete_post(post_id))
    return {"status": "deleted"}


@router.patch("/profile")
async def update_profile(
    payload: ProfileRequest, request: Request
) -> dict[str, object]:
    """Edit the signed-in user's profile."""
    profile = _unwrap(
        await _store(request).update_profile(payload.username, payload.full_name)
    )
    return {
        "id": str(profile.id),
        "username": profile.username,
        "full_name": profile.full_name,
        "total_points": profile.total_points,
    }
