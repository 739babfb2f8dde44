"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from checkmeout.adapters.http_image_fetcher import HttpxImageFetcher
from checkmeout.adapters.supabase_auth_source import SupabaseAuthStateSource
from checkmeout.adapters.supabase_challenge_repository import (
    SupabaseChallengeRepository,
)
from checkmeout.adapters.supabase_feed_repository import SupabaseFeedRepository
from checkmeout.adapters.supabase_like_repository import SupabaseLikeRepository
from checkmeout.adapters.supabase_media_storage import SupabaseMediaStorage
from checkmeout.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from checkmeout.adapters.supabase_scan_log_repository import (
    SupabaseScanLogRepository,
)
from checkmeout.config import Settings
from checkmeout.services.activities import ActivityService, PointSchedule
from checkmeout.services.caches import ActivityCaches, SessionState
from checkmeout.services.challenges import ChallengeRepository, ChallengeService
from checkmeout.services.feed import FeedRepository, FeedService
from checkmeout.services.likes import LikeRepository, LikeService
from checkmeout.services.media import ImageFetcher, MediaService, ObjectStorage
from checkmeout.services.operations import KeyedLocks
from checkmeout.services.profiles import ProfileRepository, ProfileService
from checkmeout.services.roasts import RoastService
from checkmeout.services.scans import ScanLogRepository, ScanLogService
from checkmeout.services.session_gate import SessionGate
from checkmeout.services.store import ActivityStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: ActivityStore
    auth_source: SupabaseAuthStateSource | None
    close_resources: Callable[[], Awaitable[None]]


def build_store(  # noqa: PLR0913
    *,
    profile_repository: ProfileRepository,
    feed_repository: FeedRepository,
    like_repository: LikeRepository,
    challenge_repository: ChallengeRepository,
    scan_log_repository: ScanLogRepository,
    storage: ObjectStorage,
    image_fetcher: ImageFetcher,
    points: PointSchedule,
) -> ActivityStore:
    """Wire the store services around one shared set of caches."""
    session = SessionState()
    caches = ActivityCaches()
    locks = KeyedLocks()
    media = MediaService(storage=storage, fetcher=image_fetcher)
    profile_service = ProfileService(profile_repository, session, caches, locks)
    challenge_service = ChallengeService(challenge_repository, session, caches)
    feed_service = FeedService(
        repository=feed_repository,
        like_cleanup=like_repository,
        media=media,
        session=session,
        caches=caches,
        post_locks=locks,
    )
    like_service = LikeService(
        repository=like_repository,
        feed_repository=feed_repository,
        session=session,
        caches=caches,
        post_locks=locks,
    )
    roast_service = RoastService(
        repository=feed_repository,
        media=media,
        session=session,
        caches=caches,
        post_locks=locks,
    )
    scan_service = ScanLogService(scan_log_repository, media, session, caches)
    gate = SessionGate(
        session=session,
        caches=caches,
        profile_service=profile_service,
        scan_service=scan_service,
        feed_service=feed_service,
        challenge_service=challenge_service,
        like_service=like_service,
    )
    activities = ActivityService(
        feed_service=feed_service,
        scan_service=scan_service,
        roast_service=roast_service,
        profile_service=profile_service,
        challenge_service=challenge_service,
        points=points,
    )
    return ActivityStore(
        session=session,
        caches=caches,
        gate=gate,
        activities=activities,
        feed_service=feed_service,
        like_service=like_service,
        challenge_service=challenge_service,
        profile_service=profile_service,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_key
    )
    image_fetcher = HttpxImageFetcher.create(
        timeout_seconds=resolved_settings.image_fetch_timeout_seconds
    )
    store = build_store(
        profile_repository=SupabaseProfileRepository(supabase_client),
        feed_repository=SupabaseFeedRepository(supabase_client),
        like_repository=SupabaseLikeRepository(supabase_client),
        challenge_repository=SupabaseChallengeRepository(supabase_client),
        scan_log_repository=SupabaseScanLogRepository(supabase_client),
        storage=SupabaseMediaStorage(
            supabase_client, bucket=resolved_settings.storage_bucket
        ),
        image_fetcher=image_fetcher,
        points=PointSchedule.from_settings(resolved_settings),
    )

    async def close_resources() -> None:
        await image_fetcher.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        auth_source=SupabaseAuthStateSource(supabase_client),
        close_resources=close_resources,
    )
