"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from checkmeout.config import Settings
from checkmeout.containers import AppContainer, build_store
from checkmeout.domain.errors import RemoteError
from checkmeout.domain.models import ActivityType, UserIdentity
from checkmeout.domain.records import (
    CompletedChallengeRecord,
    FeedItemRecord,
    LikeRecord,
    ProfileRecord,
    ProfileUpdate,
    RoastRecord,
    ScanLogRecord,
)
from checkmeout.services.activities import PointSchedule
from checkmeout.services.challenges import ChallengeRepository
from checkmeout.services.feed import FeedRepository
from checkmeout.services.likes import LikeRepository
from checkmeout.services.media import ImageFetcher, ObjectStorage
from checkmeout.services.profiles import ProfileRepository
from checkmeout.services.scans import ScanLogRepository
from checkmeout.services.store import ActivityStore

STORAGE_BASE_URL = "https://cdn.test/storage/v1/object/public/images/"


def _fail_if(failing: set[str], operation: str) -> None:
    if operation in failing:
        raise RemoteError(f"{operation} unavailable")


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, ProfileRecord] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    yield_before_write: bool = False

    async def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        _fail_if(self.failing, "get_profile")
        return self.profiles.get(user_id)

    async def create_profile(self, record: ProfileRecord) -> None:
        _fail_if(self.failing, "create_profile")
        self.profiles[record.id] = record

    async def update_profile(self, user_id: UUID, update: ProfileUpdate) -> None:
        _fail_if(self.failing, "update_profile")
        self.profiles[user_id] = self.profiles[user_id].model_copy(
            update={"username": update.username, "full_name": update.full_name}
        )

    async def set_total_points(self, user_id: UUID, total_points: int) -> None:
        _fail_if(self.failing, "set_total_points")
        if self.yield_before_write:
            await asyncio.sleep(0)
        self.profiles[user_id] = self.profiles[user_id].model_copy(
            update={"total_points": total_points}
        )


@dataclass
class InMemoryFeedRepository(FeedRepository):
    """In-memory feed repository that records every remote mutation."""

    items: dict[UUID, FeedItemRecord] = field(default_factory=dict)
    roasts: dict[UUID, RoastRecord] = field(default_factory=dict)
    mutations: list[tuple[str, UUID]] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)

    def add_item(self, user_id: UUID, **overrides: object) -> FeedItemRecord:
        values: dict[str, object] = {
            "user_id": user_id,
            "username": "friend",
            "activity_type": ActivityType.MEAL,
            "timestamp": datetime.now(tz=UTC) - timedelta(hours=1),
            "points": 50,
        }
        values.update(overrides)
        record = FeedItemRecord(**values)
        self.items[record.id] = record
        return record

    async def list_feed_items(self) -> list[FeedItemRecord]:
        _fail_if(self.failing, "list_feed_items")
        records = [
            item.model_copy(
                update={
                    "roasts": [
                        roast
                        for roast in self.roasts.values()
                        if roast.feed_item_id == item.id
                    ]
                }
            )
            for item in self.items.values()
        ]
        return sorted(records, key=lambda record: record.timestamp, reverse=True)

    async def get_feed_item(self, item_id: UUID) -> FeedItemRecord | None:
        _fail_if(self.failing, "get_feed_item")
        return self.items.get(item_id)

    async def create_feed_item(self, record: FeedItemRecord) -> None:
        _fail_if(self.failing, "create_feed_item")
        self.mutations.append(("create_feed_item", record.id))
        self.items[record.id] = record

    async def delete_feed_item(self, item_id: UUID) -> None:
        _fail_if(self.failing, "delete_feed_item")
        self.mutations.append(("delete_feed_item", item_id))
        self.items.pop(item_id, None)

    async def list_roasts(self, item_id: UUID) -> list[RoastRecord]:
        _fail_if(self.failing, "list_roasts")
        return sorted(
            (roast for roast in self.roasts.values() if roast.feed_item_id == item_id),
            key=lambda roast: roast.created_at,
        )

    async def create_roast(self, record: RoastRecord) -> None:
        _fail_if(self.failing, "create_roast")
        self.mutations.append(("create_roast", record.feed_item_id))
        self.roasts[record.id] = record

    async def delete_roasts(self, item_id: UUID) -> None:
        _fail_if(self.failing, "delete_roasts")
        self.mutations.append(("delete_roasts", item_id))
        self.roasts = {
            roast_id: roast
            for roast_id, roast in self.roasts.items()
            if roast.feed_item_id != item_id
        }

    async def increment_comments(self, item_id: UUID) -> None:
        _fail_if(self.failing, "increment_comments")
        self.mutations.append(("increment_comments", item_id))
        item = self.items[item_id]
        self.items[item_id] = item.model_copy(update={"comments": item.comments + 1})


@dataclass
class InMemoryLikeRepository(LikeRepository):
    """In-memory like repository sharing counters with the feed repository."""

    feed: InMemoryFeedRepository
    likes: list[LikeRecord] = field(default_factory=list)
    mutations: list[tuple[str, UUID]] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)

    async def list_likes(self, user_id: UUID) -> list[LikeRecord]:
        _fail_if(self.failing, "list_likes")
        return [like for like in self.likes if like.user_id == user_id]

    async def create_like(self, record: LikeRecord) -> None:
        _fail_if(self.failing, "create_like")
        self.mutations.append(("create_like", record.feed_item_id))
        self.likes.append(record)

    async def delete_like(self, user_id: UUID, item_id: UUID) -> None:
        _fail_if(self.failing, "delete_like")
        self.mutations.append(("delete_like", item_id))
        self.likes = [
            like
            for like in self.likes
            if not (like.user_id == user_id and like.feed_item_id == item_id)
        ]

    async def delete_likes_for_item(self, item_id: UUID) -> None:
        _fail_if(self.failing, "delete_likes_for_item")
        self.mutations.append(("delete_likes_for_item", item_id))
        self.likes = [like for like in self.likes if like.feed_item_id != item_id]

    async def increment_likes(self, item_id: UUID) -> None:
        _fail_if(self.failing, "increment_likes")
        self.mutations.append(("increment_likes", item_id))
        item = self.feed.items[item_id]
        self.feed.items[item_id] = item.model_copy(update={"likes": item.likes + 1})

    async def decrement_likes(self, item_id: UUID) -> None:
        _fail_if(self.failing, "decrement_likes")
        self.mutations.append(("decrement_likes", item_id))
        item = self.feed.items[item_id]
        self.feed.items[item_id] = item.model_copy(
            update={"likes": max(item.likes - 1, 0)}
        )


@dataclass
class InMemoryChallengeRepository(ChallengeRepository):
    """In-memory completed-challenge repository for tests."""

    records: list[CompletedChallengeRecord] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)

    async def list_completed(self, user_id: UUID) -> list[CompletedChallengeRecord]:
        _fail_if(self.failing, "list_completed")
        return [record for record in self.records if record.user_id == user_id]

    async def has_completed(self, user_id: UUID, challenge_title: str) -> bool:
        _fail_if(self.failing, "has_completed")
        return any(
            record.user_id == user_id and record.challenge_title == challenge_title
            for record in self.records
        )

    async def create_completed(self, record: CompletedChallengeRecord) -> None:
        _fail_if(self.failing, "create_completed")
        self.records.append(record)


@dataclass
class InMemoryScanLogRepository(ScanLogRepository):
    """In-memory scan log repository for tests."""

    records: list[ScanLogRecord] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)

    async def list_scan_logs(self, user_id: UUID) -> list[ScanLogRecord]:
        _fail_if(self.failing, "list_scan_logs")
        return sorted(
            (record for record in self.records if record.user_id == user_id),
            key=lambda record: record.timestamp,
            reverse=True,
        )

    async def create_scan_log(self, record: ScanLogRecord) -> None:
        _fail_if(self.failing, "create_scan_log")
        self.records.append(record)


@dataclass
class FakeObjectStorage(ObjectStorage):
    """Object storage keeping uploaded bytes in a dict."""

    objects: dict[str, bytes] = field(default_factory=dict)
    deleted: list[str] = field(default_factory=list)
    fail_uploads: bool = False

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        if self.fail_uploads:
            raise RemoteError(f"Upload of {path} failed")
        self.objects[path] = data
        return self.public_url(path)

    async def delete(self, paths: list[str]) -> None:
        for path in paths:
            self.objects.pop(path, None)
            self.deleted.append(path)

    def public_url(self, path: str) -> str:
        return f"{STORAGE_BASE_URL}{path}"

    def path_from_url(self, url: str) -> str | None:
        if not url.startswith(STORAGE_BASE_URL):
            return None
        return url[len(STORAGE_BASE_URL) :]


@dataclass
class FakeImageFetcher(ImageFetcher):
    """Image fetcher reading from a fake storage, failing on unknown URLs."""

    storage: FakeObjectStorage
    fetched: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> bytes:
        self.fetched.append(url)
        path = self.storage.path_from_url(url)
        if path is None or path not in self.storage.objects:
            raise RemoteError(f"Image download failed: {url}")
        return self.storage.objects[path]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_key="header.payload.signature",
        api_token="token-a, token-b",
    )


@pytest.fixture
def user() -> UserIdentity:
    return UserIdentity(id=uuid4(), email="casey@example.com")


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def feed_repository() -> InMemoryFeedRepository:
    return InMemoryFeedRepository()


@pytest.fixture
def like_repository(feed_repository: InMemoryFeedRepository) -> InMemoryLikeRepository:
    return InMemoryLikeRepository(feed=feed_repository)


@pytest.fixture
def challenge_repository() -> InMemoryChallengeRepository:
    return InMemoryChallengeRepository()


@pytest.fixture
def scan_log_repository() -> InMemoryScanLogRepository:
    return InMemoryScanLogRepository()


@pytest.fixture
def storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def image_fetcher(storage: FakeObjectStorage) -> FakeImageFetcher:
    return FakeImageFetcher(storage=storage)


@pytest.fixture
def store(  # noqa: PLR0913
    profile_repository: InMemoryProfileRepository,
    feed_repository: InMemoryFeedRepository,
    like_repository: InMemoryLikeRepository,
    challenge_repository: InMemoryChallengeRepository,
    scan_log_repository: InMemoryScanLogRepository,
    storage: FakeObjectStorage,
    image_fetcher: FakeImageFetcher,
) -> ActivityStore:
    return build_store(
        profile_repository=profile_repository,
        feed_repository=feed_repository,
        like_repository=like_repository,
        challenge_repository=challenge_repository,
        scan_log_repository=scan_log_repository,
        storage=storage,
        image_fetcher=image_fetcher,
        points=PointSchedule(),
    )


@pytest.fixture
def container(settings: Settings, store: ActivityStore) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        store=store,
        auth_source=None,
        close_resources=close_resources,
    )
