"""Tests for activity logging flows."""

import asyncio

from checkmeout.domain.challenges import (
    GYM_PICTURE,
    LOG_A_MEAL,
    POST_A_SCAN,
    SHAME_A_FRIEND,
)
from checkmeout.domain.models import ActivityType, UserIdentity
from checkmeout.domain.results import FailureReason
from checkmeout.services.store import ActivityStore
from tests.conftest import (
    FakeObjectStorage,
    InMemoryChallengeRepository,
    InMemoryFeedRepository,
    InMemoryProfileRepository,
    InMemoryScanLogRepository,
)


def test_meal_log_awards_points_and_prepends_post(
    store: ActivityStore,
    user: UserIdentity,
    profile_repository: InMemoryProfileRepository,
) -> None:
    async def scenario():  # type: ignore[no-untyped-def]
        await store.sign_in(user)
        assert store.total_points == 0
        return await store.log_meal(b"bowl")

    result = asyncio.run(scenario())

    assert result.ok
    assert store.total_points == 50
    assert profile_repository.profiles[user.id].total_points == 50
    post = store.feed_posts[0]
    assert post.id == result.value.id
    assert post.activity_type == ActivityType.MEAL
    assert post.points == 50
    assert store.completed_challenges == frozenset()


def test_upload_failure_creates_nothing(
    store: ActivityStore,
    user: UserIdentity,
    storage: FakeObjectStorage,
    feed_repository: InMemoryFeedRepository,
    profile_repository: InMemoryProfileRepository,
) -> None:
    storage.fail_uploads = True

    async def scenario():  # type: ignore[no-untyped-def]
        await store.sign_in(user)
        return await store.log_meal(b"bowl")

    result = asyncio.run(scenario())

    assert result.reason == FailureReason.REMOTE
    assert store.feed_posts == ()
    assert store.total_points == 0
    assert feed_repository.items == {}
    assert profile_repository.profiles[user.id].total_points == 0


def test_workout_from_challenge_completes_it(
    store: ActivityStore,
    user: UserIdentity,
    challenge_repository: InMemoryChallengeRepository,
) -> None:
    async def scenario() -> None:
        await store.sign_in(user)
        await store.log_workout(b"bench", from_challenge=True)

    asyncio.run(scenario())

    assert store.total_points == 50
    assert store.is_challenge_completed(GYM_PICTURE)
    assert [record.challenge_title for record in challenge_repository.records] == [
        GYM_PICTURE
    ]


def test_meal_from_challenge_twice_records_one_completion(
    store: ActivityStore,
    user: UserIdentity,
    challenge_repository: InMemoryChallengeRepository,
) -> None:
    async def scenario() -> None:
        await store.sign_in(user)
        await store.log_meal(None, from_challenge=True)
        await store.log_meal(None, from_challenge=True)

    asyncio.run(scenario())

    assert store.total_points == 100
    assert len(store.feed_posts) == 2
    assert [record.challenge_title for record in challenge_repository.records] == [
        LOG_A_MEAL
    ]


def test_scan_shares_body_check_with_front_image(
    store: ActivityStore,
    user: UserIdentity,
    scan_log_repository: InMemoryScanLogRepository,
    storage: FakeObjectStorage,
) -> None:
    async def scenario():  # type: ignore[no-untyped-def]
        await store.sign_in(user)
        return await store.log_scan(18.5, b"front", b"side")

    result = asyncio.run(scenario())

    assert result.ok
    log = result.value
    assert store.scan_logs == (log,)
    assert scan_log_repository.records[0].id == log.id
    post = store.feed_posts[0]
    assert post.activity_type == ActivityType.BODY_CHECK
    assert post.image_url == log.front_image_url
    assert post.points == 75
    assert store.total_points == 75
    assert len(storage.objects) == 2
    assert not store.is_challenge_completed(POST_A_SCAN)


def test_scan_from_challenge_awards_bonus(
    store: ActivityStore, user: UserIdentity
) -> None:
    async def scenario() -> None:
        await store.sign_in(user)
        await store.log_scan(22.0, b"front", None, from_challenge=True)

    asyncio.run(scenario())

    assert store.total_points == 100
    assert store.feed_posts[0].points == 100
    assert store.is_challenge_completed(POST_A_SCAN)


def test_scan_stays_logged_when_sharing_fails(
    store: ActivityStore,
    user: UserIdentity,
    scan_log_repository: InMemoryScanLogRepository,
    feed_repository: InMemoryFeedRepository,
    profile_repository: InMemoryProfileRepository,
) -> None:
    feed_repository.failing.add("create_feed_item")

    async def scenario():  # type: ignore[no-untyped-def]
        await store.sign_in(user)
        return await store.log_scan(20.0, b"front")

    result = asyncio.run(scenario())

    assert result.ok
    assert store.scan_logs == (result.value,)
    assert [record.id for record in scan_log_repository.records] == [result.value.id]
    assert store.feed_posts == ()
    assert feed_repository.items == {}
    assert store.total_points == 0
    assert profile_repository.profiles[user.id].total_points == 0


def test_logged_scan_keeps_its_id_after_reload(
    store: ActivityStore, user: UserIdentity
) -> None:
    async def scenario():  # type: ignore[no-untyped-def]
        await store.sign_in(user)
        result = await store.log_scan(21.5, b"front", b"side")
        await store.reload()
        return result

    result = asyncio.run(scenario())

    reloaded = store.scan_logs[0]
    assert reloaded.id == result.value.id
    assert reloaded.body_fat_percentage == 21.5
    assert reloaded.front_image_url == result.value.front_image_url


def test_scan_out_of_range_is_invalid(
    store: ActivityStore, user: UserIdentity, storage: FakeObjectStorage
) -> None:
    async def scenario():  # type: ignore[no-untyped-def]
        await store.sign_in(user)
        return await store.log_scan(140.0, b"front", b"side")

    result = asyncio.run(scenario())

    assert result.reason == FailureReason.INVALID
    assert storage.objects == {}
    assert store.scan_logs == ()


def test_shame_friend_posts_penalty_and_awards_bonus(
    store: ActivityStore, user: UserIdentity
) -> None:
    async def scenario():  # type: ignore[no-untyped-def]
        await store.sign_in(user)
        return await store.shame_friend(" Jordan ", caption="skipped again")

    result = asyncio.run(scenario())

    post = result.value
    assert post.activity_type == ActivityType.SHAMED
    assert post.username == "Jordan"
    assert post.points == -50
    assert store.total_points == 100
    assert store.is_challenge_completed(SHAME_A_FRIEND)


def test_failed_point_update_skips_challenge(
    store: ActivityStore,
    user: UserIdentity,
    profile_repository: InMemoryProfileRepository,
) -> None:
    async def scenario():  # type: ignore[no-untyped-def]
        await store.sign_in(user)
        profile_repository.failing.add("set_total_points")
        return await store.log_meal(None, from_challenge=True)

    result = asyncio.run(scenario())

    assert result.reason == FailureReason.REMOTE
    assert store.total_points == 0
    assert not store.is_challenge_completed(LOG_A_MEAL)


def test_logging_requires_sign_in(
    store: ActivityStore, feed_repository: InMemoryFeedRepository
) -> None:
    result = asyncio.run(store.log_meal(b"bowl"))

    assert result.reason == FailureReason.NOT_SIGNED_IN
    assert feed_repository.items == {}
