"""Operation boundary helpers shared by the store services."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from checkmeout.domain.errors import StoreError
from checkmeout.domain.results import FailureReason, MutationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_operation(
    name: str, operation: Callable[[], Awaitable[T]]
) -> MutationResult[T]:
    """Run an operation and convert any failure into a failed result."""
    try:
        value = await operation()
    except StoreError as exc:
        logger.warning("%s failed (%s): %s", name, exc.reason, exc)
        return MutationResult.failed(exc.reason, str(exc))
    except Exception as exc:
        logger.exception("%s failed", name)
        return MutationResult.failed(FailureReason.REMOTE, str(exc))
    return MutationResult.succeeded(value)


class KeyedLocks:
    """Per-key asyncio locks that serialize mutations of one entity."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
