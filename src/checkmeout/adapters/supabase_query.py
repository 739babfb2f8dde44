"""Helpers for running Supabase queries off the event loop."""

import asyncio
import logging
from typing import Protocol, TypeVar

import httpx
from postgrest.exceptions import APIError
from pydantic import BaseModel, ValidationError

from checkmeout.domain.errors import RemoteError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class _Response(Protocol):
    data: object


class _Executable(Protocol):
    def execute(self) -> _Response: ...


async def execute(query: _Executable) -> list[dict[str, object]]:
    """Execute a built query in a worker thread and return its rows."""
    try:
        response = await asyncio.to_thread(query.execute)
    except APIError as exc:
        raise RemoteError(exc.message or str(exc)) from exc
    except httpx.HTTPError as exc:
        raise RemoteError(str(exc)) from exc
    data = response.data
    if isinstance(data, list):
        return data
    return []


def parse_records(
    model: type[RecordT], rows: list[dict[str, object]], table: str
) -> list[RecordT]:
    """Validate rows, skipping and logging the ones that do not parse."""
    records: list[RecordT] = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning("Skipping invalid %s row %s: %s", table, row.get("id"), exc)
    return records
