"""Typed outcomes returned by store mutations."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureReason(StrEnum):
    """Why a mutation did not happen."""

    NOT_SIGNED_IN = "not_signed_in"
    REMOTE = "remote"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INVALID = "invalid"


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    """Success with an optional value, or failure with a reason."""

    value: T | None = None
    reason: FailureReason | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def succeeded(cls, value: T | None = None) -> "MutationResult[T]":
        return cls(value=value)

    @classmethod
    def failed(
        cls, reason: FailureReason, detail: str | None = None
    ) -> "MutationResult[T]":
        return cls(reason=reason, detail=detail)
