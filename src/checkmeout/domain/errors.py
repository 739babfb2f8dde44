"""Exceptions raised inside store operations."""

from checkmeout.domain.results import FailureReason


class StoreError(Exception):
    """Base class for failures an operation converts into a result."""

    reason = FailureReason.REMOTE


class NotSignedInError(StoreError):
    """Raised when an operation needs a signed-in user."""

    reason = FailureReason.NOT_SIGNED_IN


class RemoteError(StoreError):
    """Raised when the backend or object storage rejects a call."""

    reason = FailureReason.REMOTE


class NotFoundError(StoreError):
    """Raised when a referenced row does not exist remotely."""

    reason = FailureReason.NOT_FOUND


class OwnershipError(StoreError):
    """Raised when the caller does not own the targeted row."""

    reason = FailureReason.FORBIDDEN


class InvalidInputError(StoreError):
    """Raised when arguments fail validation before any remote call."""

    reason = FailureReason.INVALID
