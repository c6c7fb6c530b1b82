from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    STORAGE_FAILURE = "storage_failure"


class LinkStoreError(Exception):
    """Base class for every failure the link store reports."""

    kind: ErrorKind = ErrorKind.STORAGE_FAILURE


class InvalidInputError(LinkStoreError, ValueError):
    """Empty or malformed target URL. Surfaced to the client, never retried."""

    kind = ErrorKind.INVALID_INPUT


class ConflictError(LinkStoreError):
    """Identifier collision on insert. Absorbed by the create retry loop."""

    kind = ErrorKind.CONFLICT


class NotFoundError(LinkStoreError, LookupError):
    kind = ErrorKind.NOT_FOUND


class StorageFailureError(LinkStoreError):
    """Database unavailable, busy past the timeout, or out of create attempts."""

    kind = ErrorKind.STORAGE_FAILURE


class StoreSetupError(StorageFailureError):
    """Raised by the setup routine when the store cannot be opened."""
