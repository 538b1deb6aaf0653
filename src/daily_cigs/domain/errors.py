"""Errors raised by the store and the aggregation functions."""


class StorageError(RuntimeError):
    """Base class for key-value storage failures."""


class StorageReadError(StorageError):
    """Stored data could not be read."""


class StorageWriteError(StorageError):
    """Data could not be persisted; callers must treat state as unchanged."""


class InvalidArgument(ValueError):
    """An argument is outside the documented domain."""
