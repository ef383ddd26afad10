# app/errors.py


class StorageError(Exception):
    """Base class for failures raised by the storage core."""


class NotFound(StorageError):
    """Target file or directory does not exist."""


class StorageIOError(StorageError):
    """Underlying filesystem operation failed."""


class SandboxEscape(StorageError, PermissionError):
    """A resolved location would lie outside the storage root."""
