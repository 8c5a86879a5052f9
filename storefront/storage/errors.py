"""
Storage Errors

Exceptions raised by the store and the snapshot layer.
"""


class StorageError(Exception):
    """Base class for storage failures."""


class NotInitialized(StorageError):
    """Raised when the store is used before it has been opened."""


class ConstraintViolation(StorageError):
    """Raised when a write breaks a uniqueness or foreign-key rule."""
