"""
Storage Package

Store backends, statements and snapshot persistence.
"""

from .errors import StorageError, NotInitialized, ConstraintViolation
from .statements import Statement
from .store import Store, SQLiteStore, MemoryStore, QueryResult
from .snapshot import SnapshotManager

__all__ = [
    'StorageError', 'NotInitialized', 'ConstraintViolation',
    'Statement',
    'Store', 'SQLiteStore', 'MemoryStore', 'QueryResult',
    'SnapshotManager'
]
