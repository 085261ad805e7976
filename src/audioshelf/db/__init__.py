# ABOUTME: Public API for the audioshelf persistence layer.
# ABOUTME: Exports connection management, storage backends, and the persistence gateway.

from audioshelf.db.connection import DEFAULT_DB_PATH, open_library
from audioshelf.db.persistence import DEFAULT_DEBOUNCE, STATE_KEY, PersistenceGateway
from audioshelf.db.storage import SqliteStorage, StorageBackend, StorageError

__all__ = [
    "DEFAULT_DB_PATH",
    "DEFAULT_DEBOUNCE",
    "STATE_KEY",
    "PersistenceGateway",
    "SqliteStorage",
    "StorageBackend",
    "StorageError",
    "open_library",
]
