from roommatch.database import SessionLocal
from roommatch.storage.base import (
    Storage,
    StoredConversation,
    StoredMessage,
    StoredUser,
    as_utc,
    canonical_pair,
    utc_now,
)
from roommatch.storage.memory import MemoryStorage
from roommatch.storage.sql import SqlStorage

__all__ = [
    "MemoryStorage",
    "SqlStorage",
    "Storage",
    "StoredConversation",
    "StoredMessage",
    "StoredUser",
    "as_utc",
    "build_storage",
    "canonical_pair",
    "utc_now",
]


def build_storage(backend: str) -> Storage:
    """Construct the process-wide storage for the configured backend."""
    if backend == "memory":
        return MemoryStorage()
    if backend == "sql":
        return SqlStorage(SessionLocal)
    raise ValueError(f"Unknown storage backend: {backend!r}")
