"""In-memory stores updated after a successful save."""

from inkstone.core.store.backups import DraftBackupStore, InMemoryDraftBackupStore
from inkstone.core.store.collections import AssetStore, EntryStore
from inkstone.core.store.sync import SaveStatus, StoreSynchronizer, is_published

__all__ = [
    "AssetStore",
    "DraftBackupStore",
    "EntryStore",
    "InMemoryDraftBackupStore",
    "SaveStatus",
    "StoreSynchronizer",
    "is_published",
]
