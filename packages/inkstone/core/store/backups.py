"""Draft backups kept while an entry is being edited."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from inkstone.core.drafts.models import Draft

BackupKey = tuple[str, str]


@runtime_checkable
class DraftBackupStore(Protocol):
    """Storage of unsaved drafts, keyed by collection name and slug.

    New entries are backed up under an empty slug.
    """

    async def get(self, collection_name: str, slug: str = "") -> Draft | None: ...

    async def save(self, draft: Draft, collection_name: str, slug: str = "") -> None: ...

    async def delete(self, collection_name: str, slug: str = "") -> None: ...


class InMemoryDraftBackupStore:
    def __init__(self) -> None:
        self._backups: dict[BackupKey, Draft] = {}

    def __contains__(self, key: BackupKey) -> bool:
        return key in self._backups

    async def get(self, collection_name: str, slug: str = "") -> Draft | None:
        return self._backups.get((collection_name, slug))

    async def save(self, draft: Draft, collection_name: str, slug: str = "") -> None:
        self._backups[(collection_name, slug)] = draft

    async def delete(self, collection_name: str, slug: str = "") -> None:
        self._backups.pop((collection_name, slug), None)
