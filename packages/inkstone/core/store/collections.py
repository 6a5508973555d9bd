"""In-memory entry and asset collections."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from inkstone.core.drafts.models import Asset, Entry
from inkstone.core.paths.utils import get_dirname

logger = logging.getLogger(__name__)


class EntryStore:
    """Entries of every collection, replaced by identifier."""

    def __init__(self, entries: list[Entry] | None = None) -> None:
        self._entries: dict[str, Entry] = {e.id: e for e in entries or []}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries.values())

    def get(self, entry_id: str) -> Entry | None:
        return self._entries.get(entry_id)

    def find(self, collection_name: str, slug: str) -> Entry | None:
        return next(
            (e for e in self if e.collection_name == collection_name and e.slug == slug),
            None,
        )

    def slugs(self, collection_name: str) -> list[str]:
        """Slugs already taken in a collection."""
        return [e.slug for e in self if e.collection_name == collection_name]

    def upsert(self, entry: Entry) -> None:
        replaced = entry.id in self._entries
        self._entries[entry.id] = entry
        logger.debug("%s entry %s (%s)", "Replaced" if replaced else "Added", entry.id, entry.slug)


class AssetStore:
    """Assets of the whole site, replaced by path."""

    def __init__(self, assets: list[Asset] | None = None) -> None:
        self._assets: dict[str, Asset] = {a.path: a for a in assets or []}

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self._assets.values())

    def get(self, path: str) -> Asset | None:
        return self._assets.get(path)

    def names_in(self, folder_path: str) -> list[str]:
        """File names stored directly in a folder."""
        return [a.name for a in self if get_dirname(a.path) == folder_path]

    def upsert(self, asset: Asset) -> None:
        self._assets[asset.path] = asset

    def remove(self, path: str) -> bool:
        return self._assets.pop(path, None) is not None
