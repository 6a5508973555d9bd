"""Merging a committed changeset into the in-memory stores."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from inkstone.core.backends.protocols import CommitResult
from inkstone.core.drafts.models import ChangeAction, SavingEntryData
from inkstone.core.store.backups import DraftBackupStore
from inkstone.core.store.collections import AssetStore, EntryStore

logger = logging.getLogger(__name__)


class SaveStatus(BaseModel):
    saved: bool = True
    published: bool = False
    count: int = 0


def is_published(*, is_git: bool, skip_ci: bool | None, automatic_deployments: bool | None) -> bool:
    """Whether a commit triggers a deployment of the site.

    Only Git backends deploy. Without an explicit ``skip_ci`` the site's
    automatic deployment setting decides.

    Example:
        >>> is_published(is_git=True, skip_ci=None, automatic_deployments=True)
        True
        >>> is_published(is_git=True, skip_ci=True, automatic_deployments=True)
        False
    """
    if not is_git:
        return False
    if skip_ci is None:
        return automatic_deployments is True
    return skip_ci is False


class StoreSynchronizer:
    """Applies a successful save to the entry, asset and backup stores."""

    def __init__(
        self,
        entries: EntryStore,
        assets: AssetStore,
        backups: DraftBackupStore | None = None,
    ) -> None:
        self.entries = entries
        self.assets = assets
        self.backups = backups

    async def sync(
        self,
        data: SavingEntryData,
        result: CommitResult,
        *,
        is_git: bool,
        skip_ci: bool | None = None,
        automatic_deployments: bool | None = None,
        backup_key: tuple[str, str] | None = None,
    ) -> SaveStatus:
        """Merge the saved entry and assets; clear the draft backup.

        Args:
            data: Entry, assets and changes that were committed
            result: Commit result, for blob hashes and commit metadata
            is_git: Whether the backend is a Git repository
            skip_ci: Explicit deployment override passed to the commit
            automatic_deployments: Site setting used when ``skip_ci`` is None
            backup_key: ``(collection, slug)`` of the draft backup to delete

        Returns:
            Save status with the published flag
        """
        entry = data.entry.model_copy(
            update={"commit_author": result.author, "commit_date": result.date}
        )
        default_path = next(iter(entry.locales.values())).path if entry.locales else None
        if default_path is not None and (sha := result.file_sha(default_path)):
            entry = entry.model_copy(update={"sha": sha})
        self.entries.upsert(entry)

        for change in data.changes:
            if change.action == ChangeAction.DELETE:
                self.assets.remove(change.path)
            elif change.action == ChangeAction.MOVE and change.previous_path:
                self.assets.remove(change.previous_path)

        for asset in data.assets:
            update = {"commit_author": result.author, "commit_date": result.date}
            if sha := result.file_sha(asset.path):
                update["sha"] = sha
            self.assets.upsert(asset.model_copy(update=update))

        if self.backups is not None and backup_key is not None:
            await self.backups.delete(*backup_key)

        status = SaveStatus(
            saved=True,
            published=is_published(
                is_git=is_git, skip_ci=skip_ci, automatic_deployments=automatic_deployments
            ),
            count=len(data.changes),
        )
        logger.debug(
            "Synchronized entry %s with %d assets (published=%s)",
            entry.id,
            len(data.assets),
            status.published,
        )
        return status
