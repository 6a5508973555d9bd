"""Save orchestration: draft -> changeset -> commit -> stores."""

from __future__ import annotations

import logging

from inkstone.core.backends.protocols import CommitBackend
from inkstone.core.config.folders import AssetFolder
from inkstone.core.drafts.changes import create_saving_entry_data
from inkstone.core.drafts.models import CommitOptions, Draft, Entry
from inkstone.core.drafts.slugs import get_slugs
from inkstone.core.errors import EntrySaveError, EntryValidationError
from inkstone.core.formats.protocols import FormatEncoder
from inkstone.core.store.sync import SaveStatus, StoreSynchronizer

logger = logging.getLogger(__name__)


class EntrySaver:
    """Saves drafts through a commit backend and keeps the stores in sync.

    Args:
        backend: Commit backend receiving the changesets
        synchronizer: Stores updated after a successful commit
        encoder: Format encoder; the default encoder when omitted
        default_folder: Folder for uploads that do not name one

    Example:
        >>> saver = EntrySaver(InMemoryBackend(), StoreSynchronizer(EntryStore(), AssetStore()))
        >>> entry = await saver.save(draft)
        >>> saver.last_status.published
        False
    """

    def __init__(
        self,
        backend: CommitBackend,
        synchronizer: StoreSynchronizer,
        *,
        encoder: FormatEncoder | None = None,
        default_folder: AssetFolder | None = None,
    ) -> None:
        self.backend = backend
        self.synchronizer = synchronizer
        self.encoder = encoder
        self.default_folder = default_folder
        self.last_status: SaveStatus | None = None

    def _existing_slugs(self, draft: Draft) -> list[str]:
        own_id = draft.original_entry.id if draft.original_entry is not None else None
        return [
            entry.slug
            for entry in self.synchronizer.entries
            if entry.collection_name == draft.collection_name and entry.id != own_id
        ]

    async def save(self, draft: Draft, *, skip_ci: bool | None = None) -> Entry:
        """Save a draft.

        Nothing is written and no store changes unless the whole changeset is
        committed. The draft itself is never modified, so a failed save can
        be retried with it.

        Args:
            draft: Draft to save
            skip_ci: Disable (True) or force (False) a deployment for this
                commit; the site's automatic deployment setting applies when None

        Returns:
            The saved entry, stamped with the commit metadata

        Raises:
            EntryValidationError: If the draft has invalid fields
            AssetProcessingError: If an embedded upload cannot be read or hashed
            EntrySaveError: If the commit fails; the cause is chained
        """
        if not draft.is_valid():
            logger.debug("Draft of %s has invalid fields", draft.collection_name)
            raise EntryValidationError(draft.validation_errors)

        slugs = get_slugs(draft, existing_slugs=self._existing_slugs(draft))
        data = await create_saving_entry_data(
            draft,
            slugs,
            encoder=self.encoder,
            stored_assets=self.synchronizer.assets,
            default_folder=self.default_folder,
        )

        options = CommitOptions(
            commit_type="create" if draft.is_new else "update",
            collection=draft.collection_name,
            skip_ci=skip_ci,
        )

        try:
            result = await self.backend.commit(data.changes, options)
        except Exception as e:
            logger.exception("Failed to commit %d changes", len(data.changes))
            raise EntrySaveError("Saving the entry failed", cause=e) from e

        self.last_status = await self.synchronizer.sync(
            data,
            result,
            is_git=self.backend.is_git,
            skip_ci=skip_ci,
            automatic_deployments=draft.site.backend.automatic_deployments,
            backup_key=(draft.collection_name, "" if draft.is_new else slugs.default_locale_slug),
        )

        logger.info(
            "Saved %s/%s (%d changes, %d assets)",
            draft.collection_name,
            slugs.default_locale_slug,
            len(data.changes),
            len(data.assets),
        )
        saved = self.synchronizer.entries.get(data.entry.id)
        assert saved is not None
        return saved


async def save_entry(
    draft: Draft,
    backend: CommitBackend,
    synchronizer: StoreSynchronizer,
    *,
    skip_ci: bool | None = None,
    encoder: FormatEncoder | None = None,
) -> Entry:
    """Save a draft with a one-off :class:`EntrySaver`."""
    saver = EntrySaver(backend, synchronizer, encoder=encoder)
    return await saver.save(draft, skip_ci=skip_ci)
