"""Changeset builder: turns a draft into an entry, assets and file changes."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from inkstone.core.config.folders import AssetFolder
from inkstone.core.content.normalize import serialize_content
from inkstone.core.drafts.assets import AssetExtractor, AssetNameLookup
from inkstone.core.drafts.models import (
    ChangeAction,
    Draft,
    Entry,
    FileChange,
    LocalizedEntry,
    SavingEntryData,
    SlugVariants,
)
from inkstone.core.formats.encoder import DefaultFormatEncoder
from inkstone.core.formats.protocols import FormatEncoder
from inkstone.core.paths.entry_path import create_entry_path
from inkstone.core.utils.logging import log_performance

logger = logging.getLogger(__name__)


def is_locale_enabled(draft: Draft, locale: str) -> bool:
    """Whether a locale is enabled in the draft; the only locale of a non-i18n draft always is."""
    return draft.current_locales.get(locale, not draft.target.i18n.enabled)


def _original_slug(draft: Draft, locale: str) -> str | None:
    original = draft.original_entry
    if original is None:
        return None
    localized = original.locales.get(locale)
    return localized.slug if localized is not None else original.slug


def _original_path(draft: Draft, locale: str) -> str | None:
    original = draft.original_entry
    if original is None:
        return None
    localized = original.locales.get(locale)
    return localized.path if localized is not None else None


class _ChangesetBuilder:
    def __init__(
        self,
        draft: Draft,
        slugs: SlugVariants,
        encoder: FormatEncoder,
        extractor: AssetExtractor,
    ) -> None:
        self.draft = draft
        self.slugs = slugs
        self.encoder = encoder
        self.extractor = extractor
        self.i18n = draft.target.i18n
        self.paths: dict[str, str] = {}

    def _locales(self) -> list[str]:
        """Locales to process, default locale first."""
        draft = self.draft
        locales = [
            locale
            for locale in self.i18n.locales
            if locale in draft.current_values or is_locale_enabled(draft, locale)
        ]
        return sorted(locales, key=lambda locale: locale != self.i18n.default_locale)

    async def _build_locale(self, locale: str) -> LocalizedEntry | None:
        draft = self.draft
        slug = self.slugs.for_locale(locale)
        path = create_entry_path(draft, locale, slug)
        self.paths[locale] = path

        if not is_locale_enabled(draft, locale):
            return None

        # Work on a copy; the draft stays untouched for a retry
        content = dict(draft.current_values.get(locale, {}))
        if self.slugs.canonical_slug is not None:
            content[self.i18n.canonical_slug.key] = self.slugs.canonical_slug

        await self.extractor.process(content)
        logger.debug("Resolved %s path for %s: %s", locale, draft.collection_name, path)
        return LocalizedEntry(slug=slug, path=path, content=content)

    async def _encode(self, content: Any) -> str:
        return await self.encoder.encode(content, self.draft.target.file)

    async def _single_file_change(self, entry: Entry) -> FileChange:
        draft = self.draft
        default_locale = self.i18n.default_locale
        slug = self.slugs.default_locale_slug
        path = self.paths.get(default_locale) or create_entry_path(draft, default_locale, slug)
        renamed = not draft.is_new and _original_slug(draft, default_locale) != slug

        if self.i18n.enabled:
            content: Any = {
                locale: serialize_content(draft, locale, localized.content)
                for locale, localized in entry.locales.items()
            }
        else:
            localized = entry.locales.get(default_locale)
            content = serialize_content(
                draft, default_locale, localized.content if localized is not None else {}
            )

        if draft.is_new:
            action = ChangeAction.CREATE
        elif renamed:
            action = ChangeAction.MOVE
        else:
            action = ChangeAction.UPDATE

        return FileChange(
            action=action,
            path=path,
            previous_path=_original_path(draft, default_locale) if renamed else None,
            data=await self._encode(content),
        )

    async def _locale_file_change(self, entry: Entry, locale: str) -> FileChange | None:
        draft = self.draft
        was_enabled = draft.original_locales.get(locale, False)
        previous_path = _original_path(draft, locale)

        if is_locale_enabled(draft, locale):
            localized = entry.locales[locale]
            renamed = (
                not draft.is_new and was_enabled and _original_slug(draft, locale) != localized.slug
            )
            if draft.is_new or not was_enabled:
                action = ChangeAction.CREATE
            elif renamed:
                action = ChangeAction.MOVE
            else:
                action = ChangeAction.UPDATE

            return FileChange(
                action=action,
                path=localized.path,
                previous_path=previous_path if renamed else None,
                data=await self._encode(serialize_content(draft, locale, localized.content)),
            )

        if not draft.is_new and was_enabled:
            path = (
                previous_path
                or self.paths.get(locale)
                or create_entry_path(draft, locale, self.slugs.for_locale(locale))
            )
            return FileChange(action=ChangeAction.DELETE, path=path, previous_path=path)

        return None

    async def build(self) -> SavingEntryData:
        draft = self.draft
        locales = self._locales()
        localized = await asyncio.gather(*(self._build_locale(locale) for locale in locales))

        default_slug = self.slugs.default_locale_slug
        default_path = self.paths.get(self.i18n.default_locale, "")
        file = draft.target.file
        original = draft.original_entry

        entry = Entry(
            id=original.id if original is not None else str(uuid.uuid4()),
            slug=default_slug,
            sub_path=file.extract_sub_path(default_path) or default_slug,
            locales={
                locale: item
                for locale, item in zip(locales, localized, strict=True)
                if item is not None
            },
            collection_name=draft.collection_name,
            file_name=draft.file_name,
        )

        changes = list(self.extractor.changes)
        if self.i18n.single_physical_file:
            changes.append(await self._single_file_change(entry))
        else:
            locale_changes = await asyncio.gather(
                *(self._locale_file_change(entry, locale) for locale in self.i18n.locales)
            )
            changes.extend(change for change in locale_changes if change is not None)

        for change in changes:
            logger.debug("Change: %s %s", change.action.value, change.path)

        return SavingEntryData(entry=entry, assets=list(self.extractor.assets), changes=changes)


@log_performance
async def create_saving_entry_data(
    draft: Draft,
    slugs: SlugVariants,
    *,
    encoder: FormatEncoder | None = None,
    stored_assets: AssetNameLookup | None = None,
    default_folder: AssetFolder | None = None,
) -> SavingEntryData:
    """Build the entry, the staged assets and the changeset for a draft.

    Locales are processed concurrently; uploads shared between them become
    one asset. Asset changes come first, followed by the entry file changes.

    Args:
        draft: Draft to save (not modified)
        slugs: Slugs from :func:`inkstone.core.drafts.slugs.get_slugs`
        encoder: Encoder producing file content; the default encoder when omitted
        stored_assets: Assets already stored, for unique asset file names
        default_folder: Folder for uploads that do not name one

    Returns:
        Entry, assets and changes ready to commit

    Raises:
        AssetProcessingError: If an embedded upload cannot be read or hashed
        UnsupportedFormatError: If the collection's format cannot be encoded
    """
    extractor = AssetExtractor(
        draft,
        slugs.default_locale_slug,
        stored_assets=stored_assets,
        default_folder=default_folder,
    )
    builder = _ChangesetBuilder(draft, slugs, encoder or DefaultFormatEncoder(), extractor)
    return await builder.build()
