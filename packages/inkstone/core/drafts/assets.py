"""Extraction of pending uploads embedded in entry content.

The editor stands in a placeholder token (``blob:<uuid>``) for every local
file that has not been stored yet. On save each token is replaced with the
public URL of the asset the file becomes, and the file itself is added to
the changeset. Byte-identical files become a single asset, even when they
are referenced from several fields or locales.
"""

from __future__ import annotations

import asyncio
import logging
import re
import uuid
from typing import Protocol

from inkstone.core.assets.hashing import git_blob_sha_stream
from inkstone.core.assets.kinds import get_asset_kind
from inkstone.core.config.folders import AssetFolder, global_asset_folder
from inkstone.core.drafts.models import (
    Asset,
    ChangeAction,
    Draft,
    FileChange,
    FlatContent,
    UploadRef,
)
from inkstone.core.errors import AssetProcessingError
from inkstone.core.paths.asset_folder import ResolvedAssetFolderPaths, resolve_asset_folder_paths
from inkstone.core.paths.entry_path import create_entry_path
from inkstone.core.paths.slug import format_file_name
from inkstone.core.paths.template import TemplateContext, TemplateType
from inkstone.core.paths.utils import encode_file_path, get_dirname

logger = logging.getLogger(__name__)

UPLOAD_TOKEN_RE = re.compile(
    r"blob:(?:[a-z][\w+.-]*://[^/\s\"'()<>]+/)?"
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
)


def create_upload_token(origin: str | None = None) -> str:
    """Mint a placeholder token for a pending upload.

    Example:
        >>> create_upload_token("http://localhost:5173")
        'blob:http://localhost:5173/1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed'
    """
    prefix = f"{origin.rstrip('/')}/" if origin else ""
    return f"blob:{prefix}{uuid.uuid4()}"


class AssetNameLookup(Protocol):
    """Names of the assets already stored in a folder."""

    def names_in(self, folder_path: str) -> list[str]: ...


class AssetExtractor:
    """Stages the uploads referenced from one draft's content.

    One extractor serves a whole save: every locale is processed through
    the same instance, possibly concurrently, and ``changes``/``assets``
    collect the results. Checking for an already staged upload and staging
    a new one happen under one lock, so the first locale to claim a hash
    wins and later ones reuse its name.

    Args:
        draft: Draft being saved (read only)
        default_locale_slug: Slug of the entry in the default locale
        stored_assets: Assets already in the repository, for unique file names
        default_folder: Folder for uploads that do not name one; the global
            media folder when omitted
    """

    def __init__(
        self,
        draft: Draft,
        default_locale_slug: str,
        *,
        stored_assets: AssetNameLookup | None = None,
        default_folder: AssetFolder | None = None,
    ) -> None:
        self.draft = draft
        self.default_locale_slug = default_locale_slug
        self.stored_assets = stored_assets
        self.default_folder = default_folder or global_asset_folder(draft.site)
        self.changes: list[FileChange] = []
        self.assets: list[Asset] = []
        # Public URL of each staged asset, by hash
        self._urls: dict[str, str] = {}
        self._lock = asyncio.Lock()

    def resolve_folder(self, folder: AssetFolder) -> ResolvedAssetFolderPaths:
        draft = self.draft
        target = draft.target
        default_locale = draft.default_locale
        slug = self.default_locale_slug

        context = TemplateContext(
            content=draft.current_values.get(default_locale, {}),
            type=TemplateType.MEDIA_FOLDER,
            current_slug=slug,
            entry_file_path=create_entry_path(draft, default_locale, slug),
            base_path=target.file.base_path,
            identifier_field=target.collection.identifier_field,
            is_index_file=draft.is_index_file,
            slug_config=draft.site.slug,
        )
        return resolve_asset_folder_paths(
            folder,
            context,
            structure=target.i18n.structure,
            sub_path=target.file.sub_path,
        )

    def _names_in(self, folder_path: str) -> list[str]:
        stored = self.stored_assets.names_in(folder_path) if self.stored_assets else []
        staged = [a.name for a in self.assets if get_dirname(a.path) == folder_path]
        return [*stored, *staged]

    def _public_url(self, paths: ResolvedAssetFolderPaths, file_name: str) -> str:
        public_path = paths.public_path
        if public_path:
            public_url = f"{'' if public_path == '/' else public_path}/{file_name}"
        else:
            public_url = file_name

        if self.draft.site.output.encode_file_path:
            public_url = encode_file_path(public_url)

        return public_url

    async def _stage(self, token: str, ref: UploadRef) -> str:
        """Stage one upload and return the public URL replacing its token.

        An upload identical to one already staged resolves to that asset's
        URL, whatever folder it was aimed at.
        """
        upload = ref.upload
        folder = ref.folder or self.default_folder

        try:
            sha = await git_blob_sha_stream(upload.iter_chunks(), upload.size)
        except (OSError, ValueError) as e:
            logger.error("Could not hash upload %s (%s): %s", upload.name, token, e)
            raise AssetProcessingError(token, e) from e

        paths = self.resolve_folder(folder)
        internal_path = paths.internal_path

        async with self._lock:
            if sha in self._urls:
                logger.debug("Reusing staged asset %s for %s", self._urls[sha], token)
                return self._urls[sha]

            file_name = format_file_name(
                upload.name,
                slugify_name=self.draft.site.media_library.slugify_filename,
                other_names=self._names_in(internal_path),
                config=self.draft.site.slug,
            )
            path = f"{internal_path}/{file_name}" if internal_path else file_name
            self.changes.append(FileChange(action=ChangeAction.CREATE, path=path, data=upload))
            self.assets.append(
                Asset(
                    name=file_name,
                    path=path,
                    sha=sha,
                    size=upload.size,
                    kind=get_asset_kind(file_name),
                    folder=folder,
                    collection_name=self.draft.collection_name,
                    token=token,
                )
            )
            self._urls[sha] = self._public_url(paths, file_name)
            logger.debug("Staged asset %s for %s", path, token)
            return self._urls[sha]

    async def replace_tokens(self, value: str) -> str:
        """Replace every known upload token in a string with its public URL.

        Tokens without a pending upload are left untouched.

        Raises:
            AssetProcessingError: If an upload cannot be read or hashed
        """
        tokens = [t for t in dict.fromkeys(UPLOAD_TOKEN_RE.findall(value)) if t in self.draft.files]
        if not tokens:
            return value

        urls = await asyncio.gather(*(self._stage(t, self.draft.files[t]) for t in tokens))
        for token, url in zip(tokens, urls, strict=True):
            value = value.replace(token, url)
        return value

    async def process(self, content: FlatContent) -> None:
        """Trim the string values of one locale's content and replace upload tokens.

        ``content`` is modified in place; pass a copy of the draft's values.
        """
        for key_path, value in list(content.items()):
            if isinstance(value, str):
                content[key_path] = await self.replace_tokens(value.strip())
