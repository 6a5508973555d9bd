"""Draft, entry, asset and change models."""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Literal

import aiofiles  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field

from inkstone.core.assets.hashing import DEFAULT_CHUNK_SIZE
from inkstone.core.assets.kinds import MEDIA_KINDS, AssetKind
from inkstone.core.config.collections import ResolvedCollection
from inkstone.core.config.folders import AssetFolder
from inkstone.core.config.models import SiteConfig
from inkstone.core.fields.models import FieldDef

# Flattened content: dotted key-paths to scalar values
FlatContent = dict[str, Any]


@dataclass(frozen=True)
class Upload:
    """A local file waiting to be stored as an asset.

    Either ``data`` holds the bytes or ``source`` points at a file on disk.
    """

    name: str
    data: bytes | None = None
    source: Path | None = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.source is None):
            raise ValueError("Upload needs exactly one of data or source")

    @property
    def size(self) -> int:
        if self.data is not None:
            return len(self.data)
        assert self.source is not None
        return self.source.stat().st_size

    async def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Yield the upload's bytes in chunks without loading a file source at once."""
        if self.data is not None:
            for start in range(0, len(self.data), chunk_size):
                yield self.data[start : start + chunk_size]
            return

        assert self.source is not None
        async with aiofiles.open(self.source, mode="rb") as f:
            while chunk := await f.read(chunk_size):
                yield chunk

    async def read(self) -> bytes:
        if self.data is not None:
            return self.data
        assert self.source is not None
        async with aiofiles.open(self.source, mode="rb") as f:
            data: bytes = await f.read()
            return data


@dataclass(frozen=True)
class UploadRef:
    """An upload referenced from content, with the folder chosen for it (if any)."""

    upload: Upload
    folder: AssetFolder | None = None


class ChangeAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    MOVE = "move"
    DELETE = "delete"


class FileChange(BaseModel):
    """One file operation of a changeset.

    ``data`` is the encoded file content, or the upload to store for assets.
    ``previous_path`` is set for moves (and mirrors ``path`` for deletes).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    action: ChangeAction
    path: str
    previous_path: str | None = None
    data: str | bytes | Upload | None = None

    @property
    def writes(self) -> bool:
        return self.action != ChangeAction.DELETE


class LocalizedEntry(BaseModel):
    slug: str
    path: str
    content: dict[str, Any] = Field(default_factory=dict)


class Entry(BaseModel):
    """A persisted content item.

    ``id`` is minted once and kept across every later edit.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    slug: str
    sub_path: str
    locales: dict[str, LocalizedEntry] = Field(default_factory=dict)
    collection_name: str | None = None
    file_name: str | None = None
    sha: str | None = None
    commit_author: str | None = None
    commit_date: datetime | None = None


class Asset(BaseModel):
    """A persisted binary attachment."""

    name: str
    path: str
    sha: str
    size: int
    kind: AssetKind
    folder: AssetFolder
    collection_name: str | None = None
    token: str | None = Field(default=None, description="Reference token replaced on save")
    commit_author: str | None = None
    commit_date: datetime | None = None

    @property
    def is_media(self) -> bool:
        return self.kind in MEDIA_KINDS


@dataclass
class Draft:
    """An in-progress edit of one entry, across every locale.

    Values are flattened per locale (``{"author.name": "Jo", "tags.0": "a"}``).
    ``original_*`` attributes hold the state when editing started and are
    empty for new entries.

    Attributes:
        site: Site configuration
        target: Collection (or collection file) the entry belongs to
        is_new: Whether the entry is being created
        is_index_file: Whether the entry is the collection's index file
        original_entry: Entry being edited
        current_locales: Locales enabled now
        original_locales: Locales enabled when editing started
        current_values: Flattened content per locale
        original_values: Flattened content per locale when editing started
        current_slugs: Slugs typed in by the user, per locale (``_`` for all)
        files: Pending uploads by reference token
        validation_errors: Invalid key-paths per locale, found by the editor
    """

    site: SiteConfig
    target: ResolvedCollection
    is_new: bool = True
    is_index_file: bool = False
    original_entry: Entry | None = None
    current_locales: dict[str, bool] = field(default_factory=dict)
    original_locales: dict[str, bool] = field(default_factory=dict)
    current_values: dict[str, FlatContent] = field(default_factory=dict)
    original_values: dict[str, FlatContent] = field(default_factory=dict)
    current_slugs: dict[str, str] = field(default_factory=dict)
    files: dict[str, UploadRef] = field(default_factory=dict)
    validation_errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def collection_name(self) -> str:
        return self.target.name

    @property
    def file_name(self) -> str | None:
        return self.target.file_name

    @property
    def fields(self) -> list[FieldDef]:
        return self.target.fields_for(self.is_index_file)

    @property
    def default_locale(self) -> str:
        return self.target.i18n.default_locale

    def is_valid(self) -> bool:
        return not any(self.validation_errors.values())


@dataclass(frozen=True)
class SlugVariants:
    """Slugs chosen for a save.

    Attributes:
        default_locale_slug: Slug of the default locale, used for the entry itself
        localized_slugs: Per-locale slugs when the slug template is localized
        canonical_slug: Cross-locale identity value injected into every locale
    """

    default_locale_slug: str
    localized_slugs: dict[str, str] | None = None
    canonical_slug: str | None = None

    def for_locale(self, locale: str) -> str:
        if self.localized_slugs is not None and locale in self.localized_slugs:
            return self.localized_slugs[locale]
        return self.default_locale_slug


@dataclass
class SavingEntryData:
    """Everything produced for one save, before it is committed."""

    entry: Entry
    assets: list[Asset] = field(default_factory=list)
    changes: list[FileChange] = field(default_factory=list)


class CommitOptions(BaseModel):
    commit_type: Literal["create", "update", "delete"]
    collection: str | None = None
    skip_ci: bool | None = None
