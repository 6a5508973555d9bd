"""Asset folder descriptors.

A descriptor tells the asset extractor where an upload is stored in the
repository (``internal_path``) and how the stored file is referenced from
content (``public_path``). A media folder that does not start with ``/`` is
relative to the entry file (``entry_relative``).
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from inkstone.core.config.collections import ResolvedCollection
from inkstone.core.config.models import SiteConfig
from inkstone.core.fields.models import MediaField
from inkstone.core.paths.utils import get_dirname, strip_slashes


class AssetFolder(BaseModel):
    """Where uploads for a collection, file or field are stored."""

    model_config = ConfigDict(frozen=True)

    collection_name: str | None = None
    file_name: str | None = None
    internal_path: str = ""
    internal_sub_path: str | None = None
    public_path: str = ""
    entry_relative: bool = False

    @property
    def has_template_tags(self) -> bool:
        return bool(re.search(r"{{.+?}}", f"{self.internal_path}/{self.internal_sub_path or ''}"))


def _global_folders(site: SiteConfig) -> tuple[str, str]:
    # An empty string, `/` and `.` all denote the repository root
    media = strip_slashes(site.media_folder)
    media = "" if media == "." else media
    if site.public_folder:
        public = f"/{strip_slashes(site.public_folder)}"
        public = "@" + public[2:] if public.startswith("/@") else public
    else:
        public = f"/{media}"
    return media, public


def _replace_tags(folder: str, media: str, public: str) -> str:
    return (
        folder.strip()
        .replace("{{media_folder}}", f"/{media}")
        .replace("{{public_folder}}", f"/{public}")
        .replace("//", "/")
    )


def global_asset_folder(site: SiteConfig) -> AssetFolder:
    """Site-wide default folder for uploads."""
    media, public = _global_folders(site)
    return AssetFolder(internal_path=media, public_path=public if media else "")


def normalize_asset_folder(
    site: SiteConfig,
    *,
    media_folder: str,
    public_folder: str | None,
    base_folder: str | None,
    collection_name: str | None = None,
    file_name: str | None = None,
) -> AssetFolder:
    """Build a descriptor from a configured ``media_folder``/``public_folder`` pair."""
    media, public = _global_folders(site)
    media_folder = _replace_tags(media_folder, media, strip_slashes(public))

    if public_folder is None:
        public_folder = media_folder
    else:
        public_folder = _replace_tags(public_folder, media, strip_slashes(public))

    entry_relative = not media_folder.startswith("/")

    # Keep empty, entry-relative (`.`) and framework-specific (`@`) public paths as is
    if public_folder == "" or public_folder.startswith((".", "@")):
        public_path = public_folder
    else:
        public_path = f"/{strip_slashes(public_folder)}"

    return AssetFolder(
        collection_name=collection_name,
        file_name=file_name,
        internal_path=strip_slashes(base_folder or "") if entry_relative else strip_slashes(
            media_folder
        ),
        internal_sub_path=strip_slashes(media_folder) if entry_relative else None,
        public_path=public_path,
        entry_relative=entry_relative,
    )


def get_asset_folder(
    site: SiteConfig,
    target: ResolvedCollection,
    field: MediaField | None = None,
) -> AssetFolder:
    """Pick the most specific asset folder for uploads into a collection.

    Precedence: field, collection file, collection, then the site-wide folder.
    """
    collection = target.collection
    collection_file = target.collection_file

    if collection_file is not None:
        base_folder = get_dirname(collection_file.file)
    else:
        base_folder = collection.folder

    candidates = [
        (field.media_folder, field.public_folder) if field is not None else (None, None),
        (
            (collection_file.media_folder, collection_file.public_folder)
            if collection_file is not None
            else (None, None)
        ),
        (collection.media_folder, collection.public_folder),
    ]

    for media_folder, public_folder in candidates:
        if media_folder is not None:
            return normalize_asset_folder(
                site,
                media_folder=media_folder,
                public_folder=public_folder,
                base_folder=base_folder,
                collection_name=collection.name,
                file_name=target.file_name,
            )

    return global_asset_folder(site)
