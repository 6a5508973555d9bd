"""Shared pytest fixtures for inkstone tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from inkstone.core.backends import InMemoryBackend
from inkstone.core.config.collections import ResolvedCollection
from inkstone.core.config.models import SiteConfig
from inkstone.core.assets import AssetKind
from inkstone.core.config.folders import AssetFolder
from inkstone.core.drafts.models import Asset, Draft, Entry, LocalizedEntry
from inkstone.core.store import AssetStore, EntryStore, InMemoryDraftBackupStore, StoreSynchronizer

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


# ============================================================================
# Config Fixtures
# ============================================================================

POST_FIELDS: list[dict[str, Any]] = [
    {"name": "title", "widget": "string"},
    {"name": "date", "widget": "datetime", "required": False},
    {"name": "tags", "widget": "list", "required": False},
    {"name": "image", "widget": "image", "required": False},
    {"name": "body", "widget": "markdown"},
]


def build_site(
    *,
    structure: str | None = None,
    locales: list[str] | None = None,
    omit_default_locale: bool = False,
    **collection_overrides: Any,
) -> SiteConfig:
    """Site with a `posts` folder collection and a `pages` file collection."""
    posts: dict[str, Any] = {
        "name": "posts",
        "folder": "content/posts",
        "fields": POST_FIELDS,
        "i18n": structure is not None,
    }
    posts.update(collection_overrides)

    raw: dict[str, Any] = {
        "media_folder": "static/uploads",
        "public_folder": "/uploads",
        "collections": [
            posts,
            {
                "name": "pages",
                "i18n": structure is not None,
                "files": [
                    {
                        "name": "about",
                        "file": "pages/{{locale}}/about.md",
                        "fields": [{"name": "title"}, {"name": "body", "widget": "markdown"}],
                    }
                ],
            },
        ],
    }

    if structure is not None:
        raw["i18n"] = {
            "structure": structure,
            "locales": locales or ["en", "fr"],
            "omit_default_locale_from_file_path": omit_default_locale,
        }

    return SiteConfig.model_validate(raw)


@pytest.fixture
def site() -> SiteConfig:
    """Site without i18n."""
    return build_site()


@pytest.fixture
def make_site() -> Callable[..., SiteConfig]:
    return build_site


# ============================================================================
# Draft Fixtures
# ============================================================================


def build_draft(
    site: SiteConfig,
    values: dict[str, dict[str, Any]],
    *,
    collection: str = "posts",
    file_name: str | None = None,
    original_entry: Entry | None = None,
    locales: dict[str, bool] | None = None,
    original_locales: dict[str, bool] | None = None,
    **kwargs: Any,
) -> Draft:
    target = ResolvedCollection.from_site(site, collection, file_name)
    current_locales = locales if locales is not None else {loc: True for loc in values}
    original_values: dict[str, dict[str, Any]] = {}
    if original_entry is not None:
        original_values = {loc: dict(le.content) for loc, le in original_entry.locales.items()}
        if original_locales is None:
            original_locales = {loc: True for loc in original_entry.locales}
    return Draft(
        site=site,
        target=target,
        is_new=original_entry is None,
        original_entry=original_entry,
        current_locales=current_locales,
        original_locales=original_locales or {},
        current_values=values,
        original_values=original_values,
        **kwargs,
    )


def build_entry(
    slug: str,
    paths: dict[str, str],
    *,
    collection: str = "posts",
    entry_id: str = "entry-1",
) -> Entry:
    """Existing entry with the same slug in every locale."""
    return Entry(
        id=entry_id,
        slug=slug,
        sub_path=slug,
        locales={loc: LocalizedEntry(slug=slug, path=path) for loc, path in paths.items()},
        collection_name=collection,
    )


def build_asset(path: str, *, sha: str = "abc", token: str | None = None) -> Asset:
    """Stored image asset at a repository path."""
    folder, _, name = path.rpartition("/")
    return Asset(
        name=name,
        path=path,
        sha=sha,
        size=3,
        kind=AssetKind.IMAGE,
        folder=AssetFolder(internal_path=folder),
        token=token,
    )


@pytest.fixture
def make_draft() -> Callable[..., Draft]:
    return build_draft


@pytest.fixture
def make_entry() -> Callable[..., Entry]:
    return build_entry


# ============================================================================
# Store / Backend Fixtures
# ============================================================================


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def backups() -> InMemoryDraftBackupStore:
    return InMemoryDraftBackupStore()


@pytest.fixture
def synchronizer(backups: InMemoryDraftBackupStore) -> StoreSynchronizer:
    return StoreSynchronizer(EntryStore(), AssetStore(), backups)
