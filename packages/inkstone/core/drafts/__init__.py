"""Drafts and the pipeline that turns them into changesets.

Save orchestration lives in ``inkstone.core.drafts.save``; it depends on the
backends and stores, which depend on these models, so it is not re-exported
here.
"""

from inkstone.core.drafts.models import (
    Asset,
    ChangeAction,
    CommitOptions,
    Draft,
    Entry,
    FileChange,
    FlatContent,
    LocalizedEntry,
    SavingEntryData,
    SlugVariants,
    Upload,
    UploadRef,
)
from inkstone.core.drafts.slugs import get_slugs
from inkstone.core.drafts.assets import AssetExtractor, create_upload_token
from inkstone.core.drafts.changes import create_saving_entry_data

__all__ = [
    # Models
    "Asset",
    "ChangeAction",
    "CommitOptions",
    "Draft",
    "Entry",
    "FileChange",
    "FlatContent",
    "LocalizedEntry",
    "SavingEntryData",
    "SlugVariants",
    "Upload",
    "UploadRef",
    # Pipeline
    "AssetExtractor",
    "create_saving_entry_data",
    "create_upload_token",
    "get_slugs",
]
