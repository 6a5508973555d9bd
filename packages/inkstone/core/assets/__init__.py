"""Asset kinds and content hashing."""

from inkstone.core.assets.hashing import (
    DEFAULT_CHUNK_SIZE,
    git_blob_sha,
    git_blob_sha_stream,
)
from inkstone.core.assets.kinds import MEDIA_KINDS, AssetKind, get_asset_kind

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "MEDIA_KINDS",
    "AssetKind",
    "get_asset_kind",
    "git_blob_sha",
    "git_blob_sha_stream",
]
