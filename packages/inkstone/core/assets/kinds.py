"""Asset kind detection."""

from __future__ import annotations

import mimetypes
import re
from enum import Enum


class AssetKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    OTHER = "other"


MEDIA_KINDS = frozenset({AssetKind.IMAGE, AssetKind.VIDEO, AssetKind.AUDIO})

DOC_EXTENSION_RE = re.compile(r"\.(?:csv|docx?|odp|ods|odt|pdf|pptx?|rtf|xslx?)$", re.IGNORECASE)


def get_asset_kind(name: str) -> AssetKind:
    """Guess an asset's kind from its file name.

    Example:
        >>> get_asset_kind("photo.JPG")
        <AssetKind.IMAGE: 'image'>
        >>> get_asset_kind("report.pdf")
        <AssetKind.DOCUMENT: 'document'>
    """
    mime_type, _ = mimetypes.guess_type(name.lower(), strict=False)
    if mime_type:
        major = mime_type.split("/", 1)[0]
        if major in (AssetKind.IMAGE.value, AssetKind.VIDEO.value, AssetKind.AUDIO.value):
            return AssetKind(major)

    if DOC_EXTENSION_RE.search(name):
        return AssetKind.DOCUMENT

    return AssetKind.OTHER
