"""Tests for asset kind detection."""

import pytest

from inkstone.core.assets import MEDIA_KINDS, AssetKind, get_asset_kind


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("photo.JPG", AssetKind.IMAGE),
        ("logo.svg", AssetKind.IMAGE),
        ("clip.mp4", AssetKind.VIDEO),
        ("song.mp3", AssetKind.AUDIO),
        ("report.pdf", AssetKind.DOCUMENT),
        ("slides.PPTX", AssetKind.DOCUMENT),
        ("archive.unknownext", AssetKind.OTHER),
        ("README", AssetKind.OTHER),
    ],
)
def test_get_asset_kind(name: str, kind: AssetKind):
    assert get_asset_kind(name) == kind


def test_media_kinds():
    assert AssetKind.IMAGE in MEDIA_KINDS
    assert AssetKind.DOCUMENT not in MEDIA_KINDS
