"""Tests for upload token extraction."""

from __future__ import annotations

from pathlib import Path

import pytest

from inkstone.core.assets import AssetKind, git_blob_sha
from inkstone.core.config.folders import normalize_asset_folder
from inkstone.core.drafts import (
    AssetExtractor,
    ChangeAction,
    Upload,
    UploadRef,
    create_upload_token,
)
from inkstone.core.drafts.assets import UPLOAD_TOKEN_RE
from inkstone.core.errors import AssetProcessingError
from inkstone.core.store import AssetStore

from tests.conftest import build_asset, build_draft


def extractor_for(site, files: dict[str, UploadRef], **kwargs) -> AssetExtractor:
    draft = build_draft(site, {"_default": {"title": "Hello"}}, files=files)
    return AssetExtractor(draft, "hello", **kwargs)


def upload(name: str = "photo.png", data: bytes = b"png-bytes") -> UploadRef:
    return UploadRef(upload=Upload(name=name, data=data))


class TestCreateUploadToken:
    def test_plain(self):
        assert UPLOAD_TOKEN_RE.fullmatch(create_upload_token())

    def test_with_origin(self):
        token = create_upload_token("http://localhost:5173/")
        assert token.startswith("blob:http://localhost:5173/")
        assert UPLOAD_TOKEN_RE.fullmatch(token)


class TestAssetExtractor:
    """Tokens become public URLs and uploads become create changes."""

    async def test_token_replaced_and_staged(self, site):
        token = create_upload_token()
        extractor = extractor_for(site, {token: upload()})
        content = {"image": token, "body": f"![]({token})"}

        await extractor.process(content)

        assert content == {"image": "/uploads/photo.png", "body": "![](/uploads/photo.png)"}
        assert len(extractor.changes) == 1
        change = extractor.changes[0]
        assert change.action == ChangeAction.CREATE
        assert change.path == "static/uploads/photo.png"

        asset = extractor.assets[0]
        assert asset.sha == git_blob_sha(b"png-bytes")
        assert asset.kind == AssetKind.IMAGE
        assert asset.token == token
        assert asset.collection_name == "posts"

    async def test_identical_uploads_deduplicated(self, site):
        first, second = create_upload_token(), create_upload_token()
        extractor = extractor_for(site, {first: upload("a.png"), second: upload("b.png")})
        content = {"a": first, "b": second}

        await extractor.process(content)

        assert len(extractor.assets) == 1
        assert content["a"] == content["b"]

    async def test_identical_uploads_share_first_folder(self, site):
        first, second = create_upload_token(), create_upload_token()
        other = normalize_asset_folder(
            site, media_folder="/static/other", public_folder="/other", base_folder="content/posts"
        )
        files = {
            first: upload("a.png", b"same"),
            second: UploadRef(Upload("b.png", b"same"), other),
        }
        extractor = extractor_for(site, files)
        content = {"a": first, "b": second}

        await extractor.process(content)

        assert [c.path for c in extractor.changes] == ["static/uploads/a.png"]
        assert content == {"a": "/uploads/a.png", "b": "/uploads/a.png"}

    async def test_same_name_different_bytes(self, site):
        first, second = create_upload_token(), create_upload_token()
        extractor = extractor_for(
            site, {first: upload(data=b"one"), second: upload(data=b"two")}
        )

        await extractor.process({"a": first, "b": second})

        assert sorted(a.name for a in extractor.assets) == ["photo-1.png", "photo.png"]

    async def test_stored_names_avoided(self, site):
        token = create_upload_token()
        stored = AssetStore([build_asset("static/uploads/photo.png")])
        extractor = extractor_for(site, {token: upload()}, stored_assets=stored)
        content = {"image": token}

        await extractor.process(content)

        assert content["image"] == "/uploads/photo-1.png"

    async def test_slugified_file_name(self, site):
        site.media_library.slugify_filename = True
        token = create_upload_token()
        extractor = extractor_for(site, {token: upload("My Photo.png")})
        content = {"image": token}

        await extractor.process(content)

        assert content["image"] == "/uploads/my-photo.png"

    async def test_encoded_public_url(self, site):
        site.output.encode_file_path = True
        token = create_upload_token()
        extractor = extractor_for(site, {token: upload("My Photo.png")})
        content = {"image": token}

        await extractor.process(content)

        assert content["image"] == "/uploads/My%20Photo.png"
        assert extractor.changes[0].path == "static/uploads/My Photo.png"

    async def test_entry_relative_folder(self, site):
        folder = normalize_asset_folder(
            site, media_folder="", public_folder="", base_folder="content/posts"
        )
        token = create_upload_token()
        extractor = extractor_for(site, {token: UploadRef(Upload(name="a.png", data=b"x"), folder)})
        content = {"image": token}

        await extractor.process(content)

        assert content["image"] == "a.png"
        assert extractor.changes[0].path == "content/posts/a.png"

    async def test_strings_trimmed_and_other_values_kept(self, site):
        extractor = extractor_for(site, {})
        content = {"title": "  Hi  ", "count": 3, "missing": None, "flag": False}

        await extractor.process(content)

        assert content == {"title": "Hi", "count": 3, "missing": None, "flag": False}

    async def test_unknown_token_untouched(self, site):
        token = create_upload_token()
        extractor = extractor_for(site, {})
        content = {"image": token}

        await extractor.process(content)

        assert content["image"] == token
        assert extractor.changes == []

    async def test_unreadable_upload(self, site, tmp_path: Path):
        token = create_upload_token()
        missing = UploadRef(Upload(name="gone.png", source=tmp_path / "gone.png"))
        extractor = extractor_for(site, {token: missing})

        with pytest.raises(AssetProcessingError) as exc_info:
            await extractor.process({"image": token})

        assert exc_info.value.token == token
        assert extractor.changes == []
