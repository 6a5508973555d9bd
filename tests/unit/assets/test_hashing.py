"""Tests for Git blob hashing."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from inkstone.core.assets import git_blob_sha, git_blob_sha_stream
from inkstone.core.drafts.models import Upload

EMPTY_SHA = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
HELLO_SHA = "ce013625030ba8dba906f756967f9e9ca394464a"


async def chunked(*chunks: bytes) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


class TestGitBlobSha:
    def test_empty(self):
        assert git_blob_sha(b"") == EMPTY_SHA

    def test_matches_git_hash_object(self):
        assert git_blob_sha(b"hello\n") == HELLO_SHA


class TestGitBlobShaStream:
    """Streaming hashes equal in-memory hashes regardless of chunking."""

    async def test_chunked(self):
        assert await git_blob_sha_stream(chunked(b"hel", b"lo", b"\n"), 6) == HELLO_SHA

    async def test_empty_stream(self):
        assert await git_blob_sha_stream(chunked(), 0) == EMPTY_SHA

    async def test_size_mismatch(self):
        with pytest.raises(ValueError, match="Expected 10 bytes, read 6"):
            await git_blob_sha_stream(chunked(b"hello\n"), 10)

    async def test_upload_from_bytes(self):
        upload = Upload(name="a.txt", data=b"hello\n")
        assert await git_blob_sha_stream(upload.iter_chunks(chunk_size=2), upload.size) == HELLO_SHA

    async def test_upload_from_file(self, tmp_path):
        source = tmp_path / "a.txt"
        source.write_bytes(b"hello\n")
        upload = Upload(name="a.txt", source=source)
        assert await git_blob_sha_stream(upload.iter_chunks(chunk_size=4), upload.size) == HELLO_SHA
