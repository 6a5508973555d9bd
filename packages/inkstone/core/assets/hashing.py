"""Content hashing for assets.

Assets are addressed by their Git blob hash so a hash computed before a
commit matches the ``sha`` a Git backend reports afterwards.
"""

from __future__ import annotations

import hashlib
from collections.abc import AsyncIterable

DEFAULT_CHUNK_SIZE = 1024 * 1024


def git_blob_header(size: int) -> bytes:
    return f"blob {size}\0".encode()


def git_blob_sha(data: bytes) -> str:
    """Git blob SHA-1 of in-memory data.

    Example:
        >>> git_blob_sha(b"")
        'e69de29bb2d1d6434b8b29ae775ad8c2e48c5391'
    """
    digest = hashlib.sha1(git_blob_header(len(data)))
    digest.update(data)
    return digest.hexdigest()


async def git_blob_sha_stream(chunks: AsyncIterable[bytes], size: int) -> str:
    """Git blob SHA-1 of an asynchronous chunk stream.

    The data is hashed incrementally and never held in memory as a whole.

    Raises:
        ValueError: If the stream length does not match ``size``
    """
    digest = hashlib.sha1(git_blob_header(size))
    read = 0
    async for chunk in chunks:
        digest.update(chunk)
        read += len(chunk)
    if read != size:
        raise ValueError(f"Expected {size} bytes, read {read}")
    return digest.hexdigest()
