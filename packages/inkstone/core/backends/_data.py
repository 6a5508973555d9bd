"""Helpers shared by the commit backends."""

from __future__ import annotations

from inkstone.core.drafts.models import FileChange, Upload


async def change_bytes(change: FileChange) -> bytes:
    """Bytes written by a change: encoded text, raw bytes, or an upload's content."""
    data = change.data
    if data is None:
        return b""
    if isinstance(data, Upload):
        return await data.read()
    if isinstance(data, str):
        return data.encode("utf-8")
    return data
