"""Local filesystem commit backend.

Writes go through a temp file in the target directory followed by
``os.replace()``, so a reader never sees a half-written file.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from inkstone.core.assets.hashing import git_blob_sha
from inkstone.core.backends._data import change_bytes
from inkstone.core.backends.protocols import CommitConflictError, CommitResult, CommittedFile
from inkstone.core.drafts.models import ChangeAction, CommitOptions, FileChange

logger = logging.getLogger(__name__)


class LocalBackend:
    """Commit backend writing directly into a working directory (not Git)."""

    def __init__(self, root: Path | str, *, author: str | None = None) -> None:
        self.root = Path(root).resolve()
        self.author = author

    @property
    def is_git(self) -> bool:
        return False

    def join(self, path: str) -> Path:
        """Resolve a repository path under the root.

        Raises:
            ValueError: If the path escapes the root
        """
        result = self.root.joinpath(*path.split("/")).resolve()
        try:
            result.relative_to(self.root)
        except ValueError as e:
            raise ValueError(f"Path traversal detected: {path} escapes {self.root}") from e
        return result

    async def _check(self, change: FileChange) -> None:
        target = self.join(change.path)
        if change.action == ChangeAction.MOVE:
            previous = change.previous_path or change.path
            if not await aiofiles.os.path.isfile(self.join(previous)):
                raise CommitConflictError(previous, "file to move does not exist")
        elif change.action in (ChangeAction.UPDATE, ChangeAction.DELETE):
            if not await aiofiles.os.path.isfile(target):
                raise CommitConflictError(change.path, "file does not exist")

    async def _write(self, path: Path, data: bytes) -> None:
        await aiofiles.os.makedirs(path.parent, exist_ok=True)
        loop = asyncio.get_running_loop()

        def create_temp_file() -> str:
            tmp = NamedTemporaryFile(mode="wb", dir=path.parent, delete=False)
            tmp_path = tmp.name
            tmp.close()
            return tmp_path

        tmp_path = await loop.run_in_executor(None, create_temp_file)
        try:
            async with aiofiles.open(tmp_path, mode="wb") as f:
                await f.write(data)
            await loop.run_in_executor(None, os.replace, tmp_path, str(path))
        except Exception:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.unlink(tmp_path)
            raise

    async def commit(self, changes: Sequence[FileChange], options: CommitOptions) -> CommitResult:
        """Write the changes under the root directory.

        Every change is checked before the first write.

        Raises:
            CommitConflictError: If a file to update, move or delete is missing
            ValueError: If a path escapes the root directory
        """
        for change in changes:
            await self._check(change)

        files: list[CommittedFile | None] = []
        for change in changes:
            target = self.join(change.path)
            if not change.writes:
                await aiofiles.os.unlink(target)
                files.append(None)
                continue

            data = await change_bytes(change)
            await self._write(target, data)
            moved_from = change.previous_path
            if change.action == ChangeAction.MOVE and moved_from not in (None, change.path):
                await aiofiles.os.unlink(self.join(moved_from or ""))
            files.append(CommittedFile(path=change.path, sha=git_blob_sha(data), size=len(data)))

        logger.debug("Wrote %d changes under %s (%s)", len(changes), self.root, options.commit_type)
        return CommitResult(author=self.author, date=datetime.now(UTC), files=files)
