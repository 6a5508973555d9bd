"""Dict-backed commit backend that behaves like a Git repository."""

from __future__ import annotations

import asyncio
import hashlib
import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from inkstone.core.assets.hashing import git_blob_sha
from inkstone.core.backends._data import change_bytes
from inkstone.core.backends.protocols import CommitConflictError, CommitResult, CommittedFile
from inkstone.core.drafts.models import ChangeAction, CommitOptions, FileChange

logger = logging.getLogger(__name__)


class InMemoryBackend:
    """In-memory repository.

    Commits are validated against the current tree before anything is
    applied: ``update``, ``move`` and ``delete`` need an existing file,
    ``create`` and the destination of a ``move`` need a free path.

    Example:
        >>> backend = InMemoryBackend({"content/posts/a.md": b"..."})
        >>> result = await backend.commit(changes, CommitOptions(commit_type="update"))
        >>> backend.read_text("content/posts/a.md")
    """

    def __init__(
        self,
        files: Mapping[str, bytes | str] | None = None,
        *,
        author: str = "inkstone",
        is_git: bool = True,
    ) -> None:
        self.files: dict[str, bytes] = {
            path: data.encode("utf-8") if isinstance(data, str) else data
            for path, data in (files or {}).items()
        }
        self.author = author
        self.commits: list[tuple[CommitOptions, list[FileChange]]] = []
        self._is_git = is_git
        self._lock = asyncio.Lock()

    @property
    def is_git(self) -> bool:
        return self._is_git

    def read_text(self, path: str) -> str:
        return self.files[path].decode("utf-8")

    def _apply(self, tree: dict[str, bytes], change: FileChange, data: bytes) -> None:
        path = change.path
        match change.action:
            case ChangeAction.CREATE:
                if path in tree:
                    raise CommitConflictError(path, "file already exists")
                tree[path] = data
            case ChangeAction.UPDATE:
                if path not in tree:
                    raise CommitConflictError(path, "file does not exist")
                tree[path] = data
            case ChangeAction.MOVE:
                previous = change.previous_path
                if previous is None or previous not in tree:
                    raise CommitConflictError(previous or path, "file to move does not exist")
                if path in tree and path != previous:
                    raise CommitConflictError(path, "move destination already exists")
                del tree[previous]
                tree[path] = data
            case ChangeAction.DELETE:
                if path not in tree:
                    raise CommitConflictError(path, "file does not exist")
                del tree[path]

    async def commit(self, changes: Sequence[FileChange], options: CommitOptions) -> CommitResult:
        """Apply the changes to a copy of the tree, then swap it in.

        Raises:
            CommitConflictError: If a change does not apply; nothing is written
        """
        async with self._lock:
            tree = dict(self.files)
            files: list[CommittedFile | None] = []
            digest = hashlib.sha1()

            for change in changes:
                data = await change_bytes(change) if change.writes else b""
                self._apply(tree, change, data)
                if change.writes:
                    sha = git_blob_sha(data)
                    files.append(CommittedFile(path=change.path, sha=sha, size=len(data)))
                    digest.update(f"{change.action.value} {change.path} {sha}\n".encode())
                else:
                    files.append(None)
                    digest.update(f"{change.action.value} {change.path}\n".encode())

            self.files = tree
            self.commits.append((options, list(changes)))

        logger.debug(
            "Committed %d changes (%s, collection=%s)",
            len(changes),
            options.commit_type,
            options.collection,
        )
        return CommitResult(
            sha=digest.hexdigest(),
            author=self.author,
            date=datetime.now(UTC),
            files=files,
        )
