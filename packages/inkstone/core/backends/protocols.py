"""Protocols and result models for commit backends."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from inkstone.core.drafts.models import CommitOptions, FileChange


class CommitConflictError(Exception):
    """A change does not apply to the current repository state."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class CommittedFile(BaseModel):
    path: str
    sha: str
    size: int


class CommitResult(BaseModel):
    """Outcome of a commit.

    ``files`` has one slot per change in input order: the written blob for
    create, update and move changes, and None for deletes.
    """

    sha: str | None = None
    author: str | None = None
    date: datetime
    files: list[CommittedFile | None] = Field(default_factory=list)

    def file_sha(self, path: str) -> str | None:
        return next((f.sha for f in self.files if f is not None and f.path == path), None)


@runtime_checkable
class CommitBackend(Protocol):
    """Storage that applies a changeset atomically (async-first)."""

    @property
    def is_git(self) -> bool:
        """Whether commits are pushed to a Git repository (and may trigger deployments)."""
        ...

    async def commit(self, changes: Sequence[FileChange], options: CommitOptions) -> CommitResult:
        """Apply every change, or none of them.

        Args:
            changes: File changes in order
            options: Commit type, collection and CI settings

        Returns:
            Commit metadata and the written blobs

        Raises:
            CommitConflictError: If a change does not apply
        """
        ...
