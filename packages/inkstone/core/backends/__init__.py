"""Commit backends: where a changeset is finally written."""

from inkstone.core.backends.local import LocalBackend
from inkstone.core.backends.memory import InMemoryBackend
from inkstone.core.backends.protocols import (
    CommitBackend,
    CommitConflictError,
    CommitResult,
    CommittedFile,
)

__all__ = [
    "CommitBackend",
    "CommitConflictError",
    "CommitResult",
    "CommittedFile",
    "InMemoryBackend",
    "LocalBackend",
]
