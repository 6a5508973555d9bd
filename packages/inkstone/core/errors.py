"""Exceptions raised while turning drafts into commits."""

from __future__ import annotations

from collections.abc import Mapping, Sequence


class ContentError(Exception):
    """Base exception for all content pipeline errors."""


class TemplateError(ContentError, ValueError):
    """A template placeholder or transformation could not be parsed."""

    def __init__(self, message: str, *, template: str, placeholder: str | None = None) -> None:
        super().__init__(message)
        self.template = template
        self.placeholder = placeholder


class EntryValidationError(ContentError):
    """The draft failed validation; nothing was written.

    Attributes:
        errors: Invalid key-paths per locale
    """

    def __init__(self, errors: Mapping[str, Sequence[str]]) -> None:
        self.errors = {locale: list(paths) for locale, paths in errors.items()}
        summary = ", ".join(
            f"{locale}: {', '.join(paths)}" for locale, paths in self.errors.items() if paths
        )
        super().__init__(f"Entry has invalid fields ({summary})")


class AssetProcessingError(ContentError):
    """An embedded upload could not be read or hashed."""

    def __init__(self, token: str, cause: BaseException) -> None:
        super().__init__(f"Failed to process upload {token!r}: {cause}")
        self.token = token
        self.cause = cause


class EntrySaveError(ContentError):
    """The commit backend rejected or failed to apply the changeset.

    Attributes:
        cause: Original exception raised by the backend
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class UnsupportedFormatError(ContentError):
    """No serializer is available for a file format, or it cannot hold the content."""

    def __init__(self, format: str, reason: str | None = None) -> None:
        message = f"Unsupported file format: {format}"
        super().__init__(f"{message} ({reason})" if reason else message)
        self.format = format
        self.reason = reason
