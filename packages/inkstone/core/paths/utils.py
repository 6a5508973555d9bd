"""Path helpers for repository-relative paths.

Paths are always POSIX style, relative to the repository root and never start
with a slash.
"""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import quote


def strip_slashes(path: str) -> str:
    """Remove leading and trailing slashes."""
    return path.strip("/")


def create_path(segments: Iterable[str | None]) -> str:
    """Join path segments, skipping empty ones.

    Example:
        >>> create_path(["content", "", None, "posts", "hello.md"])
        'content/posts/hello.md'
    """
    return "/".join(segment for segment in segments if segment)


def resolve_path(path: str) -> str:
    """Collapse ``.`` and ``..`` segments that follow a named segment.

    Leading dot segments are kept so relative public URLs survive.

    Example:
        >>> resolve_path("foo/bar/baz/../../image.jpg")
        'foo/image.jpg'
        >>> resolve_path("../../foo/image.jpg")
        '../../foo/image.jpg'
    """
    segments: list[str | None] = list(path.split("/"))
    name_found = False

    for index, segment in enumerate(segments):
        if segment in (".", ".."):
            if not name_found:
                continue
            segments[index] = None
            if segment == "..":
                for previous in range(index - 1, -1, -1):
                    if segments[previous]:
                        segments[previous] = None
                        break
        else:
            name_found = True

    return create_path(segments)


def encode_file_path(path: str) -> str:
    """Percent-encode each segment of a path, keeping slashes.

    Characters that affect Markdown link syntax (``!'()*``) are encoded too.
    A leading ``@`` (framework alias prefix) is left as is.
    """
    prefix = ""
    if path.startswith("@"):
        prefix, path = "@", path[1:]
    # Unreserved characters other than `-_.~` are encoded
    return prefix + "/".join(quote(segment, safe="") for segment in path.split("/"))


def get_dirname(path: str) -> str:
    """Directory part of a path, or an empty string for a bare file name."""
    head, _, _ = path.rpartition("/")
    return head


def split_file_name(name: str) -> tuple[str, str]:
    """Split a file name into stem and extension at the last dot.

    Example:
        >>> split_file_name("photo.final.jpg")
        ('photo.final', 'jpg')
        >>> split_file_name("README")
        ('README', '')
    """
    stem, dot, extension = name.rpartition(".")
    if not dot or not stem:
        return name, ""
    return stem, extension
