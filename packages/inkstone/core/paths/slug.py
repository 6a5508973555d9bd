"""Slug and file name helpers shared by entry slugs and asset file names."""

from __future__ import annotations

import re
import unicodedata
import uuid
from collections.abc import Iterable

from inkstone.core.config.models import SlugConfig
from inkstone.core.paths.utils import split_file_name

# Space, control, delimiter, reserved and unwise characters
_UNICODE_DISALLOWED = frozenset("!\"#$&'()*+,/:;<=>?@[]^`{|}")
_ASCII_DISALLOWED_RE = re.compile(r"[^\w\-~]", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")

_ILLEGAL_FILE_CHARS_RE = re.compile(r'[/\\?<>:*|"\x00-\x1f\x80-\x9f]')
_RESERVED_FILE_NAME_RE = re.compile(r"^\.+$")
_WINDOWS_RESERVED_RE = re.compile(r"^(con|prn|aux|nul|com\d|lpt\d)(\..*)?$", re.IGNORECASE)
_MAX_FILE_NAME_LENGTH = 255


def short_id(kind: str = "short") -> str:
    """Random identifier: a full UUID, its last group (``short``) or first group (``shorter``)."""
    value = str(uuid.uuid4())
    if kind == "short":
        return value.rsplit("-", 1)[-1]
    if kind == "shorter":
        return value.split("-", 1)[0]
    return value


def _is_unicode_disallowed(char: str) -> bool:
    return char in _UNICODE_DISALLOWED or unicodedata.category(char)[0] in ("Z", "C")


def _clean_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(c for c in decomposed if unicodedata.category(c) != "Mn")


def slugify(value: str, config: SlugConfig | None = None, *, fallback: bool = True) -> str:
    """Turn a string into a slug usable as a URL segment or file name.

    Args:
        value: Source string, e.g. an entry title
        config: Slug options; defaults to unicode encoding with ``-`` replacement
        fallback: Return a short random id instead of an empty slug

    Returns:
        Lowercase slug

    Example:
        >>> slugify("Hello, World!")
        'hello-world'
    """
    config = config or SlugConfig()
    replacement = config.sanitize_replacement
    slug = value

    if config.clean_accents:
        slug = _clean_accents(slug)

    if config.encoding == "ascii":
        slug = _ASCII_DISALLOWED_RE.sub(" ", slug)
    else:
        slug = "".join(" " if _is_unicode_disallowed(c) else c for c in slug)

    slug = _WHITESPACE_RE.sub(replacement, slug.lower().strip())

    if replacement:
        escaped = re.escape(replacement)
        slug = re.sub(f"(?:{escaped})+", replacement, slug)
        if config.trim:
            slug = re.sub(f"^(?:{escaped})+|(?:{escaped})+$", "", slug)

    if not slug and fallback:
        return short_id()

    return slug


def sanitize_file_name(name: str) -> str:
    """Remove characters that are not allowed in file names on common platforms."""
    name = _ILLEGAL_FILE_CHARS_RE.sub("", unicodedata.normalize("NFC", name))
    if _RESERVED_FILE_NAME_RE.match(name) or _WINDOWS_RESERVED_RE.match(name):
        return ""
    return name.rstrip(". ")[:_MAX_FILE_NAME_LENGTH]


def rename_if_needed(name: str, other_names: Iterable[str]) -> str:
    """Add (or bump) a ``-N`` suffix so ``name`` does not clash with ``other_names``.

    Example:
        >>> rename_if_needed("test.jpg", ["test.jpg", "test-1.jpg"])
        'test-2.jpg'
        >>> rename_if_needed("hello", ["hello"])
        'hello-1'
    """
    others = list(other_names)
    if not others:
        return name

    stem, extension = split_file_name(name)
    suffix = f".{extension}" if extension else ""
    pattern = re.compile(rf"^{re.escape(stem)}(?:-(?P<num>\d+))?{re.escape(suffix)}$")

    matches = [m for m in (pattern.match(other) for other in others) if m]
    if not matches:
        return name

    highest = max(int(m.group("num") or 0) for m in matches)
    return f"{stem}-{highest + 1}{suffix}"


def format_file_name(
    name: str,
    *,
    slugify_name: bool = False,
    other_names: Iterable[str] = (),
    config: SlugConfig | None = None,
) -> str:
    """Sanitize an upload's file name, optionally slugify it, and make it unique.

    Example:
        >>> format_file_name("My Test File.jpg", slugify_name=True)
        'my-test-file.jpg'
    """
    name = sanitize_file_name(name.strip())

    if slugify_name:
        stem, extension = split_file_name(name)
        stem = slugify(stem, config)
        name = f"{stem}.{extension}" if extension else stem

    return rename_if_needed(name, other_names)
