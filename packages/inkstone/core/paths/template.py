"""Template expansion for slugs, entry paths and media folders.

Templates contain ``{{tag}}`` placeholders, optionally followed by pipe
transformations: ``{{title | lower | truncate(20)}}``. The tag set is closed:

- ``slug``: the current slug, or the entry summary when there is none
- ``locale``: the target locale (preview paths only)
- ``year``, ``month``, ``day``, ``hour``, ``minute``, ``second``: UTC time parts
- ``uuid``, ``uuid_short``, ``uuid_shorter``: random identifiers
- ``dirname``, ``filename``, ``extension``: parts of the entry file path
  (media folder and preview path templates only)
- ``fields.<key-path>`` or a bare ``<key-path>``: a value from the entry content
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from inkstone.core.config.models import SlugConfig
from inkstone.core.errors import TemplateError
from inkstone.core.paths.slug import rename_if_needed, short_id, slugify

logger = logging.getLogger(__name__)

# The lookahead keeps `{{a | default('{{b}}')}}` in one placeholder
_TEMPLATE_RE = re.compile(r"{{(.+?)}}(?!'\))")
_PIPE_RE = re.compile(r"\s*\|\s*")
_DEFAULT_RE = re.compile(r"^default\('(?P<value>.*?)'\)$")
_TERNARY_RE = re.compile(r"^ternary\('(?P<truthy>.*?)',\s*'(?P<falsy>.*?)'\)$")
_TRUNCATE_RE = re.compile(r"^truncate\((?P<max>\d+)(?:,\s*'(?P<ellipsis>.+?)')?\)$")
_INNER_TAG_RE = re.compile(r"^{{(?P<tag>.+?)}}$")
_MARKDOWN_HEADER_RE = re.compile(r"^#+\s+(?P<header>.+?)(?:\s+\{#.+?\})?\s*$", re.MULTILINE)

_DATE_TIME_TAGS = ("year", "month", "day", "hour", "minute", "second")
_UUID_TAGS = {"uuid": "full", "uuid_short": "short", "uuid_shorter": "shorter"}
_FILE_PATH_TAGS = ("dirname", "filename", "extension")

# Marks a slug template field as per-locale; has no effect on the value
LOCALIZE_TRANSFORMATION = "localize"


class TemplateType(str, Enum):
    """What a filled template is used for."""

    SLUG = "slug"
    MEDIA_FOLDER = "media_folder"
    PREVIEW_PATH = "preview_path"


@dataclass(frozen=True)
class TemplateContext:
    """Values available to template placeholders.

    Attributes:
        content: Flattened entry content of one locale
        type: Slug templates slugify substituted values; path templates keep them
        current_slug: Slug already chosen for the entry, if any
        locale: Target locale
        entry_file_path: Path of the entry file (media folder and preview templates)
        base_path: Collection folder, removed from ``entry_file_path`` for ``dirname``
        identifier_field: Field used as the entry summary
        is_index_file: Whether the entry is the collection's index file
        slug_config: Slug options
        existing_slugs: Slugs of other entries; new slugs are made unique against them
        now: Time used for date tags; the current UTC time when omitted
    """

    content: Mapping[str, Any] = field(default_factory=dict)
    type: TemplateType = TemplateType.SLUG
    current_slug: str | None = None
    locale: str | None = None
    entry_file_path: str | None = None
    base_path: str | None = None
    identifier_field: str = "title"
    is_index_file: bool = False
    slug_config: SlugConfig = field(default_factory=SlugConfig)
    existing_slugs: Sequence[str] = ()
    now: datetime | None = None


def get_entry_summary(content: Mapping[str, Any], identifier_field: str = "title") -> str:
    """Title-like summary of an entry: the identifier field or a Markdown header in ``body``."""
    for name in (identifier_field, "title", "name", "label"):
        value = content.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()

    body = content.get("body")
    if isinstance(body, str):
        match = _MARKDOWN_HEADER_RE.search(body)
        return match.group("header") if match else ""

    return ""


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _date_time_parts(now: datetime | None) -> dict[str, str]:
    now = (now or datetime.now(UTC)).astimezone(UTC)
    return {
        "year": f"{now.year:04d}",
        "month": f"{now.month:02d}",
        "day": f"{now.day:02d}",
        "hour": f"{now.hour:02d}",
        "minute": f"{now.minute:02d}",
        "second": f"{now.second:02d}",
    }


def _file_path_tag(tag: str, context: TemplateContext) -> str:
    path = context.entry_file_path
    if not path:
        return ""

    if tag == "dirname":
        after_base = path.replace(context.base_path or "", "", 1)
        index = after_base.rfind("/")
        return after_base[:index] if index > 0 else ""

    file_name = path.rsplit("/", 1)[-1]
    if tag == "filename":
        return file_name.split(".", 1)[0]
    return file_name.rsplit(".", 1)[-1]


def _replace_tag(tag: str, context: TemplateContext, parts: Mapping[str, str]) -> Any:
    if tag in _DATE_TIME_TAGS:
        return parts[tag]

    if tag == "slug" and context.current_slug:
        # Index files have no slug segment in their preview URL
        if context.type == TemplateType.PREVIEW_PATH and context.is_index_file:
            return ""
        return context.current_slug

    if tag in _UUID_TAGS:
        return short_id(_UUID_TAGS[tag])

    if context.type == TemplateType.PREVIEW_PATH and tag == "locale":
        return context.locale

    if context.type != TemplateType.SLUG and tag in _FILE_PATH_TAGS:
        return _file_path_tag(tag, context)

    if tag.startswith("fields."):
        return context.content.get(tag[len("fields.") :])

    if tag == "slug":
        return get_entry_summary(context.content, context.identifier_field)

    return context.content.get(tag)


def _truncate(value: str, max_length: int, ellipsis: str) -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length] + ellipsis


def _apply_transformation(value: Any, transformation: str, template: str) -> Any:
    if transformation == "upper":
        return _to_string(value).upper()

    if transformation == "lower":
        return _to_string(value).lower()

    if transformation == LOCALIZE_TRANSFORMATION:
        return value

    if match := _DEFAULT_RE.match(transformation):
        return value if value not in (None, "") else match.group("value")

    if match := _TERNARY_RE.match(transformation):
        return match.group("truthy") if value else match.group("falsy")

    if match := _TRUNCATE_RE.match(transformation):
        ellipsis = match.group("ellipsis")
        return _truncate(
            _to_string(value), int(match.group("max")), "…" if ellipsis is None else ellipsis
        )

    raise TemplateError(
        f"Unknown transformation {transformation!r}", template=template, placeholder=transformation
    )


def _replace_placeholder(
    placeholder: str, template: str, context: TemplateContext, parts: Mapping[str, str]
) -> str:
    tag, *transformations = _PIPE_RE.split(placeholder.strip())
    if not tag:
        raise TemplateError("Empty template tag", template=template, placeholder=placeholder)

    value = _replace_tag(tag, context, parts)
    has_default = False

    for index, transformation in enumerate(transformations):
        match = _DEFAULT_RE.match(transformation)
        if match is None:
            continue
        has_default = True
        # `default('{{fields.title}}')` falls back to another tag
        inner = _INNER_TAG_RE.match(match.group("value"))
        if inner is not None:
            inner_value = _to_string(_replace_tag(inner.group("tag"), context, parts))
            transformations[index] = f"default('{inner_value}')"

    if value is None and not has_default:
        return short_id()

    for transformation in transformations:
        value = _apply_transformation(value, transformation, template)

    if context.type != TemplateType.SLUG:
        return _to_string(value)

    # Length is limited on the whole slug afterwards
    return slugify(_to_string(value), context.slug_config)


def fill_template(template: str, context: TemplateContext) -> str:
    """Expand every placeholder in a template.

    Args:
        template: Template such as ``{{year}}-{{month}}-{{slug}}``
        context: Values available to placeholders

    Returns:
        Filled string. For slug templates it is truncated to the configured
        maximum length and, unless ``current_slug`` is given, made unique
        against ``existing_slugs``.

    Raises:
        TemplateError: If a placeholder is empty or uses an unknown transformation

    Example:
        >>> fill_template("{{year}}-{{title}}", TemplateContext(content={"title": "Hi there"}))
        '2026-hi-there'
    """
    parts = _date_time_parts(context.now)

    def replace(match: re.Match[str]) -> str:
        return _replace_placeholder(match.group(1), template, context, parts)

    result = _TEMPLATE_RE.sub(replace, template).strip()

    if context.type != TemplateType.SLUG:
        return result

    max_length = context.slug_config.maxlength
    if max_length is not None:
        result = result[:max_length].removesuffix("-")

    if context.current_slug:
        return result

    logger.debug("Filled slug template %r -> %r", template, result)
    return rename_if_needed(result, [s for s in context.existing_slugs if s])


def get_localized_key_paths(template: str) -> list[str]:
    """Key-paths whose placeholders carry the ``localize`` transformation.

    Example:
        >>> get_localized_key_paths("{{fields.title | localize}}-{{id}}")
        ['title']
    """
    key_paths: list[str] = []
    for match in _TEMPLATE_RE.finditer(template):
        tag, *transformations = _PIPE_RE.split(match.group(1).strip())
        if LOCALIZE_TRANSFORMATION in transformations:
            key_paths.append(tag.removeprefix("fields."))
    return key_paths


def uses_localized_fields(template: str) -> bool:
    """Whether any placeholder in a slug template carries the ``localize`` transformation."""
    return bool(get_localized_key_paths(template))
