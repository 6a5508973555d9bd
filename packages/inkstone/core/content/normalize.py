"""Content normalization: schema-ordered serialization of flattened content.

The normalizer takes one locale's flattened content and produces the nested
value handed to a format encoder. Keys follow the field schema order; keys the
schema does not know are appended in natural order, never dropped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from inkstone.core.content.tree import MapNode, build_tree
from inkstone.core.fields.key_path import create_key_path_list, get_field, has_root_list_field
from inkstone.core.fields.models import DateTimeField, FieldDef, KeyValueField
from inkstone.core.utils.sorting import natural_sort_key

if TYPE_CHECKING:
    from inkstone.core.drafts.models import Draft

logger = logging.getLogger(__name__)

# Editor-only identifiers attached to list items
ITEM_ID_SUFFIX = ".__item_id"

FULL_DATE_TIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:\d{2})?$"
)


def is_value_empty(value: Any) -> bool:
    """Whether a value is None, an empty string, an empty list or an empty dict.

    ``False`` and ``0`` are values, not empty.
    """
    return value is None or value == "" or (isinstance(value, (list, dict)) and not value)


class _Copier:
    """Moves keys from the unsorted map into the sorted one, applying the copy policy."""

    def __init__(
        self,
        unsorted: dict[str, Any],
        *,
        locale: str,
        native_dates: bool,
        omit_empty_optional_fields: bool,
    ) -> None:
        self.unsorted = unsorted
        self.sorted: dict[str, Any] = {}
        self.locale = locale
        self.native_dates = native_dates
        self.omit_empty_optional_fields = omit_empty_optional_fields

    def _has_children(self, key: str) -> bool:
        prefix = f"{key}."
        return any(k.startswith(prefix) for k in self.unsorted)

    def copy(self, key: str, field: FieldDef | None = None) -> None:
        if key not in self.unsorted:
            return

        if key.endswith(ITEM_ID_SUFFIX):
            del self.unsorted[key]
            return

        value = self.unsorted[key]

        if (
            self.native_dates
            and isinstance(field, DateTimeField)
            and not field.has_custom_format
            and isinstance(value, str)
            and FULL_DATE_TIME_RE.match(value)
        ):
            try:
                value = datetime.fromisoformat(value)
            except ValueError:
                logger.debug("Keeping unparsable date-time %r at %s", value, key)

        if (
            self.omit_empty_optional_fields
            and field is not None
            and not field.is_required(self.locale)
            and not self._has_children(key)
            and is_value_empty(value)
        ):
            logger.debug("Omitting empty optional field %s", key)
        else:
            self.sorted[key] = value

        del self.unsorted[key]

    def matching(self, pattern: re.Pattern[str]) -> list[str]:
        return sorted((k for k in self.unsorted if pattern.match(k)), key=natural_sort_key)


def _wildcard_source(key_path: str) -> str:
    return "^" + re.escape(key_path).replace(r"\*", r"\d+")


def _wildcard_pattern(key_path: str) -> re.Pattern[str]:
    return re.compile(_wildcard_source(key_path) + "$")


def finalize_content(
    fields: Sequence[FieldDef],
    value_map: Mapping[str, Any],
    *,
    locale: str,
    canonical_slug_key: str | None = None,
    native_dates: bool = False,
    omit_empty_optional_fields: bool = False,
) -> MapNode:
    """Order flattened content by the field schema and rebuild it as a tree.

    Args:
        fields: Field schema of the collection or file
        value_map: Flattened content of one locale (not modified)
        locale: Locale of the content, for per-locale ``required`` settings
        canonical_slug_key: Property moved to the very top when present
        native_dates: Convert ISO date-time strings of datetime fields to ``datetime``
        omit_empty_optional_fields: Drop empty values of non-required fields

    Returns:
        Root map of the ordered content tree
    """
    copier = _Copier(
        dict(value_map),
        locale=locale,
        native_dates=native_dates,
        omit_empty_optional_fields=omit_empty_optional_fields,
    )

    if canonical_slug_key:
        copier.copy(canonical_slug_key)

    for key_path in create_key_path_list(fields):
        field = get_field(fields, key_path, value_map)

        if key_path in copier.unsorted:
            copier.copy(key_path, field)
        elif isinstance(field, KeyValueField):
            # Numeric keys of a key-value map must not become list indexes
            if "*" not in key_path:
                copier.sorted[key_path] = {}
            for child in copier.matching(re.compile(_wildcard_source(key_path) + r"\..+$")):
                copier.copy(child, field)
        else:
            for concrete in copier.matching(_wildcard_pattern(key_path)):
                copier.copy(concrete, field)

    remainder = sorted(copier.unsorted, key=natural_sort_key)
    if remainder:
        logger.debug("Appending %d keys not declared in the schema", len(remainder))
    for key in remainder:
        copier.copy(key)

    def is_map_path(path: str) -> bool:
        return isinstance(get_field(fields, path, value_map), KeyValueField)

    return build_tree(copier.sorted.items(), is_map_path)


def serialize_content(draft: Draft, locale: str, value_map: Mapping[str, Any]) -> Any:
    """Produce the value to encode for one locale of a draft.

    A schema made of a single ``root`` list field is written as a bare list
    in YAML and JSON files. Front matter and TOML keep the field name.
    """
    target = draft.target
    fields = draft.fields
    file = target.file
    # TOML is the only format with native date-times
    is_toml = file.native_dates

    content = finalize_content(
        fields,
        value_map,
        locale=locale,
        canonical_slug_key=target.i18n.canonical_slug.key,
        native_dates=is_toml,
        omit_empty_optional_fields=draft.site.output.omit_empty_optional_fields,
    ).to_plain()

    if not is_toml and not file.is_front_matter and has_root_list_field(fields):
        return content.get(fields[0].name, [])

    return content
