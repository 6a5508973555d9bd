"""Key-path utilities over the field schema.

A key-path is a dot-delimited address into flattened entry content, e.g.
``author.name`` or ``books.0.title``. Canonical key-paths derived from the
schema use ``*`` in place of list indexes, e.g. ``books.*.title``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from inkstone.core.fields.models import (
    MULTI_VALUE_WIDGETS,
    BaseField,
    FieldDef,
    KeyValueField,
    ListField,
    ObjectField,
)


def is_field_multiple(field: BaseField) -> bool:
    """Whether a select, relation or media field accepts multiple values."""
    if field.widget in MULTI_VALUE_WIDGETS:
        return bool(getattr(field, "multiple", False))
    return False


def has_root_list_field(fields: Sequence[FieldDef]) -> bool:
    """Whether the schema consists of exactly one list field marked as ``root``."""
    return len(fields) == 1 and isinstance(fields[0], ListField) and fields[0].root


def _parse_field(field: FieldDef, key_path: str, key_paths: list[str]) -> None:
    key_paths.append(key_path)

    if isinstance(field, (ListField, ObjectField)):
        is_list = isinstance(field, ListField)
        prefix = f"{key_path}.*" if is_list else key_path

        if field.fields:
            for sub_field in field.fields:
                _parse_field(sub_field, f"{prefix}.{sub_field.name}", key_paths)
        elif field.types:
            key_paths.append(f"{prefix}.{field.type_key}")
            for variant in field.types:
                for sub_field in variant.fields or []:
                    _parse_field(sub_field, f"{prefix}.{sub_field.name}", key_paths)
        elif isinstance(field, ListField):
            if field.field is not None:
                _parse_field(field.field, f"{key_path}.*", key_paths)
            else:
                key_paths.append(f"{key_path}.*")
    elif is_field_multiple(field):
        key_paths.append(f"{key_path}.*")


def create_key_path_list(fields: Sequence[FieldDef]) -> list[str]:
    """Create the schema-ordered list of canonical key-paths.

    Args:
        fields: Top-level fields of a collection or collection file

    Returns:
        Depth-first key-path list, list items addressed with ``*``

    Example:
        >>> create_key_path_list(fields)
        ['title', 'author', 'author.name', 'books', 'books.*.title', 'body']
    """
    key_paths: list[str] = []
    for field in fields:
        _parse_field(field, field.name, key_paths)
    return key_paths


def _is_index(segment: str) -> bool:
    return segment == "*" or segment.isdigit()


def _find_sub_field(
    parent: ListField | ObjectField,
    name: str,
    item_path: str,
    value_map: Mapping[str, Any],
) -> FieldDef | None:
    if parent.fields:
        return next((f for f in parent.fields if f.name == name), None)

    if parent.types:
        if name == parent.type_key:
            return None

        type_name = value_map.get(f"{item_path}.{parent.type_key}")
        variants = [v for v in parent.types if v.name == type_name] or parent.types

        for variant in variants:
            match = next((f for f in variant.fields or [] if f.name == name), None)
            if match is not None:
                return match

    return None


def get_field(
    fields: Sequence[FieldDef],
    key_path: str,
    value_map: Mapping[str, Any] | None = None,
) -> FieldDef | None:
    """Resolve a concrete or wildcard key-path to its field definition.

    Polymorphic list items select their variant from the item's type key in
    ``value_map``; without it every variant is searched in order.

    Args:
        fields: Top-level fields
        key_path: Key-path such as ``books.0.title`` or ``books.*.title``
        value_map: Flattened content used to pick polymorphic variants

    Returns:
        Field definition, or None when the key-path is not declared
    """
    values = value_map or {}
    first, *rest = key_path.split(".")
    field: FieldDef | None = next((f for f in fields if f.name == first), None)
    path = first
    # True while positioned on an item of a list of objects
    in_item = False

    for segment in rest:
        if field is None:
            return None

        if isinstance(field, KeyValueField):
            pass
        elif isinstance(field, ListField) and not in_item:
            if not _is_index(segment):
                return None
            if field.field is not None:
                field = field.field
            else:
                in_item = True
        elif isinstance(field, (ListField, ObjectField)):
            in_item = False
            field = _find_sub_field(field, segment, path, values)
        elif _is_index(segment) and is_field_multiple(field):
            pass
        else:
            return None

        path = f"{path}.{segment}"

    return field
