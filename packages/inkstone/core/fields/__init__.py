"""Field schema models and key-path utilities."""

from inkstone.core.fields.key_path import (
    create_key_path_list,
    get_field,
    has_root_list_field,
    is_field_multiple,
)
from inkstone.core.fields.models import (
    BaseField,
    DateTimeField,
    FieldDef,
    KeyValueField,
    ListField,
    MediaField,
    ObjectField,
    RelationField,
    SelectField,
    SimpleField,
    VariantType,
)

__all__ = [
    # Models
    "BaseField",
    "DateTimeField",
    "FieldDef",
    "KeyValueField",
    "ListField",
    "MediaField",
    "ObjectField",
    "RelationField",
    "SelectField",
    "SimpleField",
    "VariantType",
    # Key-paths
    "create_key_path_list",
    "get_field",
    "has_root_list_field",
    "is_field_multiple",
]
