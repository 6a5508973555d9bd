"""Field schema models.

A collection (or a collection file) declares its fields as a tree of widget
definitions. The tree is immutable for the duration of a save and drives
key-path canonicalization in the content normalizer.

Widgets without dedicated options (string, text, markdown, number, boolean,
hidden, uuid, code, color, map, compute and any custom widget) validate into
``SimpleField``; the remaining widget kinds are a closed set of models selected
by the ``widget`` property.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

MULTI_VALUE_WIDGETS = frozenset({"select", "relation", "file", "image"})
MEDIA_WIDGETS = frozenset({"file", "image"})


class BaseField(BaseModel):
    """Options shared by every widget."""

    # Widget-specific options we do not model are kept, not rejected
    model_config = ConfigDict(extra="allow", frozen=True)

    name: str = Field(description="Property name in the entry content")
    label: str | None = None
    widget: str = "string"
    required: bool | list[str] = Field(
        default=True,
        description="Whether a value is required; a locale list limits the requirement",
    )
    i18n: bool | Literal["translate", "duplicate", "none"] = False
    default: Any = None

    def is_required(self, locale: str) -> bool:
        """Check whether the field requires a value in the given locale."""
        if isinstance(self.required, list):
            return locale in self.required
        return bool(self.required)


class SimpleField(BaseField):
    """Scalar widget without nested fields."""


class DateTimeField(BaseField):
    widget: Literal["datetime"] = "datetime"
    format: str | None = None
    date_format: str | bool | None = None
    time_format: str | bool | None = None
    picker_utc: bool = False

    @property
    def has_custom_format(self) -> bool:
        """Whether values are stored in a custom (non ISO 8601) format."""
        return bool(self.format) or isinstance(self.date_format, str) or isinstance(
            self.time_format, str
        )


class SelectField(BaseField):
    widget: Literal["select"] = "select"
    multiple: bool = False
    options: list[Any] = Field(default_factory=list)


class RelationField(BaseField):
    widget: Literal["relation"] = "relation"
    multiple: bool = False
    collection: str | None = None


class MediaField(BaseField):
    """File or image widget.

    ``media_folder`` and ``public_folder`` override the collection's asset
    folder for uploads made through this field.
    """

    widget: Literal["file", "image"] = "file"
    multiple: bool = False
    media_folder: str | None = None
    public_folder: str | None = None


class KeyValueField(BaseField):
    """Free-form string map; child keys are arbitrary, including numeric ones."""

    widget: Literal["keyvalue"] = "keyvalue"


class VariantType(BaseModel):
    """One variant of a polymorphic object or list field."""

    model_config = ConfigDict(extra="allow", frozen=True)

    name: str
    label: str | None = None
    fields: list[FieldDef] | None = None


class ObjectField(BaseField):
    widget: Literal["object"] = "object"
    fields: list[FieldDef] | None = None
    types: list[VariantType] | None = None
    type_key: str = "type"


class ListField(BaseField):
    """List widget.

    Items are described by exactly one of ``fields`` (object items), ``types``
    (polymorphic object items) or ``field`` (single sub-field items). A list
    with none of them holds plain strings. A ``root`` list that is the only
    field of a data file is written as the file's top-level array.
    """

    widget: Literal["list"] = "list"
    fields: list[FieldDef] | None = None
    types: list[VariantType] | None = None
    type_key: str = "type"
    field: FieldDef | None = None
    root: bool = False


_DEDICATED_TAGS = {
    "datetime": "datetime",
    "select": "select",
    "relation": "relation",
    "file": "media",
    "image": "media",
    "keyvalue": "keyvalue",
    "object": "object",
    "list": "list",
}


def _field_tag(value: Any) -> str:
    """Map a raw or validated field to its union tag."""
    if isinstance(value, dict):
        widget = value.get("widget", "string")
    else:
        widget = getattr(value, "widget", "string")
    return _DEDICATED_TAGS.get(widget, "simple")


FieldDef = Annotated[
    Union[
        Annotated[SimpleField, Tag("simple")],
        Annotated[DateTimeField, Tag("datetime")],
        Annotated[SelectField, Tag("select")],
        Annotated[RelationField, Tag("relation")],
        Annotated[MediaField, Tag("media")],
        Annotated[KeyValueField, Tag("keyvalue")],
        Annotated[ObjectField, Tag("object")],
        Annotated[ListField, Tag("list")],
    ],
    Discriminator(_field_tag),
]

VariantType.model_rebuild()
ObjectField.model_rebuild()
ListField.model_rebuild()
