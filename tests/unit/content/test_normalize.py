"""Tests for schema-ordered content normalization."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest
from pydantic import TypeAdapter

from inkstone.core.content import finalize_content, is_value_empty, serialize_content
from inkstone.core.fields import FieldDef

_FIELDS = TypeAdapter(list[FieldDef])


def parse_fields(raw: list[dict[str, Any]]) -> list[FieldDef]:
    return _FIELDS.validate_python(raw)


def normalize(fields: list[FieldDef], values: dict[str, Any], **kwargs: Any) -> Any:
    return finalize_content(fields, values, locale=kwargs.pop("locale", "en"), **kwargs).to_plain()


@pytest.fixture
def fields() -> list[FieldDef]:
    return parse_fields(
        [
            {"name": "title"},
            {"name": "tags", "widget": "list", "required": False},
            {"name": "subtitle", "required": False},
            {"name": "date", "widget": "datetime", "required": False},
            {"name": "body", "widget": "markdown"},
        ]
    )


class TestOrdering:
    """Schema keys first, unknown keys appended in natural order."""

    def test_schema_order_then_unknown_keys(self, fields: list[FieldDef]):
        values = {
            "body": "B",
            "zeta": "z",
            "tags.1": "b",
            "alpha.10": "x",
            "title": "T",
            "tags.0": "a",
            "alpha.2": "y",
        }
        result = normalize(fields, values)

        assert list(result) == ["title", "tags", "body", "alpha", "zeta"]
        assert result["tags"] == ["a", "b"]
        assert result["alpha"] == ["y", "x"]

    def test_list_items_naturally_sorted(self, fields: list[FieldDef]):
        values = {f"tags.{i}": f"t{i}" for i in (10, 2, 1, 0)}
        assert normalize(fields, values)["tags"] == ["t0", "t1", "t2", "t10"]

    def test_normalizing_twice_is_stable(self, fields: list[FieldDef]):
        values = {"extra.b": 1, "body": "B", "title": "T", "extra.a": 2, "tags.0": "x"}
        assert normalize(fields, values) == normalize(fields, values)
        assert list(normalize(fields, values)) == list(normalize(fields, values))

    def test_no_key_is_dropped(self, fields: list[FieldDef]):
        values = {"title": "T", "unknown": "u", "nested.deep.key": "v"}
        result = normalize(fields, values)
        assert result["unknown"] == "u"
        assert result["nested"] == {"deep": {"key": "v"}}

    def test_canonical_slug_first(self, fields: list[FieldDef]):
        values = {"title": "T", "translationKey": "hello"}
        result = normalize(fields, values, canonical_slug_key="translationKey")
        assert list(result) == ["translationKey", "title"]

    def test_input_not_modified(self, fields: list[FieldDef]):
        values = {"title": "T", "tags.0": "a"}
        normalize(fields, values)
        assert values == {"title": "T", "tags.0": "a"}

    def test_item_ids_are_removed(self, fields: list[FieldDef]):
        values = {"tags.0": "a", "tags.0.__item_id": "abc", "title": "T"}
        assert "__item_id" not in str(normalize(fields, values))


class TestKeyValueFields:
    def test_numeric_keys_stay_map_keys(self):
        fields = parse_fields([{"name": "meta", "widget": "keyvalue"}])
        result = normalize(fields, {"meta.2": "two", "meta.1": "one"})
        assert result == {"meta": {"1": "one", "2": "two"}}

    def test_empty_map_is_written(self):
        fields = parse_fields([{"name": "meta", "widget": "keyvalue"}, {"name": "title"}])
        assert normalize(fields, {"title": "T"}) == {"meta": {}, "title": "T"}


class TestCopyPolicy:
    """Empty optional fields and native dates."""

    def test_omit_empty_optional_fields(self, fields: list[FieldDef]):
        values = {"title": "", "subtitle": "", "tags": [], "body": "B"}
        result = normalize(fields, values, omit_empty_optional_fields=True)
        assert result == {"title": "", "body": "B"}

    def test_empty_values_kept_without_policy(self, fields: list[FieldDef]):
        values = {"title": "T", "subtitle": ""}
        assert normalize(fields, values) == {"title": "T", "subtitle": ""}

    def test_false_and_zero_are_not_empty(self):
        assert not is_value_empty(False)
        assert not is_value_empty(0)
        assert is_value_empty(None)
        assert is_value_empty({})

    def test_required_only_in_some_locales(self):
        fields = parse_fields([{"name": "title", "required": ["en"]}])
        assert normalize(fields, {"title": ""}, locale="en", omit_empty_optional_fields=True) == {
            "title": ""
        }
        assert normalize(fields, {"title": ""}, locale="fr", omit_empty_optional_fields=True) == {}

    def test_native_dates(self, fields: list[FieldDef]):
        result = normalize(fields, {"date": "2026-01-02T03:04:05Z"}, native_dates=True)
        assert result["date"] == datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_dates_stay_strings_without_native_dates(self, fields: list[FieldDef]):
        result = normalize(fields, {"date": "2026-01-02T03:04:05Z"})
        assert result["date"] == "2026-01-02T03:04:05Z"

    def test_custom_date_format_stays_string(self):
        fields = parse_fields([{"name": "date", "widget": "datetime", "format": "YYYY-MM-DD"}])
        result = normalize(fields, {"date": "2026-01-02T03:04:05Z"}, native_dates=True)
        assert result["date"] == "2026-01-02T03:04:05Z"


ROOT_LIST = {"name": "items", "widget": "list", "root": True}


class TestSerializeContent:
    """Whole-draft serialization rules."""

    def test_root_list_field_is_bare_list(self, make_site, make_draft):
        site = make_site(fields=[ROOT_LIST], extension="yml")
        draft = make_draft(site, {"_default": {"items.0": "a", "items.1": "b"}})
        assert serialize_content(draft, "_default", draft.current_values["_default"]) == ["a", "b"]

    def test_list_without_root_flag_keeps_wrapper(self, make_site, make_draft):
        site = make_site(fields=[{"name": "items", "widget": "list"}], extension="yml")
        draft = make_draft(site, {"_default": {"items.0": "a"}})
        assert serialize_content(draft, "_default", {"items.0": "a"}) == {"items": ["a"]}

    def test_front_matter_keeps_wrapper(self, make_site, make_draft):
        site = make_site(fields=[ROOT_LIST])
        draft = make_draft(site, {"_default": {"items.0": "a", "items.1": "b"}})
        result = serialize_content(draft, "_default", draft.current_values["_default"])
        assert result == {"items": ["a", "b"]}

    def test_toml_keeps_wrapper(self, make_site, make_draft):
        site = make_site(fields=[ROOT_LIST], format="toml")
        draft = make_draft(site, {"_default": {"items.0": "a"}})
        assert serialize_content(draft, "_default", {"items.0": "a"}) == {"items": ["a"]}

    def test_omit_empty_follows_site_output(self, make_site, make_draft):
        site = make_site()
        site = site.model_copy(
            update={"output": site.output.model_copy(update={"omit_empty_optional_fields": True})}
        )
        draft = make_draft(site, {"_default": {"title": "T", "date": "", "body": "B"}})
        result = serialize_content(draft, "_default", draft.current_values["_default"])
        assert result == {"title": "T", "body": "B"}
