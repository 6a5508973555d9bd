"""Tests for template expansion."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Any

import pytest

from inkstone.core.config.models import SlugConfig
from inkstone.core.errors import TemplateError
from inkstone.core.paths import (
    TemplateContext,
    TemplateType,
    fill_template,
    get_entry_summary,
    get_localized_key_paths,
    uses_localized_fields,
)

NOW = datetime(2026, 3, 4, 5, 6, 7, tzinfo=UTC)


def slug_context(content: dict[str, Any] | None = None, **kwargs: Any) -> TemplateContext:
    return TemplateContext(content=content or {}, now=NOW, **kwargs)


def path_context(content: dict[str, Any] | None = None, **kwargs: Any) -> TemplateContext:
    return TemplateContext(content=content or {}, type=TemplateType.MEDIA_FOLDER, now=NOW, **kwargs)


class TestSlugTemplates:
    """Slug templates slugify every substituted value."""

    def test_date_parts_and_summary(self):
        context = slug_context({"title": "Hello World"})
        result = fill_template("{{year}}-{{month}}-{{day}}-{{slug}}", context)
        assert result == "2026-03-04-hello-world"

    def test_time_parts(self):
        assert fill_template("{{hour}}{{minute}}{{second}}", slug_context()) == "050607"

    def test_field_values(self):
        context = slug_context({"title": "Hello World", "author.name": "Jo Bloggs"})
        assert fill_template("{{fields.author.name}}-{{title}}", context) == "jo-bloggs-hello-world"

    def test_current_slug_wins(self):
        context = slug_context({"title": "Hello"}, current_slug="custom")
        assert fill_template("{{slug}}", context) == "custom"

    def test_summary_falls_back_to_markdown_header(self):
        context = slug_context({"body": "Intro\n\n## First Steps {#first}\n"})
        assert fill_template("{{slug}}", context) == "first-steps"

    def test_unresolved_tag_gets_short_id(self):
        assert re.fullmatch(r"[0-9a-f]{12}", fill_template("{{missing}}", slug_context()))

    def test_uuid_tags(self):
        assert re.fullmatch(r"[0-9a-f]{8}", fill_template("{{uuid_shorter}}", slug_context()))

    def test_made_unique_against_existing_slugs(self):
        context = slug_context({"title": "Hello World"}, existing_slugs=["hello-world"])
        assert fill_template("{{title}}", context) == "hello-world-1"

    def test_current_slug_is_not_renamed(self):
        context = slug_context(current_slug="hello", existing_slugs=["hello"])
        assert fill_template("{{slug}}", context) == "hello"

    @pytest.mark.parametrize(("maxlength", "expected"), [(5, "hello"), (6, "hello")])
    def test_maxlength(self, maxlength: int, expected: str):
        config = SlugConfig(maxlength=maxlength)
        context = slug_context({"title": "Hello World"}, slug_config=config)
        assert fill_template("{{title}}", context) == expected

    def test_slug_config_applies(self):
        context = slug_context({"title": "Café"}, slug_config=SlugConfig(clean_accents=True))
        assert fill_template("{{title}}", context) == "cafe"


class TestTransformations:
    def test_upper_lower(self):
        context = path_context({"title": "Abc"})
        assert fill_template("{{title | upper}}/{{title | lower}}", context) == "ABC/abc"

    def test_default(self):
        assert fill_template("{{subtitle | default('none')}}", slug_context()) == "none"

    def test_default_with_inner_tag(self):
        context = slug_context({"title": "Hello World"})
        assert fill_template("{{subtitle | default('{{fields.title}}')}}", context) == "hello-world"

    def test_default_not_used_when_value_present(self):
        context = slug_context({"subtitle": "Sub"})
        assert fill_template("{{subtitle | default('none')}}", context) == "sub"

    def test_truncate(self):
        context = path_context({"title": "Hello World"})
        assert fill_template("{{title | truncate(5)}}", context) == "Hello…"
        assert fill_template("{{title | truncate(5, '...')}}", context) == "Hello..."

    def test_ternary(self):
        context = path_context({"draft": True})
        assert fill_template("{{draft | ternary('wip', 'final')}}", context) == "wip"

    def test_localize_is_a_marker(self):
        assert fill_template("{{title | localize}}", slug_context({"title": "Hi"})) == "hi"

    def test_unknown_transformation(self):
        with pytest.raises(TemplateError) as exc_info:
            fill_template("{{title | bogus}}", slug_context({"title": "Hi"}))
        assert exc_info.value.placeholder == "bogus"

    def test_empty_tag(self):
        with pytest.raises(TemplateError):
            fill_template("{{ }}", slug_context())


class TestPathTemplates:
    """Media folder and preview path templates keep values as they are."""

    def test_values_not_slugified(self):
        context = path_context({"title": "My Post"})
        assert fill_template("images/{{title}}", context) == "images/My Post"

    def test_file_path_tags(self):
        context = path_context(
            entry_file_path="content/posts/2026/hello.en.md", base_path="content/posts"
        )
        assert fill_template("{{filename}}.{{extension}}", context) == "hello.md"

    def test_preview_path_locale(self):
        context = TemplateContext(
            type=TemplateType.PREVIEW_PATH, locale="fr", current_slug="hello", now=NOW
        )
        assert fill_template("{{locale}}/{{slug}}", context) == "fr/hello"

    def test_preview_path_of_index_file(self):
        context = TemplateContext(
            type=TemplateType.PREVIEW_PATH,
            locale="fr",
            current_slug="_index",
            is_index_file=True,
            now=NOW,
        )
        assert fill_template("{{locale}}/{{slug}}", context) == "fr/"


class TestHelpers:
    def test_entry_summary_precedence(self):
        assert get_entry_summary({"name": "N", "title": "T"}) == "T"
        assert get_entry_summary({"heading": "H", "name": "N"}, "heading") == "H"
        assert get_entry_summary({}) == ""

    def test_localized_key_paths(self):
        template = "{{fields.title | localize}}-{{year}}-{{summary|localize}}"
        assert get_localized_key_paths(template) == ["title", "summary"]
        assert uses_localized_fields(template)
        assert not uses_localized_fields("{{title}}")
