"""Tests for entry file path resolution."""

from __future__ import annotations

import pytest

from inkstone.core.config.collections import ResolvedCollection
from inkstone.core.paths.entry_path import create_entry_path, get_locale_path

from tests.conftest import build_draft, build_entry, build_site


class TestCreateEntryPath:
    """Entry collections place files by slug, sub-path and i18n structure."""

    def test_without_i18n(self, site):
        draft = build_draft(site, {"_default": {"title": "Hello"}})
        assert create_entry_path(draft, "_default", "hello") == "content/posts/hello.md"

    @pytest.mark.parametrize(
        ("structure", "expected"),
        [
            ("single_file", "content/posts/hello.md"),
            ("multiple_files", "content/posts/hello.fr.md"),
            ("multiple_folders", "content/posts/fr/hello.md"),
            ("multiple_folders_i18n_root", "fr/content/posts/hello.md"),
            ("multiple_root_folders", "fr/content/posts/hello.md"),
        ],
    )
    def test_structures(self, structure: str, expected: str):
        site = build_site(structure=structure)
        draft = build_draft(site, {"en": {"title": "Hello"}, "fr": {"title": "Bonjour"}})
        assert create_entry_path(draft, "fr", "hello") == expected

    @pytest.mark.parametrize(
        "structure", ["multiple_files", "multiple_folders", "multiple_folders_i18n_root"]
    )
    def test_default_locale_omitted(self, structure: str):
        site = build_site(structure=structure, omit_default_locale=True)
        draft = build_draft(site, {"en": {"title": "Hello"}, "fr": {"title": "Bonjour"}})
        assert create_entry_path(draft, "en", "hello") == "content/posts/hello.md"
        assert create_entry_path(draft, "fr", "hello") != "content/posts/hello.md"

    def test_empty_folder_leaves_no_empty_segment(self):
        site = build_site(structure="multiple_folders_i18n_root", folder="")
        draft = build_draft(site, {"en": {"title": "Hello"}})
        assert create_entry_path(draft, "fr", "hello") == "fr/hello.md"

    def test_sub_path_template(self):
        site = build_site(path="{{slug}}/index")
        draft = build_draft(site, {"_default": {"title": "Hello"}})
        assert create_entry_path(draft, "_default", "hello") == "content/posts/hello/index.md"

    def test_custom_extension(self):
        site = build_site(extension="markdown")
        draft = build_draft(site, {"_default": {"title": "Hello"}})
        assert create_entry_path(draft, "_default", "hello") == "content/posts/hello.markdown"

    def test_index_file(self):
        site = build_site(index_file=True)
        draft = build_draft(site, {"_default": {"title": "Section"}}, is_index_file=True)
        assert create_entry_path(draft, "_default", "_index") == "content/posts/_index.md"

    def test_unchanged_slug_keeps_stored_path(self, site):
        original = build_entry("hello", {"_default": "content/posts/2024/hello.md"})
        draft = build_draft(site, {"_default": {"title": "Hello"}}, original_entry=original)
        assert create_entry_path(draft, "_default", "hello") == "content/posts/2024/hello.md"

    def test_changed_slug_gets_new_path(self, site):
        original = build_entry("hello", {"_default": "content/posts/2024/hello.md"})
        draft = build_draft(site, {"_default": {"title": "Hi"}}, original_entry=original)
        assert create_entry_path(draft, "_default", "hi") == "content/posts/hi.md"


class TestFileCollectionPath:
    def test_locale_placeholder_filled(self):
        site = build_site(structure="multiple_folders")
        draft = build_draft(site, {"en": {"title": "About"}}, collection="pages", file_name="about")
        assert create_entry_path(draft, "fr", "about") == "pages/fr/about.md"

    def test_default_locale_omitted(self):
        site = build_site(structure="multiple_folders", omit_default_locale=True)
        draft = build_draft(site, {"en": {"title": "About"}}, collection="pages", file_name="about")
        assert create_entry_path(draft, "en", "about") == "pages/about.md"
        assert create_entry_path(draft, "fr", "about") == "pages/fr/about.md"


class TestGetLocalePath:
    @pytest.fixture
    def i18n(self):
        site = build_site(structure="multiple_files", omit_default_locale=True)
        return ResolvedCollection.from_site(site, "posts").i18n

    @pytest.mark.parametrize(
        ("template", "locale", "expected"),
        [
            ("pages/{{locale}}/about.md", "en", "pages/about.md"),
            ("{{locale}}/about.md", "en", "about.md"),
            ("pages/about.{{locale}}.md", "en", "pages/about.md"),
            ("pages/about_{{locale}}.md", "en", "pages/about.md"),
            ("pages/about.{{locale}}.md", "fr", "pages/about.fr.md"),
            ("data/{{locale}}.json", "en", "data/en.json"),
            ("{{locale}}.json", "en", "en.json"),
        ],
    )
    def test_omission(self, i18n, template: str, locale: str, expected: str):
        assert get_locale_path(i18n, locale, template) == expected
