"""Resolved, per-collection views of the site configuration.

``ResolvedCollection`` bundles everything the save pipeline needs to know
about one collection (or one file of a file collection): its effective i18n
settings, its file format and path layout, and its field schema.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from inkstone.core.config.models import (
    CanonicalSlugConfig,
    CollectionConfig,
    CollectionFile,
    I18nConfig,
    I18nOverride,
    I18nStructure,
    IndexFileConfig,
    SiteConfig,
)
from inkstone.core.fields.models import FieldDef
from inkstone.core.paths.utils import strip_slashes

# Locale key used for content when i18n is disabled
DEFAULT_LOCALE_KEY = "_default"

_FORMAT_BY_EXTENSION = {
    "md": "frontmatter",
    "markdown": "frontmatter",
    "html": "frontmatter",
    "yml": "yaml",
    "yaml": "yaml",
    "json": "json",
    "toml": "toml",
}

_EXTENSION_BY_FORMAT = {"yml": "yml", "yaml": "yml", "toml": "toml", "json": "json"}

FRONT_MATTER_FORMATS = ("frontmatter", "yaml-frontmatter", "json-frontmatter", "toml-frontmatter")

_TEMPLATE_TAG_RE = re.compile(r"\\\{\\\{.+?\\\}\\\}")


@dataclass(frozen=True)
class I18nSettings:
    """Effective localization policy of one collection or collection file."""

    enabled: bool
    locales: tuple[str, ...]
    default_locale: str
    structure: I18nStructure
    omit_default_locale_from_file_path: bool
    canonical_slug: CanonicalSlugConfig

    @classmethod
    def disabled(cls) -> I18nSettings:
        return cls(
            enabled=False,
            locales=(DEFAULT_LOCALE_KEY,),
            default_locale=DEFAULT_LOCALE_KEY,
            structure=I18nStructure.SINGLE_FILE,
            omit_default_locale_from_file_path=False,
            canonical_slug=CanonicalSlugConfig(),
        )

    @property
    def single_physical_file(self) -> bool:
        """Whether every locale of an entry lives in one file."""
        return not self.enabled or self.structure == I18nStructure.SINGLE_FILE

    def omits_locale(self, locale: str) -> bool:
        return self.omit_default_locale_from_file_path and locale == self.default_locale


def _apply_override(base: dict[str, Any], override: bool | I18nOverride | None) -> dict[str, Any]:
    if isinstance(override, I18nOverride):
        base.update(override.model_dump(exclude_none=True))
    return base


def resolve_i18n(
    site_i18n: I18nConfig | None,
    collection_i18n: bool | I18nOverride | None,
    file_i18n: bool | I18nOverride | None = None,
) -> I18nSettings:
    """Merge site, collection and file level i18n settings.

    A collection opts in with ``i18n: true`` or a partial override; a file of
    a file collection inherits the collection setting unless it sets
    ``i18n: false`` or its own override.
    """
    if site_i18n is None or not site_i18n.locales or not collection_i18n or file_i18n is False:
        return I18nSettings.disabled()

    merged = _apply_override(site_i18n.model_dump(), collection_i18n)
    merged = _apply_override(merged, file_i18n)
    if merged.get("default_locale") not in merged.get("locales", []):
        merged["default_locale"] = None

    config = I18nConfig.model_validate(merged)

    return I18nSettings(
        enabled=True,
        locales=tuple(config.locales),
        default_locale=config.default_locale or config.locales[0],
        structure=config.structure,
        omit_default_locale_from_file_path=config.omit_default_locale_from_file_path,
        canonical_slug=config.canonical_slug,
    )


@dataclass(frozen=True)
class FileConfig:
    """Physical file settings of a collection or collection file."""

    extension: str
    format: str
    base_path: str | None = None
    sub_path: str | None = None
    fm_delimiters: tuple[str, str] = ("---", "---")
    yaml_quote: bool = False
    full_path_pattern: re.Pattern[str] | None = None

    @property
    def native_dates(self) -> bool:
        """Whether the format has a native date-time type."""
        return self.format in ("toml", "toml-frontmatter")

    @property
    def is_front_matter(self) -> bool:
        return self.format in FRONT_MATTER_FORMATS

    def extract_sub_path(self, path: str) -> str | None:
        if self.full_path_pattern is None:
            return None
        match = self.full_path_pattern.match(path)
        return match.group("sub_path") if match else None


def get_file_extension(
    *, file: str | None = None, extension: str | None = None, format: str | None = None
) -> str:
    if extension:
        return extension
    if file:
        match = re.search(r"[^.]+$", file)
        return match.group(0) if match else "md"
    return _EXTENSION_BY_FORMAT.get(format or "", "md")


def get_front_matter_delimiters(format: str, delimiter: str | list[str] | None) -> tuple[str, str]:
    if isinstance(delimiter, str) and delimiter.strip():
        return (delimiter, delimiter)
    if isinstance(delimiter, list) and len(delimiter) == 2:
        return (delimiter[0], delimiter[1])
    if format == "json-frontmatter":
        return ("{", "}")
    if format == "toml-frontmatter":
        return ("+++", "+++")
    return ("---", "---")


def build_full_path_pattern(
    *, base_path: str, sub_path: str | None, extension: str, i18n: I18nSettings
) -> re.Pattern[str]:
    """Build the regex matching entry file paths, capturing ``sub_path`` and ``locale``."""
    if sub_path:
        file_matcher = _TEMPLATE_TAG_RE.sub("[^/]+", re.escape(sub_path))
    else:
        file_matcher = ".+?"

    locale_matcher = "(?P<locale>{})".format("|".join(re.escape(loc) for loc in i18n.locales))
    optional = "?" if i18n.omit_default_locale_from_file_path else ""
    prefix = re.escape(base_path) + "/" if base_path else ""
    suffix = ""

    if i18n.enabled:
        if i18n.structure == I18nStructure.MULTIPLE_FOLDERS:
            prefix = f"{prefix}(?:{locale_matcher}/){optional}"
        elif i18n.structure == I18nStructure.MULTIPLE_FOLDERS_I18N_ROOT:
            prefix = f"(?:{locale_matcher}/){optional}{prefix}"
        elif i18n.structure == I18nStructure.MULTIPLE_FILES:
            suffix = f"(?:\\.{locale_matcher}){optional}"

    return re.compile(f"^{prefix}(?P<sub_path>{file_matcher}){suffix}\\.{re.escape(extension)}$")


def get_file_config(
    collection: CollectionConfig,
    i18n: I18nSettings,
    collection_file: CollectionFile | None = None,
) -> FileConfig:
    """Derive the physical file settings of a collection or collection file."""
    if collection_file is not None:
        extension = get_file_extension(file=collection_file.file, format=collection_file.format)
        format = collection_file.format or _FORMAT_BY_EXTENSION.get(extension, "frontmatter")
        return FileConfig(
            extension=extension,
            format=format,
            fm_delimiters=get_front_matter_delimiters(
                format, collection_file.frontmatter_delimiter
            ),
            yaml_quote=collection_file.yaml_quote,
        )

    extension = get_file_extension(extension=collection.extension, format=collection.format)
    format = collection.format or _FORMAT_BY_EXTENSION.get(extension, "frontmatter")
    base_path = strip_slashes(collection.folder or "")
    sub_path = strip_slashes(collection.path) if collection.path else None

    return FileConfig(
        extension=extension,
        format=format,
        base_path=base_path,
        sub_path=sub_path,
        fm_delimiters=get_front_matter_delimiters(format, collection.frontmatter_delimiter),
        yaml_quote=collection.yaml_quote,
        full_path_pattern=build_full_path_pattern(
            base_path=base_path, sub_path=sub_path, extension=extension, i18n=i18n
        ),
    )


@dataclass(frozen=True)
class ResolvedCollection:
    """A collection (or collection file) with its effective settings."""

    collection: CollectionConfig
    i18n: I18nSettings
    file: FileConfig
    collection_file: CollectionFile | None = None

    @classmethod
    def from_site(
        cls, site: SiteConfig, collection_name: str, file_name: str | None = None
    ) -> ResolvedCollection:
        """Resolve a collection, or one of its files, from the site configuration.

        Raises:
            KeyError: If the collection or file is not configured
        """
        collection = site.get_collection(collection_name)
        if collection is None:
            raise KeyError(f"Unknown collection: {collection_name}")

        collection_file = None
        if file_name is not None:
            collection_file = collection.get_file(file_name)
            if collection_file is None:
                raise KeyError(f"Unknown file {file_name!r} in collection {collection_name!r}")
        elif not collection.is_entry_collection:
            raise KeyError(f"Collection {collection_name!r} requires a file name")

        i18n = resolve_i18n(
            site.i18n,
            collection.i18n,
            collection_file.i18n if collection_file is not None else None,
        )
        return cls(
            collection=collection,
            i18n=i18n,
            file=get_file_config(collection, i18n, collection_file),
            collection_file=collection_file,
        )

    @property
    def name(self) -> str:
        return self.collection.name

    @property
    def file_name(self) -> str | None:
        return self.collection_file.name if self.collection_file is not None else None

    @property
    def fields(self) -> list[FieldDef]:
        if self.collection_file is not None:
            return self.collection_file.fields
        return self.collection.fields

    @property
    def index_file(self) -> IndexFileConfig | None:
        return self.collection.index_file_config

    def fields_for(self, is_index_file: bool = False) -> list[FieldDef]:
        """Field schema of a regular entry or of the collection's index file."""
        index_file = self.index_file
        if is_index_file and index_file is not None and index_file.fields is not None:
            return index_file.fields
        return self.fields
