"""Configuration models for Inkstone."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from inkstone.core.fields.models import FieldDef


class I18nStructure(str, Enum):
    """File layout policy for localized content."""

    SINGLE_FILE = "single_file"
    MULTIPLE_FILES = "multiple_files"
    MULTIPLE_FOLDERS = "multiple_folders"
    MULTIPLE_FOLDERS_I18N_ROOT = "multiple_folders_i18n_root"

    @property
    def is_multi_folder(self) -> bool:
        return self in (I18nStructure.MULTIPLE_FOLDERS, I18nStructure.MULTIPLE_FOLDERS_I18N_ROOT)


# Newer configs spell the locale-rooted layout differently
_STRUCTURE_ALIASES = {"multiple_root_folders": I18nStructure.MULTIPLE_FOLDERS_I18N_ROOT.value}


def _normalize_structure(value: Any) -> Any:
    if isinstance(value, str):
        return _STRUCTURE_ALIASES.get(value, value)
    return value


class CanonicalSlugConfig(BaseModel):
    """Property recording an entry's cross-locale identity key."""

    key: str = Field(default="translationKey", description="Property name in each locale file")
    value: str = Field(default="{{slug}}", description="Template for the property value")


class I18nConfig(BaseModel):
    """Site-wide (or per-collection override of) localization settings."""

    model_config = ConfigDict(extra="ignore")

    structure: I18nStructure = I18nStructure.SINGLE_FILE
    locales: list[str] = Field(default_factory=list)
    default_locale: str | None = None
    omit_default_locale_from_file_path: bool = False
    canonical_slug: CanonicalSlugConfig = Field(default_factory=CanonicalSlugConfig)

    @field_validator("structure", mode="before")
    @classmethod
    def _map_structure_alias(cls, value: Any) -> Any:
        return _normalize_structure(value)

    @model_validator(mode="after")
    def _check_default_locale(self) -> Self:
        if self.locales:
            if self.default_locale is None:
                self.default_locale = self.locales[0]
            elif self.default_locale not in self.locales:
                raise ValueError(
                    f"default_locale {self.default_locale!r} is not one of {self.locales}"
                )
        return self


class I18nOverride(BaseModel):
    """Partial i18n settings declared on a collection or collection file."""

    model_config = ConfigDict(extra="ignore")

    structure: I18nStructure | None = None
    locales: list[str] | None = None
    default_locale: str | None = None
    omit_default_locale_from_file_path: bool | None = None
    canonical_slug: CanonicalSlugConfig | None = None

    @field_validator("structure", mode="before")
    @classmethod
    def _map_structure_alias(cls, value: Any) -> Any:
        return _normalize_structure(value)


class IndexFileConfig(BaseModel):
    """Special index file of an entry collection (e.g. Hugo's ``_index.md``)."""

    name: str = "_index"
    label: str | None = None
    fields: list[FieldDef] | None = None


class CollectionFile(BaseModel):
    """One fixed file of a file collection."""

    model_config = ConfigDict(extra="ignore")

    name: str
    label: str | None = None
    file: str = Field(description="Path template; may contain {{locale}}")
    fields: list[FieldDef] = Field(default_factory=list)
    format: str | None = None
    frontmatter_delimiter: str | list[str] | None = None
    yaml_quote: bool = False
    media_folder: str | None = None
    public_folder: str | None = None
    i18n: bool | I18nOverride | None = None


class CollectionConfig(BaseModel):
    """Entry (folder) collection or file collection."""

    model_config = ConfigDict(extra="ignore")

    name: str
    label: str | None = None
    folder: str | None = None
    files: list[CollectionFile] | None = None
    fields: list[FieldDef] = Field(default_factory=list)
    identifier_field: str = "title"
    slug: str | None = Field(default=None, description="Slug template")
    path: str | None = Field(default=None, description="Sub-path template inside the folder")
    extension: str | None = None
    format: str | None = None
    frontmatter_delimiter: str | list[str] | None = None
    yaml_quote: bool = False
    index_file: bool | IndexFileConfig | None = None
    media_folder: str | None = None
    public_folder: str | None = None
    i18n: bool | I18nOverride | None = None

    @model_validator(mode="after")
    def _check_kind(self) -> Self:
        if (self.folder is None) == (self.files is None):
            raise ValueError(f"Collection {self.name!r} needs exactly one of folder or files")
        return self

    @property
    def is_entry_collection(self) -> bool:
        return self.folder is not None

    @property
    def slug_template(self) -> str:
        return self.slug or f"{{{{{self.identifier_field}}}}}"

    @property
    def index_file_config(self) -> IndexFileConfig | None:
        if not self.is_entry_collection or not self.index_file:
            return None
        if self.index_file is True:
            return IndexFileConfig()
        return self.index_file  # type: ignore[return-value]

    def get_file(self, name: str) -> CollectionFile | None:
        return next((f for f in self.files or [] if f.name == name), None)


class BackendConfig(BaseModel):
    name: str = "local"
    automatic_deployments: bool | None = None


class MediaLibraryConfig(BaseModel):
    slugify_filename: bool = False


class SlugConfig(BaseModel):
    """Slug generation options shared by entry slugs and asset file names."""

    encoding: str = Field(default="unicode", pattern="^(unicode|ascii)$")
    clean_accents: bool = False
    sanitize_replacement: str = "-"
    trim: bool = True
    maxlength: int | None = Field(default=None, gt=0)


class OutputConfig(BaseModel):
    omit_empty_optional_fields: bool = False
    encode_file_path: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False
    filename: str | None = None


class ConfigBase(BaseModel):
    """Base class for file-backed configurations."""

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path or use default path.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config is invalid
        """
        from inkstone.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        raw = load_config(path)
        return cls.model_validate(raw)


class SiteConfig(ConfigBase):
    """Site-level configuration (shared by every collection)."""

    backend: BackendConfig = Field(default_factory=BackendConfig)
    media_folder: str = ""
    public_folder: str | None = None
    media_library: MediaLibraryConfig = Field(default_factory=MediaLibraryConfig)
    slug: SlugConfig = Field(default_factory=SlugConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    i18n: I18nConfig | None = None
    collections: list[CollectionConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        return Path("config.yml")

    @property
    def resolved_public_folder(self) -> str:
        """Public folder, falling back to ``/<media_folder>``."""
        if self.public_folder is not None:
            return self.public_folder
        return f"/{self.media_folder.strip('/')}" if self.media_folder else ""

    def get_collection(self, name: str) -> CollectionConfig | None:
        return next((c for c in self.collections if c.name == name), None)
