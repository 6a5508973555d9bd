"""Configuration management for Inkstone."""

from inkstone.core.config.collections import (
    DEFAULT_LOCALE_KEY,
    FileConfig,
    I18nSettings,
    ResolvedCollection,
    resolve_i18n,
)
from inkstone.core.config.folders import (
    AssetFolder,
    get_asset_folder,
    global_asset_folder,
    normalize_asset_folder,
)
from inkstone.core.config.loader import (
    configure_logging,
    detect_format,
    load_config,
    load_site_config,
)
from inkstone.core.config.models import (
    BackendConfig,
    CanonicalSlugConfig,
    CollectionConfig,
    CollectionFile,
    I18nConfig,
    I18nOverride,
    I18nStructure,
    IndexFileConfig,
    LoggingConfig,
    MediaLibraryConfig,
    OutputConfig,
    SiteConfig,
    SlugConfig,
)

__all__ = [
    # Loaders
    "configure_logging",
    "detect_format",
    "load_config",
    "load_site_config",
    # Site-level config
    "BackendConfig",
    "LoggingConfig",
    "MediaLibraryConfig",
    "OutputConfig",
    "SiteConfig",
    "SlugConfig",
    # I18n
    "CanonicalSlugConfig",
    "I18nConfig",
    "I18nOverride",
    "I18nSettings",
    "I18nStructure",
    "resolve_i18n",
    # Collections
    "CollectionConfig",
    "CollectionFile",
    "DEFAULT_LOCALE_KEY",
    "FileConfig",
    "IndexFileConfig",
    "ResolvedCollection",
    # Asset folders
    "AssetFolder",
    "get_asset_folder",
    "global_asset_folder",
    "normalize_asset_folder",
]
