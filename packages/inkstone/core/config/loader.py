"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from inkstone.core.config.models import SiteConfig
from inkstone.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

# Overrides the configured log level, e.g. INKSTONE_LOG_LEVEL=DEBUG
LOG_LEVEL_ENV_VAR = "INKSTONE_LOG_LEVEL"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("config.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Supports both JSON and YAML formats. Format is auto-detected
    from file extension.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
                # safe_load returns None for empty files
                return content if content is not None else {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_site_config(path: str | Path | None = None) -> SiteConfig:
    """Load and validate the site configuration.

    Args:
        path: Path to the site config file; defaults to ``config.yml``

    Returns:
        Validated SiteConfig

    Raises:
        FileNotFoundError: If config file does not exist
        ValidationError: If config is invalid
    """
    config = SiteConfig.load_or_default(path)
    logger.debug(
        "Loaded site config from %s (%d collections)",
        path or SiteConfig.default_path(),
        len(config.collections),
    )
    return config


def configure_logging(config: SiteConfig | None = None) -> None:
    """Configure Python logging from the site config.

    The ``INKSTONE_LOG_LEVEL`` environment variable takes precedence over
    the configured level.

    Args:
        config: SiteConfig instance (defaults are used if None)
    """
    logging_config = (config or SiteConfig()).logging
    level = os.getenv(LOG_LEVEL_ENV_VAR) or logging_config.level

    _configure_logging(
        level=level,
        format_string=logging_config.format,
        filename=logging_config.filename,
        structured=logging_config.structured,
    )
