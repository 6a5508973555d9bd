"""Default format encoder.

Supports ``yaml``/``yml``, ``json`` and the front matter formats
(``frontmatter``, ``yaml-frontmatter``, ``json-frontmatter``,
``toml-frontmatter``). TOML data needs a formatter registered under
``toml``; any format can be overridden with a custom formatter.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import yaml

from inkstone.core.config.collections import FRONT_MATTER_FORMATS, FileConfig
from inkstone.core.errors import UnsupportedFormatError

logger = logging.getLogger(__name__)

Formatter = Callable[[Any], str | Awaitable[str]]


class _Dumper(yaml.SafeDumper):
    """Block-style dumper that keeps key order and never emits anchors."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    style = "|" if "\n" in data else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


_Dumper.add_representer(str, _represent_str)


class _QuotedDumper(_Dumper):
    """Dumper that double-quotes every string value; keys stay plain."""


def _represent_quoted_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')


def _represent_quoted_dict(dumper: yaml.SafeDumper, data: dict[Any, Any]) -> yaml.MappingNode:
    pairs = [
        (
            yaml.ScalarNode("tag:yaml.org,2002:str", key)
            if isinstance(key, str)
            else dumper.represent_data(key),
            dumper.represent_data(value),
        )
        for key, value in data.items()
    ]
    return yaml.MappingNode("tag:yaml.org,2002:map", pairs, flow_style=False)


_QuotedDumper.add_representer(str, _represent_quoted_str)
_QuotedDumper.add_representer(dict, _represent_quoted_dict)


def format_yaml(content: Any, *, quote: bool = False) -> str:
    """Dump content as block-style YAML without a trailing newline."""
    return yaml.dump(
        content,
        Dumper=_QuotedDumper if quote else _Dumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=2**31 - 1,
    ).strip()


def format_json(content: Any) -> str:
    return json.dumps(content, indent=2, ensure_ascii=False, default=str).strip()


class DefaultFormatEncoder:
    """Encoder for the built-in formats plus registered custom formatters.

    Example:
        >>> encoder = DefaultFormatEncoder()
        >>> encoder.register("toml", my_toml_dumps)
        >>> text = await encoder.encode({"title": "Hello"}, file_config)
    """

    def __init__(self, formatters: dict[str, Formatter] | None = None) -> None:
        self._formatters: dict[str, Formatter] = dict(formatters or {})

    def register(self, format: str, formatter: Formatter) -> None:
        """Register a formatter for a format name, replacing the built-in one."""
        self._formatters[format] = formatter

    async def _call(self, formatter: Formatter, content: Any) -> str:
        result = formatter(content)
        if inspect.isawaitable(result):
            result = await result
        return str(result).strip()

    async def _format_data(self, format: str, content: Any, file: FileConfig) -> str:
        if format in self._formatters:
            return await self._call(self._formatters[format], content)
        if format in ("yaml", "yml"):
            return format_yaml(content, quote=file.yaml_quote)
        if format == "json":
            return format_json(content)
        raise UnsupportedFormatError(format)

    async def encode(self, content: Any, file: FileConfig) -> str:
        """Encode content for the file's format.

        For front matter formats the ``body`` property becomes the document
        body; without other properties no front matter block is written.

        Raises:
            UnsupportedFormatError: If the format cannot be produced, or front
                matter content is not a mapping
        """
        format = file.format

        if format in self._formatters or format not in FRONT_MATTER_FORMATS:
            return f"{await self._format_data(format, content, file)}\n"

        if not isinstance(content, dict):
            raise UnsupportedFormatError(
                format, f"front matter needs a mapping, got {type(content).__name__}"
            )

        data = dict(content)
        body = data.pop("body", "")
        if not isinstance(body, str):
            data["body"] = body
            body = ""

        if not data:
            return f"{body}\n"

        start, end = file.fm_delimiters

        if format == "json-frontmatter":
            front_matter = format_json(data)
            # The JSON object's own braces act as the delimiters
            if (start, end) == ("{", "}"):
                front_matter = front_matter[1:-1].strip("\n")
        elif format == "toml-frontmatter":
            front_matter = await self._format_data("toml", data, file)
        else:
            front_matter = await self._format_data("yaml", data, file)

        logger.debug("Encoded %s front matter (%d keys)", format, len(data))
        return f"{start}\n{front_matter}\n{end}\n{body}\n"
