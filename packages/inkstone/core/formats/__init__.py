"""File format encoding."""

from inkstone.core.formats.encoder import DefaultFormatEncoder, format_json, format_yaml
from inkstone.core.formats.protocols import FormatEncoder

__all__ = [
    "DefaultFormatEncoder",
    "FormatEncoder",
    "format_json",
    "format_yaml",
]
