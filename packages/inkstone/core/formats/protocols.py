"""Protocols for format encoders."""

from __future__ import annotations

from typing import Any, Protocol

from inkstone.core.config.collections import FileConfig


class FormatEncoder(Protocol):
    """Turns a content tree into the text of one file."""

    async def encode(self, content: Any, file: FileConfig) -> str:
        """Encode content for the file's format.

        Args:
            content: Nested content (dict, or list for bare-list files)
            file: File settings: format, front matter delimiters, quoting

        Returns:
            File text ending with a single newline

        Raises:
            UnsupportedFormatError: If the format cannot be produced
        """
        ...
