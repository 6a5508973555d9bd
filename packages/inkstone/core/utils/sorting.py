"""Natural ("human") sort keys."""

from __future__ import annotations

import re
from typing import Any

_DIGITS_RE = re.compile(r"(\d+)")


def natural_sort_key(value: str) -> tuple[Any, ...]:
    """Sort key that orders embedded numbers numerically.

    Example:
        >>> sorted(["item.10", "item.2", "item.1"], key=natural_sort_key)
        ['item.1', 'item.2', 'item.10']
    """
    # Numeric chunks sort before text chunks at the same position
    return tuple(
        (0, int(chunk), "") if chunk.isdigit() else (1, 0, chunk.casefold())
        for chunk in _DIGITS_RE.split(value)
        if chunk
    )
