"""Shared utilities."""

from inkstone.core.utils.logging import (
    StructuredJSONFormatter,
    configure_logging,
    get_logger,
    log_performance,
)
from inkstone.core.utils.sorting import natural_sort_key

__all__ = [
    "StructuredJSONFormatter",
    "configure_logging",
    "get_logger",
    "log_performance",
    "natural_sort_key",
]
