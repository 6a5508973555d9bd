"""Content tree and normalization."""

from inkstone.core.content.normalize import (
    finalize_content,
    is_value_empty,
    serialize_content,
)
from inkstone.core.content.tree import Leaf, ListNode, MapNode, Node, build_tree, from_plain

__all__ = [
    "Leaf",
    "ListNode",
    "MapNode",
    "Node",
    "build_tree",
    "finalize_content",
    "from_plain",
    "is_value_empty",
    "serialize_content",
]
