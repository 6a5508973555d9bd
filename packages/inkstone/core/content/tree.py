"""Typed content tree.

Entry content is edited as a flat map of dotted key-paths. Before encoding it
is rebuilt into a tree of ``Leaf``, ``ListNode`` and ``MapNode`` values. The
container created for a key-path is decided by the caller, so a numeric
child key does not turn a key-value map into a list.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, TypeAlias


@dataclass
class Leaf:
    value: Any

    def to_plain(self) -> Any:
        return self.value


@dataclass
class ListNode:
    """List container; items are kept by index and emitted in index order."""

    items: dict[int, Node] = field(default_factory=dict)

    def to_plain(self) -> list[Any]:
        return [self.items[index].to_plain() for index in sorted(self.items)]


@dataclass
class MapNode:
    """Map container; keys keep their insertion order."""

    children: dict[str, Node] = field(default_factory=dict)

    def to_plain(self) -> dict[str, Any]:
        return {key: child.to_plain() for key, child in self.children.items()}


Node: TypeAlias = Leaf | ListNode | MapNode

# Decides whether the container at a key-path is a map even if its keys are numeric
IsMapPath = Callable[[str], bool]


def from_plain(value: Any) -> Node:
    """Wrap a plain value; nested dicts and lists become containers."""
    if isinstance(value, dict):
        return MapNode({str(k): from_plain(v) for k, v in value.items()})
    if isinstance(value, list):
        return ListNode({i: from_plain(v) for i, v in enumerate(value)})
    return Leaf(value)


def _get_child(container: ListNode | MapNode, segment: str) -> Node | None:
    if isinstance(container, ListNode):
        return container.items.get(int(segment))
    return container.children.get(segment)


def _set_child(container: ListNode | MapNode, segment: str, node: Node) -> None:
    if isinstance(container, ListNode):
        container.items[int(segment)] = node
    else:
        container.children[segment] = node


def _new_container(path: str, next_segment: str, is_map_path: IsMapPath) -> ListNode | MapNode:
    if next_segment.isdigit() and not is_map_path(path):
        return ListNode()
    return MapNode()


def _is_empty_container(node: Node) -> bool:
    return (isinstance(node, ListNode) and not node.items) or (
        isinstance(node, MapNode) and not node.children
    )


def build_tree(
    items: Iterable[tuple[str, Any]],
    is_map_path: IsMapPath = lambda path: False,
) -> MapNode:
    """Rebuild a nested tree from ordered ``(key_path, value)`` pairs.

    Args:
        items: Flattened content in output order
        is_map_path: Returns True for key-paths whose children are map keys
            even when numeric (key-value fields)

    Returns:
        Root map node; keys appear in the order they were first seen

    Example:
        >>> build_tree([("a.0", "x"), ("a.1", "y")]).to_plain()
        {'a': ['x', 'y']}
        >>> build_tree([("m.1", "x")], is_map_path=lambda p: p == "m").to_plain()
        {'m': {'1': 'x'}}
    """
    root = MapNode()

    for key_path, value in items:
        segments = key_path.split(".")
        container: ListNode | MapNode = root
        path = ""

        for depth, segment in enumerate(segments[:-1]):
            path = f"{path}.{segment}" if path else segment
            if isinstance(container, ListNode) and not segment.isdigit():
                # Non-index key under a list; keep it rather than lose it
                container = _promote_to_map(container, segments, depth, root)

            child = _get_child(container, segment)
            if not isinstance(child, (ListNode, MapNode)):
                child = _new_container(path, segments[depth + 1], is_map_path)
                _set_child(container, segment, child)
            container = child

        last = segments[-1]
        if isinstance(container, ListNode) and not last.isdigit():
            container = _promote_to_map(container, segments, len(segments) - 1, root)

        node = from_plain(value)
        existing = _get_child(container, last)
        # An explicit empty `{}`/`[]` must not wipe children already placed
        if existing is not None and _is_empty_container(node) and not isinstance(existing, Leaf):
            continue
        _set_child(container, last, node)

    return root


def _promote_to_map(container: ListNode, segments: list[str], depth: int, root: MapNode) -> MapNode:
    """Replace a list container with an equivalent map keyed by index strings."""
    promoted = MapNode({str(i): node for i, node in sorted(container.items.items())})

    parent: ListNode | MapNode = root
    for segment in segments[: depth - 1]:
        child = _get_child(parent, segment)
        assert isinstance(child, (ListNode, MapNode))
        parent = child
    _set_child(parent, segments[depth - 1], promoted)
    return promoted
