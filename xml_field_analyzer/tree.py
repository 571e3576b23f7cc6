"""Field Tree Builder: rebuild parent/child relations from flat records.

Works for any record type exposing ``name``, ``path``, ``depth`` and
``order_index`` (field records, merged nodes, path summaries). Records with
identical paths stay distinct nodes; a child attaches to the nearest
preceding record holding its parent path.
"""
from __future__ import annotations

from bisect import bisect_left
from copy import copy
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional

from .models import FieldTreeNode
from .paths import parent_path_of

SiblingCompare = Callable[[Any, Any], int]


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_siblings(a: Any, b: Any) -> int:
    """Order by order_index under the same parent, then depth, then path."""
    if parent_path_of(a.path) == parent_path_of(b.path) and a.order_index != b.order_index:
        return _cmp(a.order_index, b.order_index)
    if a.depth != b.depth:
        return _cmp(a.depth, b.depth)
    return _cmp(a.path, b.path)


def root_sort_key(record: Any):
    """Total order for roots, which may come from different parents."""
    return (record.depth, parent_path_of(record.path), record.order_index, record.path)


def _find_parent_index(indices_by_path: Dict[str, List[int]], path: str, index: int) -> Optional[int]:
    parent_path = parent_path_of(path)
    if not parent_path:
        return None
    candidates = indices_by_path.get(parent_path)
    if not candidates:
        return None
    pos = bisect_left(candidates, index)
    if pos > 0:
        return candidates[pos - 1]
    # Parent only appears later in the sequence; take the first one.
    return candidates[0]


def build_field_tree(records: List[Any], compare: Optional[SiblingCompare] = None) -> List[FieldTreeNode]:
    """Return the forest of root nodes, siblings sorted by ``compare``.

    A record whose parent path is not held by any other record stays a root.
    """
    root_key = None if compare else root_sort_key
    compare = compare or compare_siblings
    nodes = [FieldTreeNode(record=record, node_id=i) for i, record in enumerate(records)]

    indices_by_path: Dict[str, List[int]] = {}
    for i, record in enumerate(records):
        indices_by_path.setdefault(record.path, []).append(i)

    roots: List[FieldTreeNode] = []
    for i, node in enumerate(nodes):
        parent_index = _find_parent_index(indices_by_path, node.record.path, i)
        if parent_index is None:
            roots.append(node)
        else:
            nodes[parent_index].children.append(node)

    key = cmp_to_key(lambda x, y: compare(x.record, y.record))
    for node in nodes:
        if len(node.children) > 1:
            node.children.sort(key=key)
    if root_key is not None:
        roots.sort(key=lambda node: root_key(node.record))
    else:
        roots.sort(key=key)
    return roots


def walk_field_tree(nodes: List[FieldTreeNode]):
    """Yield (node, level) pairs in pre-order."""
    stack = [(node, 0) for node in reversed(nodes)]
    while stack:
        node, level = stack.pop()
        yield node, level
        for child in reversed(node.children):
            stack.append((child, level + 1))


def flatten_field_tree(nodes: List[FieldTreeNode]) -> List[Any]:
    return [node.record for node, _ in walk_field_tree(nodes)]


def in_document_order(records: List[Any], compare: Optional[SiblingCompare] = None) -> List[Any]:
    """Re-sort flat records into hierarchical (pre-order) sequence."""
    return flatten_field_tree(build_field_tree(records, compare))


def search_field_tree(nodes: List[FieldTreeNode], term: str = '', nested_only: bool = False) -> List[FieldTreeNode]:
    """Keep nodes whose name contains ``term`` plus their ancestors.

    Matching is case-insensitive. Returns copies; the input forest is untouched.
    """
    needle = (term or '').lower()

    def matches(node: FieldTreeNode) -> bool:
        if nested_only and node.depth <= 0:
            return False
        return needle in node.name.lower()

    def prune(node: FieldTreeNode) -> Optional[FieldTreeNode]:
        kept_children = [c for c in (prune(child) for child in node.children) if c is not None]
        if not kept_children and not matches(node):
            return None
        pruned = copy(node)
        pruned.children = kept_children
        return pruned

    return [n for n in (prune(node) for node in nodes) if n is not None]
