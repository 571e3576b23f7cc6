"""Field Merger: one superset structure built from many files.

Files are processed in order. A path seen for the first time is placed
after the subtree of its previous sibling from the same file, else before
its next already-merged sibling, else at the end of its parent's subtree.
The merged list therefore keeps reading like a document.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .comparison import common_field_names, find_structural_differences
from .models import AlternativePath, FileFieldSet, MergedFieldNode
from .paths import is_descendant_path, parent_path_of
from .tree import in_document_order

logger = logging.getLogger(__name__)


def _index_of(merged: List[MergedFieldNode], path: str) -> Optional[int]:
    for i, node in enumerate(merged):
        if node.path == path:
            return i
    return None


def _subtree_end(merged: List[MergedFieldNode], start: int) -> int:
    root_path = merged[start].path
    end = start + 1
    while end < len(merged) and is_descendant_path(merged[end].path, root_path):
        end += 1
    return end


def _insertion_index(
    merged: List[MergedFieldNode],
    parent_path: str,
    previous_sibling: Optional[str],
    next_siblings: List[str],
) -> int:
    if previous_sibling is not None:
        idx = _index_of(merged, previous_sibling)
        if idx is not None:
            return _subtree_end(merged, idx)
    for sibling in next_siblings:
        idx = _index_of(merged, sibling)
        if idx is not None:
            return idx
    if parent_path:
        idx = _index_of(merged, parent_path)
        if idx is not None:
            return _subtree_end(merged, idx)
    return len(merged)


def _renumber_siblings(merged: List[MergedFieldNode]) -> None:
    counters: Dict[str, int] = {}
    for node in merged:
        node.order_index = counters.get(node.parent_path, 0)
        counters[node.parent_path] = node.order_index + 1


def merge_fields(file_sets: List[FileFieldSet]) -> List[MergedFieldNode]:
    merged: List[MergedFieldNode] = []
    by_path: Dict[str, MergedFieldNode] = {}

    for file_set in file_sets:
        ordered = in_document_order(file_set.fields)
        siblings: Dict[str, List[str]] = {}
        position: Dict[str, int] = {}
        for record in ordered:
            group = siblings.setdefault(parent_path_of(record.path), [])
            position[record.path] = len(group)
            group.append(record.path)

        last_child_of: Dict[str, str] = {}
        for record in ordered:
            parent_path = parent_path_of(record.path)
            node = by_path.get(record.path)
            if node is None:
                node = MergedFieldNode(
                    name=record.name,
                    path=record.path,
                    parent_path=parent_path,
                    depth=record.depth,
                    order_index=record.order_index,
                    has_children=record.has_children,
                )
                later = siblings[parent_path][position[record.path] + 1:]
                index = _insertion_index(merged, parent_path, last_child_of.get(parent_path), later)
                merged.insert(index, node)
                by_path[record.path] = node
            else:
                node.has_children = node.has_children or record.has_children
            if file_set.filename not in node.present_in_files:
                node.present_in_files.append(file_set.filename)
            last_child_of[parent_path] = record.path

    _renumber_siblings(merged)

    differences = find_structural_differences(file_sets, common_field_names(file_sets))
    for node in merged:
        alternatives = differences.get(node.name)
        if alternatives:
            node.structural_difference = True
            node.alternative_paths_with_files = [AlternativePath(path=a.path, files=list(a.files)) for a in alternatives]

    logger.debug("Merged %d files into %d nodes", len(file_sets), len(merged))
    return merged
