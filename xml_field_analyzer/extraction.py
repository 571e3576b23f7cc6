"""Field Extractor: reduce one parsed document to flat field records."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .config import get_setting
from .models import ElementTreeNode, FieldRecord, FileStatistics
from .parsing import (
    attribute_name,
    element_children,
    element_name,
    element_text,
    element_text_content,
    namespace_declarations,
)
from .paths import join_path

logger = logging.getLogger(__name__)


def extract_fields(root, text_sample_length: Optional[int] = None) -> List[FieldRecord]:
    """Walk the document depth-first and fold elements by (name, depth).

    Every element instance is visited exactly once. Repeats of an already
    known (name, depth) add to the record's occurrences and value counts.
    The output is sorted by depth, then case-insensitively by name.
    """
    if root is None:
        return []
    if text_sample_length is None:
        text_sample_length = get_setting('analysis.text_sample_length', 100)

    records: List[FieldRecord] = []
    by_key: Dict[Tuple[str, int], FieldRecord] = {}
    sibling_counts: Dict[str, int] = {}

    # Explicit stack keeps pre-order without hitting the recursion limit on deep documents.
    stack = [(root, 0, '')]
    while stack:
        element, depth, parent_path = stack.pop()
        name = element_name(element)
        path = join_path(parent_path, name)
        children = element_children(element)
        text = element_text(element)
        attributes = [decl for decl, _ in namespace_declarations(element)]
        attributes += [attribute_name(element, key) for key in element.attrib.keys()]

        record = by_key.get((name, depth))
        if record is None:
            content = element_text_content(element)
            order_index = sibling_counts.get(parent_path, 0)
            sibling_counts[parent_path] = order_index + 1
            record = FieldRecord(
                name=name,
                path=path,
                parent_path=parent_path,
                depth=depth,
                order_index=order_index,
                has_children=bool(children),
                child_count=len(children),
                has_text=bool(content),
                text_content=content[:text_sample_length],
                value_counts={},
                attributes=[],
                occurrences=0,
            )
            by_key[(name, depth)] = record
            records.append(record)

        record.occurrences += 1
        if text:
            record.value_counts[text] = record.value_counts.get(text, 0) + 1
        for attr in attributes:
            if attr not in record.attributes:
                record.attributes.append(attr)

        for child in reversed(children):
            stack.append((child, depth + 1, path))

    logger.debug("Extracted %d field records from <%s>", len(records), element_name(root))
    return sorted(records, key=lambda r: (r.depth, r.name.lower(), r.name))


def compute_file_statistics(fields: List[FieldRecord]) -> FileStatistics:
    return FileStatistics(
        total_fields=len(fields),
        unique_field_names=len({f.name for f in fields}),
        max_depth=max([f.depth for f in fields], default=0),
        nested_fields=sum(1 for f in fields if f.is_nested),
        fields_with_children=sum(1 for f in fields if f.has_children),
        fields_with_text=sum(1 for f in fields if f.has_text),
        fields_with_attributes=sum(1 for f in fields if f.attributes),
    )


def build_element_tree(root, text_sample_length: Optional[int] = None) -> Optional[ElementTreeNode]:
    """Mirror the document element by element, repeated siblings included."""
    if root is None:
        return None
    if text_sample_length is None:
        text_sample_length = get_setting('analysis.tree_text_sample_length', 50)

    def make_node(element) -> ElementTreeNode:
        text = element_text_content(element)
        return ElementTreeNode(
            name=element_name(element),
            has_text=bool(text),
            text_content=text[:text_sample_length],
            attributes=namespace_declarations(element) + [
                (attribute_name(element, k), v) for k, v in element.attrib.items()
            ],
        )

    tree = make_node(root)
    stack = [(root, tree)]
    while stack:
        element, node = stack.pop()
        for child in element_children(element):
            child_node = make_node(child)
            node.children.append(child_node)
            stack.append((child, child_node))
    return tree
