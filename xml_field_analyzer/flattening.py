"""Flatten analysis results into list[dict] rows for tables and export."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .models import AggregationResult, ComparisonResult, ElementTreeNode, FieldRecord, MergedFieldNode, ValueCount
from .paths import remove_prefix_from_name, remove_prefix_from_path
from .tree import build_field_tree, in_document_order, walk_field_tree

FIELD_COLUMNS = [
    'Field Name', 'Depth', 'Path', 'Is Nested', 'Has Children', 'Child Count',
    'Has Text', 'Text Content', 'Attributes', 'Occurrences',
]
NAME_SUMMARY_COLUMNS = [
    'Field Name', 'Files With Field', 'Presence %', 'Total Occurrences',
    'Avg Occurrences / File', 'Unique Values', 'Top Values', 'Min Depth',
]
PATH_SUMMARY_COLUMNS = [
    'Path', 'Field Name', 'Depth', 'Has Children', 'Files With Field', 'Presence %',
    'Total Occurrences', 'Avg Occurrences / File', 'Unique Values', 'Top Values',
]
DIFFERENCE_COLUMNS = ['Field Name', 'Present In', 'Absent In', 'Depth Variations']
UNIQUE_COLUMNS = ['File', 'Field Name', 'Path']
MERGED_COLUMNS = ['Field Name', 'Path', 'Depth', 'Present In', 'Structural Difference', 'Alternative Paths']


def yes_no(flag: bool) -> str:
    return 'Yes' if flag else 'No'


def format_value_counts(value_counts: List[ValueCount], limit: int = 5) -> str:
    shown = [f"{vc.value} ({vc.count}, {vc.percentage:.1f}%)" for vc in value_counts[:limit]]
    if len(value_counts) > limit:
        shown.append(f"+{len(value_counts) - limit} more")
    return '; '.join(shown)


def field_rows(fields: List[FieldRecord], prefix: str = '') -> List[Dict[str, Any]]:
    return [
        {
            'Field Name': remove_prefix_from_name(f.name, prefix),
            'Depth': f.depth,
            'Path': remove_prefix_from_path(f.path, prefix),
            'Is Nested': yes_no(f.is_nested),
            'Has Children': yes_no(f.has_children),
            'Child Count': f.child_count,
            'Has Text': yes_no(f.has_text),
            'Text Content': f.text_content,
            'Attributes': '; '.join(f.attributes),
            'Occurrences': f.occurrences,
        }
        for f in in_document_order(fields)
    ]


def name_summary_rows(aggregation: AggregationResult, prefix: str = '') -> List[Dict[str, Any]]:
    rows = []
    for stat in sorted(aggregation.field_name_summary, key=lambda s: (-s.files_with_field, s.name)):
        rows.append({
            'Field Name': remove_prefix_from_name(stat.name, prefix),
            'Files With Field': stat.files_with_field,
            'Presence %': round(stat.presence_percent, 1),
            'Total Occurrences': stat.total_occurrences,
            'Avg Occurrences / File': round(stat.average_occurrences_per_file, 2),
            'Unique Values': stat.unique_values_count,
            'Top Values': format_value_counts(stat.value_counts),
            'Min Depth': stat.min_depth,
        })
    return rows


def path_summary_rows(aggregation: AggregationResult, prefix: str = '') -> List[Dict[str, Any]]:
    rows = []
    for node, level in walk_field_tree(build_field_tree(aggregation.field_path_summary)):
        stat = node.record
        rows.append({
            'Path': remove_prefix_from_path(stat.path, prefix),
            'Field Name': '  ' * level + remove_prefix_from_name(stat.name, prefix),
            'Depth': stat.depth,
            'Has Children': yes_no(stat.has_children),
            'Files With Field': stat.files_with_field,
            'Presence %': round(stat.presence_percent, 1),
            'Total Occurrences': stat.total_occurrences,
            'Avg Occurrences / File': round(stat.average_occurrences_per_file, 2),
            'Unique Values': stat.unique_values_count,
            'Top Values': format_value_counts(stat.value_counts),
        })
    return rows


def difference_rows(result: ComparisonResult, prefix: str = '', only_differing: bool = True) -> List[Dict[str, Any]]:
    rows = []
    for name, diff in result.field_differences.items():
        if only_differing and not diff.absent_in and len(diff.depth_variations) < 2:
            continue
        rows.append({
            'Field Name': remove_prefix_from_name(name, prefix),
            'Present In': ', '.join(diff.present_in),
            'Absent In': ', '.join(diff.absent_in),
            'Depth Variations': '; '.join(
                f"Depth {depth}: {', '.join(files)}" for depth, files in sorted(diff.depth_variations.items())
            ),
        })
    return rows


def unique_field_rows(result: ComparisonResult, prefix: str = '') -> List[Dict[str, Any]]:
    return [
        {
            'File': filename,
            'Field Name': remove_prefix_from_name(record.name, prefix),
            'Path': remove_prefix_from_path(record.path, prefix),
        }
        for filename, records in result.unique_fields.items()
        for record in records
    ]


def merged_rows(nodes: List[MergedFieldNode], prefix: str = '') -> List[Dict[str, Any]]:
    rows = []
    for tree_node, level in walk_field_tree(build_field_tree(nodes)):
        node = tree_node.record
        rows.append({
            'Field Name': '  ' * level + remove_prefix_from_name(node.name, prefix),
            'Path': remove_prefix_from_path(node.path, prefix),
            'Depth': node.depth,
            'Present In': ', '.join(node.present_in_files),
            'Structural Difference': yes_no(node.structural_difference),
            'Alternative Paths': '; '.join(
                f"{remove_prefix_from_path(alt.path, prefix)} [{', '.join(alt.files)}]"
                for alt in node.alternative_paths_with_files
            ),
        })
    return rows


def tree_outline(nodes, prefix: str = '', indent: str = '  ') -> str:
    """Plain-text outline of a field forest."""
    lines = []
    for node, level in walk_field_tree(nodes):
        suffix = f" (x{node.record.occurrences})" if getattr(node.record, 'occurrences', 1) > 1 else ''
        lines.append(f"{indent * level}{remove_prefix_from_name(node.name, prefix)}{suffix}")
    return '\n'.join(lines)


def element_tree_outline(tree: Optional[ElementTreeNode], prefix: str = '', indent: str = '  ') -> str:
    if tree is None:
        return ''
    lines = []
    stack = [(tree, 0)]
    while stack:
        node, level = stack.pop()
        label = remove_prefix_from_name(node.name, prefix)
        if node.attributes:
            label += ' [' + ', '.join(f'{k}="{v}"' for k, v in node.attributes) + ']'
        if node.has_text:
            label += f": {node.text_content}"
        lines.append(f"{indent * level}{label}")
        for child in reversed(node.children):
            stack.append((child, level + 1))
    return '\n'.join(lines)
