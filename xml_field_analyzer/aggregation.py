"""Field Aggregator: presence, occurrence and value statistics across files.

Statistics are computed twice: once keyed by field name (how common is this
field anywhere) and once keyed by exact path (how common is it at this
position). Path-level entries carry enough structure (parent path, order
index, children flag) to be fed back through the tree builder.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from .models import AggregationResult, FieldRecord, FileFieldSet, NameSummary, PathSummary, ValueCount
from .paths import parent_path_of
from .tree import build_field_tree, in_document_order

logger = logging.getLogger(__name__)


def record_values(record: FieldRecord) -> Dict[str, int]:
    """Value distribution of a record; text_content is only a fallback."""
    if record.value_counts is not None:
        return record.value_counts
    if record.text_content:
        return {record.text_content: 1}
    return {}


def percent(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole else 0.0


def _value_count_list(values: Dict[str, int], total_occurrences: int) -> List[ValueCount]:
    entries = [ValueCount(value=v, count=c, percentage=percent(c, total_occurrences)) for v, c in values.items()]
    # Stable: equal counts keep first-seen order.
    entries.sort(key=lambda e: -e.count)
    return entries


def _new_accumulator() -> Dict[str, Any]:
    return {'files': {}, 'total': 0, 'values': {}}


def _accumulate(acc: Dict[str, Any], file_index: int, filename: str, record: FieldRecord) -> None:
    acc['files'].setdefault(file_index, filename)
    acc['total'] += record.occurrences
    for value, count in record_values(record).items():
        acc['values'][value] = acc['values'].get(value, 0) + count


def aggregate(file_sets: List[FileFieldSet]) -> AggregationResult:
    files_count = len(file_sets)
    if files_count == 0:
        return AggregationResult()

    by_name: Dict[str, Dict[str, Any]] = {}
    by_path: Dict[str, Dict[str, Any]] = {}
    total_instances = 0

    for file_index, file_set in enumerate(file_sets):
        total_instances += len(file_set.fields)
        for record in file_set.fields:
            name_acc = by_name.get(record.name)
            if name_acc is None:
                name_acc = _new_accumulator()
                name_acc.update({'sample_paths': {}, 'min_depth': record.depth, 'max_depth': record.depth})
                by_name[record.name] = name_acc
            _accumulate(name_acc, file_index, file_set.filename, record)
            name_acc['sample_paths'].setdefault(file_set.filename, record.path)
            name_acc['min_depth'] = min(name_acc['min_depth'], record.depth)
            name_acc['max_depth'] = max(name_acc['max_depth'], record.depth)

            path_acc = by_path.get(record.path)
            if path_acc is None:
                path_acc = _new_accumulator()
                path_acc.update({
                    'name': record.name,
                    'depth': record.depth,
                    'order_index': record.order_index,
                    'has_children': False,
                })
                by_path[record.path] = path_acc
            _accumulate(path_acc, file_index, file_set.filename, record)
            path_acc['has_children'] = path_acc['has_children'] or record.has_children

    name_summary = [
        NameSummary(
            name=name,
            files_with_field=len(acc['files']),
            presence_percent=percent(len(acc['files']), files_count),
            total_occurrences=acc['total'],
            average_occurrences_per_file=acc['total'] / files_count,
            value_counts=_value_count_list(acc['values'], acc['total']),
            unique_values_count=len(acc['values']),
            sample_paths=dict(acc['sample_paths']),
            files=list(acc['files'].values()),
            min_depth=acc['min_depth'],
            max_depth=acc['max_depth'],
        )
        for name, acc in by_name.items()
    ]

    path_summary = [
        PathSummary(
            path=path,
            name=acc['name'],
            parent_path=parent_path_of(path),
            depth=acc['depth'],
            order_index=acc['order_index'],
            has_children=acc['has_children'],
            files_with_field=len(acc['files']),
            presence_percent=percent(len(acc['files']), files_count),
            total_occurrences=acc['total'],
            average_occurrences_per_file=acc['total'] / files_count,
            value_counts=_value_count_list(acc['values'], acc['total']),
            unique_values_count=len(acc['values']),
            files=list(acc['files'].values()),
        )
        for path, acc in by_path.items()
    ]

    logger.debug("Aggregated %d names / %d paths over %d files", len(name_summary), len(path_summary), files_count)
    return AggregationResult(
        files_count=files_count,
        total_field_instances=total_instances,
        average_fields_per_file=total_instances / files_count,
        unique_field_names=len(name_summary),
        unique_field_paths=len(path_summary),
        field_name_summary=name_summary,
        field_path_summary=in_document_order(path_summary),
    )


def build_path_summary_tree(aggregation: AggregationResult):
    """Hierarchical view over the path-level statistics."""
    return build_field_tree(aggregation.field_path_summary)
