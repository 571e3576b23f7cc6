"""Multi-File Comparator.

Membership (common / unique / present / absent) is decided by field name;
structural differences are decided by path.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Set

from .aggregation import aggregate
from .models import AlternativePath, ComparisonResult, FieldDifference, FieldRecord, FileFieldSet
from .tree import in_document_order

logger = logging.getLogger(__name__)


def all_field_names(file_sets: List[FileFieldSet]) -> List[str]:
    """Distinct field names in first-seen order across the files."""
    names: Dict[str, None] = {}
    for file_set in file_sets:
        for record in file_set.fields:
            names.setdefault(record.name, None)
    return list(names)


def common_field_names(file_sets: List[FileFieldSet]) -> List[str]:
    if not file_sets:
        return []
    name_sets = [{r.name for r in fs.fields} for fs in file_sets]
    return [name for name in all_field_names(file_sets) if all(name in s for s in name_sets)]


def paths_with_files(file_sets: List[FileFieldSet], name: str) -> List[AlternativePath]:
    """Every distinct path holding ``name`` with the files that exhibit it."""
    by_path: Dict[str, AlternativePath] = {}
    for file_set in file_sets:
        for record in file_set.fields:
            if record.name != name:
                continue
            entry = by_path.setdefault(record.path, AlternativePath(path=record.path))
            if file_set.filename not in entry.files:
                entry.files.append(file_set.filename)
    return list(by_path.values())


def find_structural_differences(file_sets: List[FileFieldSet], names: List[str]) -> Dict[str, List[AlternativePath]]:
    """Names from ``names`` that sit at more than one path across the files."""
    if len(file_sets) < 2:
        return {}
    differences: Dict[str, List[AlternativePath]] = {}
    for name in names:
        alternatives = paths_with_files(file_sets, name)
        if len(alternatives) > 1:
            differences[name] = alternatives
    return differences


def _representative_records(file_sets: List[FileFieldSet], names: Set[str]) -> List[FieldRecord]:
    chosen: Dict[str, FieldRecord] = {}
    for file_set in file_sets:
        for record in file_set.fields:
            if record.name in names and record.path not in chosen:
                chosen[record.path] = replace(record)
    return list(chosen.values())


def compare_fields(file_sets: List[FileFieldSet]) -> ComparisonResult:
    if not file_sets:
        return ComparisonResult()

    names = all_field_names(file_sets)
    common = common_field_names(file_sets)

    unique_fields: Dict[str, List[FieldRecord]] = {}
    for index, file_set in enumerate(file_sets):
        # A lone file has nothing to be unique against.
        if len(file_sets) < 2:
            unique_fields[file_set.filename] = []
            continue
        other_names = {r.name for j, other in enumerate(file_sets) if j != index for r in other.fields}
        unique_fields[file_set.filename] = [
            replace(record) for record in in_document_order(file_set.fields) if record.name not in other_names
        ]

    field_differences: Dict[str, FieldDifference] = {}
    for name in names:
        diff = FieldDifference(field_name=name)
        for file_set in file_sets:
            depths = sorted({r.depth for r in file_set.fields if r.name == name})
            if not depths:
                diff.absent_in.append(file_set.filename)
                continue
            diff.present_in.append(file_set.filename)
            for depth in depths:
                diff.depth_variations.setdefault(depth, []).append(file_set.filename)
        field_differences[name] = diff

    result = ComparisonResult(
        common_fields=in_document_order(_representative_records(file_sets, set(common))),
        common_field_names=common,
        unique_fields=unique_fields,
        field_differences=field_differences,
        structural_differences=find_structural_differences(file_sets, common),
        aggregation=aggregate(file_sets),
        total_unique_fields=len(names),
    )
    logger.debug(
        "Compared %d files: %d common, %d structural differences",
        len(file_sets), len(common), len(result.structural_differences),
    )
    return result
