"""Data model shared by the extraction and analysis functions.

Records are plain dataclasses. Analysis functions never mutate their inputs;
every result is freshly built on each call.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class FieldRecord:
    """One element class within one document, folded by (name, depth)."""

    name: str
    path: str
    parent_path: str = ''
    depth: int = 0
    order_index: int = 0
    has_children: bool = False
    child_count: int = 0
    has_text: bool = False
    text_content: str = ''
    value_counts: Optional[Dict[str, int]] = None
    attributes: List[str] = field(default_factory=list)
    occurrences: int = 1

    @property
    def is_nested(self) -> bool:
        return self.depth > 0


@dataclass
class FileFieldSet:
    filename: str
    fields: List[FieldRecord] = field(default_factory=list)

    def field_names(self) -> List[str]:
        seen: Dict[str, None] = {}
        for record in self.fields:
            seen.setdefault(record.name, None)
        return list(seen)


@dataclass
class FieldTreeNode:
    """A record placed in a reconstructed hierarchy."""

    record: Any
    children: List['FieldTreeNode'] = field(default_factory=list)
    node_id: int = 0

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def path(self) -> str:
        return self.record.path

    @property
    def depth(self) -> int:
        return self.record.depth


@dataclass
class ValueCount:
    value: str
    count: int
    percentage: float = 0.0


@dataclass
class NameSummary:
    name: str
    files_with_field: int = 0
    presence_percent: float = 0.0
    total_occurrences: int = 0
    average_occurrences_per_file: float = 0.0
    value_counts: List[ValueCount] = field(default_factory=list)
    unique_values_count: int = 0
    sample_paths: Dict[str, str] = field(default_factory=dict)
    files: List[str] = field(default_factory=list)
    min_depth: int = 0
    max_depth: int = 0


@dataclass
class PathSummary:
    path: str
    name: str
    parent_path: str = ''
    depth: int = 0
    order_index: int = 0
    has_children: bool = False
    files_with_field: int = 0
    presence_percent: float = 0.0
    total_occurrences: int = 0
    average_occurrences_per_file: float = 0.0
    value_counts: List[ValueCount] = field(default_factory=list)
    unique_values_count: int = 0
    files: List[str] = field(default_factory=list)


@dataclass
class AggregationResult:
    files_count: int = 0
    total_field_instances: int = 0
    average_fields_per_file: float = 0.0
    unique_field_names: int = 0
    unique_field_paths: int = 0
    field_name_summary: List[NameSummary] = field(default_factory=list)
    field_path_summary: List[PathSummary] = field(default_factory=list)

    def name_stat(self, name: str) -> Optional[NameSummary]:
        for stat in self.field_name_summary:
            if stat.name == name:
                return stat
        return None

    def path_stat(self, path: str) -> Optional[PathSummary]:
        for stat in self.field_path_summary:
            if stat.path == path:
                return stat
        return None


@dataclass
class AlternativePath:
    path: str
    files: List[str] = field(default_factory=list)


@dataclass
class FieldDifference:
    field_name: str
    present_in: List[str] = field(default_factory=list)
    absent_in: List[str] = field(default_factory=list)
    depth_variations: Dict[int, List[str]] = field(default_factory=dict)


@dataclass
class ComparisonResult:
    common_fields: List[FieldRecord] = field(default_factory=list)
    common_field_names: List[str] = field(default_factory=list)
    unique_fields: Dict[str, List[FieldRecord]] = field(default_factory=dict)
    field_differences: Dict[str, FieldDifference] = field(default_factory=dict)
    structural_differences: Dict[str, List[AlternativePath]] = field(default_factory=dict)
    aggregation: AggregationResult = field(default_factory=AggregationResult)
    total_unique_fields: int = 0


@dataclass
class MergedFieldNode:
    name: str
    path: str
    parent_path: str = ''
    depth: int = 0
    order_index: int = 0
    has_children: bool = False
    present_in_files: List[str] = field(default_factory=list)
    structural_difference: bool = False
    alternative_paths_with_files: List[AlternativePath] = field(default_factory=list)


@dataclass
class FilterCondition:
    field: str = ''
    value: str = ''
    case_sensitive: bool = False

    @property
    def is_active(self) -> bool:
        return bool(self.field) and bool((self.value or '').strip())


@dataclass
class FileStatistics:
    total_fields: int = 0
    unique_field_names: int = 0
    max_depth: int = 0
    nested_fields: int = 0
    fields_with_children: int = 0
    fields_with_text: int = 0
    fields_with_attributes: int = 0


@dataclass
class ElementTreeNode:
    """A literal mirror of one element, without (name, depth) folding."""

    name: str
    has_text: bool = False
    text_content: str = ''
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    children: List['ElementTreeNode'] = field(default_factory=list)
