"""Filter Evaluator: pick the files whose field values match conditions."""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional

from .aggregation import record_values
from .models import FileFieldSet, FilterCondition
from .paths import remove_prefix_from_name

logger = logging.getLogger(__name__)

WILDCARD = '*'


def wildcard_to_regex(pattern: str, case_sensitive: bool = False):
    """Compile a pattern where '*' is the only wildcard; everything else is literal."""
    body = '.*'.join(re.escape(part) for part in pattern.split(WILDCARD))
    flags = re.DOTALL if case_sensitive else re.DOTALL | re.IGNORECASE
    return re.compile(f"^{body}$", flags)


def matches(value: Optional[str], pattern: str, case_sensitive: bool = False) -> bool:
    if value is None or pattern is None:
        return False
    if WILDCARD not in pattern:
        if case_sensitive:
            return value == pattern
        return value.lower() == pattern.lower()
    return wildcard_to_regex(pattern, case_sensitive).match(value) is not None


def normalize_field_name(name: str, prefix: str = '') -> str:
    return remove_prefix_from_name((name or '').strip(), prefix)


def active_conditions(conditions: Optional[Iterable[FilterCondition]]) -> List[FilterCondition]:
    return [c for c in (conditions or []) if c is not None and c.is_active]


def file_satisfies(file_set: FileFieldSet, condition: FilterCondition, prefix: str = '') -> bool:
    wanted = normalize_field_name(condition.field, prefix)
    pattern = condition.value.strip()
    for record in file_set.fields:
        if normalize_field_name(record.name, prefix) != wanted:
            continue
        if any(matches(value, pattern, condition.case_sensitive) for value in record_values(record)):
            return True
    return False


def select_files(
    file_sets: List[FileFieldSet],
    conditions: Optional[Iterable[FilterCondition]],
    prefix: str = '',
) -> List[FileFieldSet]:
    """Files satisfying every active condition.

    No active conditions means no filtering: the input comes back unchanged.
    """
    active = active_conditions(conditions)
    if not file_sets or not active:
        return list(file_sets or [])

    selected = [fs for fs in file_sets if all(file_satisfies(fs, c, prefix) for c in active)]
    logger.debug("Filter selected %d of %d files", len(selected), len(file_sets))
    return selected


def field_name_options(file_sets: List[FileFieldSet], prefix: str = '') -> List[str]:
    """Normalized field names that carry at least one value, for condition pickers."""
    names: Dict[str, None] = {}
    for file_set in file_sets:
        for record in file_set.fields:
            if record_values(record):
                names.setdefault(normalize_field_name(record.name, prefix), None)
    return sorted(names)
