from __future__ import annotations

import logging
from typing import List

import gradio as gr
import pandas as pd

from .comparison import compare_fields
from .filtering import field_name_options, select_files
from .flattening import (
    DIFFERENCE_COLUMNS,
    MERGED_COLUMNS,
    NAME_SUMMARY_COLUMNS,
    PATH_SUMMARY_COLUMNS,
    UNIQUE_COLUMNS,
    difference_rows,
    merged_rows,
    name_summary_rows,
    path_summary_rows,
    tree_outline,
    unique_field_rows,
)
from .handlers_single import write_rows
from .merging import merge_fields
from .models import FilterCondition
from .tree import build_field_tree

logger = logging.getLogger(__name__)

CONDITION_COLUMNS = ["Field", "Value", "Case Sensitive"]


def _truthy(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', 'yes', '1', 'y')
    return bool(value)


def parse_conditions(conditions_df) -> List[FilterCondition]:
    if conditions_df is None:
        return []
    try:
        rows = conditions_df[CONDITION_COLUMNS].values.tolist()
    except (KeyError, AttributeError, TypeError):
        rows = [list(row) for row in conditions_df]

    conditions = []
    for row in rows:
        row = list(row) + [None] * (3 - len(row))
        field, value, case_sensitive = row[:3]
        conditions.append(FilterCondition(
            field='' if field is None else str(field).strip(),
            value='' if value is None else str(value),
            case_sensitive=_truthy(case_sensitive),
        ))
    return conditions


def update_filter_fields(file_sets, prefix):
    return gr.update(choices=field_name_options(file_sets or [], prefix or ''))


def add_condition_handler(conditions_df, field, value, case_sensitive):
    rows = [] if conditions_df is None else pd.DataFrame(conditions_df, columns=CONDITION_COLUMNS).values.tolist()
    rows = [r for r in rows if any(str(c).strip() for c in r if c is not None)]
    if field and value and value.strip():
        rows.append([field, value, bool(case_sensitive)])
    return pd.DataFrame(rows, columns=CONDITION_COLUMNS)


def clear_conditions_handler():
    return pd.DataFrame(columns=CONDITION_COLUMNS)


def run_comparison_handler(file_sets, conditions_df, prefix):
    """Filter the loaded files, then compare, aggregate and merge the selection."""
    prefix = prefix or ''
    empty = (
        "",
        pd.DataFrame(columns=DIFFERENCE_COLUMNS),
        pd.DataFrame(columns=UNIQUE_COLUMNS),
        pd.DataFrame(columns=NAME_SUMMARY_COLUMNS),
        pd.DataFrame(columns=PATH_SUMMARY_COLUMNS),
        pd.DataFrame(columns=MERGED_COLUMNS),
    )
    file_sets = list(file_sets or [])
    if len(file_sets) < 2:
        return ("Load at least two files to compare.",) + empty

    conditions = parse_conditions(conditions_df)
    selected = select_files(file_sets, conditions, prefix)
    if not selected:
        return (f"No files match the filter ({len(file_sets)} loaded).",) + empty

    result = compare_fields(selected)
    merged = merge_fields(selected)
    aggregation = result.aggregation

    status = (
        f"Comparing {len(selected)} of {len(file_sets)} files | "
        f"Common fields: {len(result.common_field_names)} | "
        f"Unique field names: {aggregation.unique_field_names} | "
        f"Unique paths: {aggregation.unique_field_paths} | "
        f"Structural differences: {len(result.structural_differences)}"
    )
    return (
        status,
        tree_outline(build_field_tree(result.common_fields), prefix),
        pd.DataFrame(difference_rows(result, prefix), columns=DIFFERENCE_COLUMNS),
        pd.DataFrame(unique_field_rows(result, prefix), columns=UNIQUE_COLUMNS),
        pd.DataFrame(name_summary_rows(aggregation, prefix), columns=NAME_SUMMARY_COLUMNS),
        pd.DataFrame(path_summary_rows(aggregation, prefix), columns=PATH_SUMMARY_COLUMNS),
        pd.DataFrame(merged_rows(merged, prefix), columns=MERGED_COLUMNS),
    )


REPORTS = {
    "Field Differences": (DIFFERENCE_COLUMNS, lambda r, m, p: difference_rows(r, p, only_differing=False)),
    "Unique Fields": (UNIQUE_COLUMNS, lambda r, m, p: unique_field_rows(r, p)),
    "Field Name Summary": (NAME_SUMMARY_COLUMNS, lambda r, m, p: name_summary_rows(r.aggregation, p)),
    "Field Path Summary": (PATH_SUMMARY_COLUMNS, lambda r, m, p: path_summary_rows(r.aggregation, p)),
    "Merged Structure": (MERGED_COLUMNS, lambda r, m, p: merged_rows(m, p)),
}


def export_comparison_handler(file_sets, conditions_df, prefix, report, output_format, file_name):
    file_sets = list(file_sets or [])
    if not file_sets:
        return None, "No files loaded."
    if report not in REPORTS:
        return None, f"Unknown report: {report}"

    selected = select_files(file_sets, parse_conditions(conditions_df), prefix or '')
    if not selected:
        return None, "No files match the filter."

    columns, build_rows = REPORTS[report]
    rows = build_rows(compare_fields(selected), merge_fields(selected), prefix or '')
    default_name = report.lower().replace(' ', '_')
    try:
        path = write_rows(rows, columns, output_format, file_name or default_name)
    except OSError as e:
        logger.error("Export of %s failed: %s", report, e)
        return None, f"Error during export: {str(e)}"
    return path, f"Export successful! Saved to {path}"
