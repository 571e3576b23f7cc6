from __future__ import annotations

import csv
import json
import logging
import os
import tempfile
from typing import Any, Dict, List, Optional

import gradio as gr
import pandas as pd

from .exceptions import XmlFieldAnalyzerError
from .extraction import build_element_tree, compute_file_statistics
from .flattening import FIELD_COLUMNS, element_tree_outline, field_rows, tree_outline
from .io_utils import read_xml_content
from .loading import display_filename, load_file_field_sets
from .models import FileFieldSet
from .parsing import parse_xml
from .tree import build_field_tree, search_field_tree

logger = logging.getLogger(__name__)


def find_file_set(file_sets: List[FileFieldSet], filename: str) -> Optional[FileFieldSet]:
    for file_set in file_sets or []:
        if file_set.filename == filename:
            return file_set
    return None


def _element_outline(file_obj) -> str:
    try:
        return element_tree_outline(build_element_tree(parse_xml(read_xml_content(file_obj))))
    except (XmlFieldAnalyzerError, ValueError, OSError):
        return ''


def load_files_handler(file_objs, file_sets, outlines):
    """Add uploaded files to the loaded set; returns state and status."""
    file_sets = list(file_sets or [])
    outlines = dict(outlines or {})
    if not file_objs:
        return file_sets, outlines, gr.update(), "No file uploaded."
    if not isinstance(file_objs, list):
        file_objs = [file_objs]

    loaded, errors = load_file_field_sets(file_objs)
    by_name = {display_filename(f): f for f in file_objs}
    for file_set in loaded:
        existing = find_file_set(file_sets, file_set.filename)
        if existing is not None:
            file_sets.remove(existing)
        file_sets.append(file_set)
        outlines[file_set.filename] = _element_outline(by_name[file_set.filename])

    messages = [f"Loaded {len(loaded)} file(s). {len(file_sets)} file(s) in total."]
    messages.extend(f"Error parsing {err}" for err in errors.values())
    choices = [fs.filename for fs in file_sets]
    value = loaded[-1].filename if loaded else (choices[0] if choices else None)
    return file_sets, outlines, gr.update(choices=choices, value=value), "\n".join(messages)


def remove_file_handler(file_sets, outlines, filename):
    file_sets = [fs for fs in (file_sets or []) if fs.filename != filename]
    outlines = {k: v for k, v in (outlines or {}).items() if k != filename}
    choices = [fs.filename for fs in file_sets]
    status = f"Removed {filename}." if filename else "No file selected."
    return file_sets, outlines, gr.update(choices=choices, value=choices[0] if choices else None), status


def statistics_markdown(file_set: FileFieldSet) -> str:
    stats = compute_file_statistics(file_set.fields)
    return (
        f"**Total Fields:** {stats.total_fields} | "
        f"**Unique Field Names:** {stats.unique_field_names} | "
        f"**Max Nesting Depth:** {stats.max_depth} | "
        f"**Nested Fields:** {stats.nested_fields} | "
        f"**With Attributes:** {stats.fields_with_attributes}"
    )


def show_file_handler(file_sets, outlines, filename, search_term, nested_only, prefix):
    file_set = find_file_set(file_sets, filename)
    if file_set is None:
        return "No file selected.", "", "", pd.DataFrame(columns=FIELD_COLUMNS)

    tree = search_field_tree(build_field_tree(file_set.fields), search_term or '', bool(nested_only))
    outline = tree_outline(tree, prefix or '')
    if not outline:
        outline = "No fields match your search criteria."
    rows = field_rows(file_set.fields, prefix or '')
    return (
        statistics_markdown(file_set),
        outline,
        (outlines or {}).get(filename, ''),
        pd.DataFrame(rows, columns=FIELD_COLUMNS),
    )


def write_rows(rows: List[Dict[str, Any]], columns: List[str], output_format: str, file_name: str) -> str:
    """Write rows as CSV or JSON into the temp directory and return the path."""
    if not file_name or not file_name.strip():
        file_name = "output"
    ext = f".{output_format.lower()}"
    if not file_name.lower().endswith(ext):
        file_name += ext

    path = os.path.join(tempfile.gettempdir(), file_name)
    if output_format == "CSV":
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=columns)
            writer.writeheader()
            writer.writerows(rows)
    else:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(rows, f, indent=2, ensure_ascii=False)
    return path


def export_fields_handler(file_sets, filename, output_format, prefix):
    file_set = find_file_set(file_sets, filename)
    if file_set is None:
        return None, "No file selected."

    base = os.path.splitext(filename)[0]
    try:
        path = write_rows(field_rows(file_set.fields, prefix or ''), FIELD_COLUMNS, output_format, f"{base}_fields")
    except OSError as e:
        logger.error("Export of %s failed: %s", filename, e)
        return None, f"Error during export: {str(e)}"
    return path, f"Export successful! Saved to {path}"
