"""Core logic for the XML Field Analyzer.

The Gradio UI lives in `app.py`. This package contains pure functions that:
- extract flat field records from XML documents
- rebuild field hierarchies
- compare, aggregate and merge fields across files
- filter file sets by field values
"""
from .aggregation import aggregate
from .comparison import compare_fields
from .exceptions import ParseError, XmlFieldAnalyzerError
from .extraction import extract_fields
from .filtering import matches, select_files
from .merging import merge_fields
from .models import FieldRecord, FileFieldSet, FilterCondition
from .parsing import parse_xml
from .paths import PATH_SEPARATOR, remove_prefix_from_name, remove_prefix_from_path
from .tree import build_field_tree

__all__ = [
    'PATH_SEPARATOR',
    'FieldRecord',
    'FileFieldSet',
    'FilterCondition',
    'ParseError',
    'XmlFieldAnalyzerError',
    'aggregate',
    'build_field_tree',
    'compare_fields',
    'extract_fields',
    'matches',
    'merge_fields',
    'parse_xml',
    'remove_prefix_from_name',
    'remove_prefix_from_path',
    'select_files',
]
