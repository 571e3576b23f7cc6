from xml_field_analyzer.aggregation import aggregate
from xml_field_analyzer.comparison import compare_fields
from xml_field_analyzer.extraction import build_element_tree
from xml_field_analyzer.flattening import (
    difference_rows,
    element_tree_outline,
    field_rows,
    format_value_counts,
    merged_rows,
    name_summary_rows,
    path_summary_rows,
    unique_field_rows,
)
from xml_field_analyzer.merging import merge_fields
from xml_field_analyzer.models import ValueCount
from xml_field_analyzer.parsing import parse_xml

from .conftest import make_file_set


def test_field_rows_in_document_order(file1):
    rows = field_rows(file1.fields)
    assert [r["Path"] for r in rows] == ["Order", "Order > Id", "Order > Name"]
    assert rows[1]["Is Nested"] == "Yes"
    assert rows[1]["Text Content"] == "1"


def test_rows_hide_prefix():
    file_set = make_file_set("a.xml", '<ns0:r xmlns:ns0="urn:x"><ns0:id>1</ns0:id></ns0:r>')
    rows = field_rows(file_set.fields, prefix="ns0:")
    assert [r["Path"] for r in rows] == ["r", "r > id"]
    assert rows[1]["Field Name"] == "id"


def test_format_value_counts_limits_output():
    counts = [ValueCount(value=str(i), count=1, percentage=10.0) for i in range(7)]
    text = format_value_counts(counts, limit=2)
    assert text == "0 (1, 10.0%); 1 (1, 10.0%); +5 more"


def test_summary_rows(file1, file2):
    aggregation = aggregate([file1, file2])
    names = name_summary_rows(aggregation)
    assert names[0]["Files With Field"] == 2
    assert names[-1]["Field Name"] == "Name"
    paths = path_summary_rows(aggregation)
    assert [r["Path"] for r in paths] == ["Order", "Order > Id", "Order > Name"]
    assert paths[1]["Field Name"] == "  Id"


def test_comparison_rows(file1, file2):
    result = compare_fields([file1, file2])
    diffs = difference_rows(result)
    assert [r["Field Name"] for r in diffs] == ["Name"]
    assert diffs[0]["Absent In"] == "file2.xml"
    assert len(difference_rows(result, only_differing=False)) == 3
    assert unique_field_rows(result) == [{"File": "file1.xml", "Field Name": "Name", "Path": "Order > Name"}]


def test_merged_rows(file1, file2):
    rows = merged_rows(merge_fields([file1, file2]))
    assert [r["Path"] for r in rows] == ["Order", "Order > Id", "Order > Name"]
    assert rows[2]["Present In"] == "file1.xml"
    assert rows[2]["Structural Difference"] == "No"


def test_element_tree_outline():
    tree = build_element_tree(parse_xml('<r><i n="1">A</i><i/></r>'))
    assert element_tree_outline(tree) == 'r: A\n  i [n="1"]: A\n  i'
