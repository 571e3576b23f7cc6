import csv
import json

import pandas as pd

from xml_field_analyzer.handlers_compare import (
    CONDITION_COLUMNS,
    add_condition_handler,
    parse_conditions,
    run_comparison_handler,
)
from xml_field_analyzer.handlers_single import find_file_set, show_file_handler, write_rows


def test_parse_conditions_from_dataframe():
    df = pd.DataFrame([["Id", "1*", True], ["Name", "", False]], columns=CONDITION_COLUMNS)
    conditions = parse_conditions(df)
    assert [(c.field, c.value, c.case_sensitive, c.is_active) for c in conditions] == [
        ("Id", "1*", True, True),
        ("Name", "", False, False),
    ]


def test_parse_conditions_from_rows():
    conditions = parse_conditions([["Id", "2", "false"]])
    assert conditions[0].field == "Id"
    assert conditions[0].case_sensitive is False


def test_add_condition_skips_incomplete():
    df = add_condition_handler(None, "Id", "1", False)
    df = add_condition_handler(df, "Name", "   ", False)
    assert df.values.tolist() == [["Id", "1", False]]


def test_run_comparison_with_filter(file1, file2):
    df = pd.DataFrame([["Id", "1", False]], columns=CONDITION_COLUMNS)
    status, common, diffs, unique, names, paths, merged = run_comparison_handler([file1, file2], df, "")
    assert status.startswith("Comparing 1 of 2 files")
    assert len(merged) == 3


def test_run_comparison_needs_two_files(file1):
    outputs = run_comparison_handler([file1], None, "")
    assert outputs[0] == "Load at least two files to compare."


def test_show_file(file1):
    stats, outline, _, table = show_file_handler([file1], {}, "file1.xml", "", False, "")
    assert "**Total Fields:** 3" in stats
    assert outline == "Order\n  Id\n  Name"
    assert list(table["Path"]) == ["Order", "Order > Id", "Order > Name"]
    assert find_file_set([file1], "missing.xml") is None


def test_write_rows_csv_and_json(tmp_path, monkeypatch):
    monkeypatch.setattr("tempfile.tempdir", str(tmp_path))
    rows = [{"A": 1, "B": "x"}]
    csv_path = write_rows(rows, ["A", "B"], "CSV", "report")
    assert csv_path.endswith("report.csv")
    with open(csv_path, newline="", encoding="utf-8") as f:
        assert list(csv.DictReader(f)) == [{"A": "1", "B": "x"}]

    json_path = write_rows(rows, ["A", "B"], "JSON", "")
    assert json_path.endswith("output.json")
    with open(json_path, encoding="utf-8") as f:
        assert json.load(f) == rows
