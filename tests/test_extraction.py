from xml_field_analyzer.extraction import build_element_tree, compute_file_statistics, extract_fields
from xml_field_analyzer.parsing import parse_xml
from xml_field_analyzer.paths import PATH_SEPARATOR
from xml_field_analyzer.tree import in_document_order


def by_path(records):
    return {r.path: r for r in records}


def test_extract_simple_document(file1):
    fields = by_path(file1.fields)
    assert set(fields) == {"Order", "Order > Id", "Order > Name"}

    order = fields["Order"]
    assert order.depth == 0
    assert order.parent_path == ""
    assert order.has_children
    assert order.child_count == 2
    assert order.has_text
    assert order.text_content == "1\n  X"
    assert order.value_counts == {}

    id_field = fields["Order > Id"]
    assert id_field.parent_path == "Order"
    assert id_field.depth == 1
    assert id_field.value_counts == {"1": 1}
    assert id_field.text_content == "1"
    assert id_field.occurrences == 1


def test_depth_matches_path_segments(file1):
    for record in file1.fields:
        assert record.depth == len(record.path.split(PATH_SEPARATOR)) - 1


def test_output_sorted_by_depth_then_name():
    fields = extract_fields(parse_xml("<r><b/><a/></r>"))
    assert [(f.depth, f.name) for f in fields] == [(0, "r"), (1, "a"), (1, "b")]


def test_order_index_follows_document_order():
    fields = by_path(extract_fields(parse_xml("<r><b/><a/><c/></r>")))
    assert fields["r > b"].order_index == 0
    assert fields["r > a"].order_index == 1
    assert fields["r > c"].order_index == 2


def test_repeated_siblings_fold_into_one_record():
    root = parse_xml("<r><item>A</item><item>B</item><item>A</item><item/></r>")
    item = by_path(extract_fields(root))["r > item"]
    assert item.occurrences == 4
    assert item.value_counts == {"A": 2, "B": 1}
    assert item.text_content == "A"


def test_same_name_and_depth_in_different_branches_fold():
    root = parse_xml("<r><a><x>1</x></a><b><x>2</x></b></r>")
    fields = extract_fields(root)
    xs = [f for f in fields if f.name == "x"]
    assert len(xs) == 1
    assert xs[0].path == "r > a > x"
    assert xs[0].occurrences == 2
    assert xs[0].value_counts == {"1": 1, "2": 1}


def test_same_name_at_different_depths_stays_separate():
    fields = extract_fields(parse_xml("<r><id>1</id><sub><id>2</id></sub></r>"))
    ids = sorted((f.depth, f.path) for f in fields if f.name == "id")
    assert ids == [(1, "r > id"), (2, "r > sub > id")]


def test_values_are_trimmed():
    fields = by_path(extract_fields(parse_xml("<r><v>  padded \n</v></r>")))
    assert fields["r > v"].value_counts == {"padded": 1}


def test_attribute_names_are_collected_across_occurrences():
    root = parse_xml('<r><i id="1"/><i id="2" kind="x"/></r>')
    item = by_path(extract_fields(root))["r > i"]
    assert item.attributes == ["id", "kind"]


def test_text_sample_is_truncated():
    root = parse_xml("<r><v>%s</v></r>" % ("x" * 30))
    record = by_path(extract_fields(root, text_sample_length=10))["r > v"]
    assert record.text_content == "x" * 10
    assert record.value_counts == {"x" * 30: 1}


def test_childless_root_yields_single_record():
    fields = extract_fields(parse_xml("<only/>"))
    assert len(fields) == 1
    assert fields[0].path == "only"
    assert not fields[0].has_children


def test_none_root_yields_empty():
    assert extract_fields(None) == []


def test_deep_document_does_not_hit_recursion_limit():
    depth = 1200
    xml = "".join(f"<n{i}>" for i in range(depth)) + "".join(f"</n{i}>" for i in reversed(range(depth)))
    fields = extract_fields(parse_xml(xml))
    assert len(fields) == depth
    assert max(f.depth for f in fields) == depth - 1


def test_document_order_reproduces_nesting():
    root = parse_xml("<r><h><t/></h><body><p/><list><li/></list></body><f/></r>")
    ordered = in_document_order(extract_fields(root))
    assert [(f.name, f.depth) for f in ordered] == [
        ("r", 0), ("h", 1), ("t", 2), ("body", 1), ("p", 2), ("list", 2), ("li", 3), ("f", 1),
    ]


def test_file_statistics(file1):
    stats = compute_file_statistics(file1.fields)
    assert stats.total_fields == 3
    assert stats.unique_field_names == 3
    assert stats.max_depth == 1
    assert stats.nested_fields == 2
    assert stats.fields_with_children == 1
    assert stats.fields_with_text == 3
    assert stats.fields_with_attributes == 0


def test_file_statistics_empty():
    stats = compute_file_statistics([])
    assert stats.total_fields == 0
    assert stats.max_depth == 0


def test_element_tree_keeps_repeated_siblings():
    tree = build_element_tree(parse_xml('<r><i n="1">A</i><i>B</i></r>'))
    assert tree.name == "r"
    assert [c.text_content for c in tree.children] == ["A", "B"]
    assert tree.children[0].attributes == [("n", "1")]


def test_names_sort_case_insensitively():
    fields = extract_fields(parse_xml("<r><b/><B/><a/></r>"))
    assert [f.name for f in fields if f.depth == 1] == ["a", "B", "b"]


def test_text_flags_come_from_first_instance():
    record = by_path(extract_fields(parse_xml("<r><k/><k>x</k></r>")))["r > k"]
    assert not record.has_text
    assert record.text_content == ""
    assert record.value_counts == {"x": 1}
    assert record.occurrences == 2


def test_children_flags_come_from_first_instance():
    record = by_path(extract_fields(parse_xml("<r><k/><k><v/></k></r>")))["r > k"]
    assert not record.has_children
    assert record.child_count == 0


def test_container_text_includes_descendants():
    root = parse_xml("<r><!-- note --><a>x<b>y</b></a></r>")
    fields = by_path(extract_fields(root))
    assert fields["r"].has_text
    assert fields["r"].text_content == "xy"
    assert fields["r"].value_counts == {}
    assert fields["r > a"].text_content == "xy"
    assert fields["r > a"].value_counts == {"x": 1}


def test_namespace_declarations_count_as_attributes():
    root = parse_xml('<r xmlns="urn:a" xmlns:p="urn:p" id="1"><p:c/><d xmlns:q="urn:q"/></r>')
    fields = extract_fields(root)
    attributes = {f.name: f.attributes for f in fields}
    assert sorted(attributes["r"]) == ["id", "xmlns", "xmlns:p"]
    assert attributes["p:c"] == []
    assert attributes["d"] == ["xmlns:q"]


def test_element_tree_lists_namespace_declarations():
    tree = build_element_tree(parse_xml('<r xmlns:p="urn:p"><p:c/></r>'))
    assert tree.attributes == [("xmlns:p", "urn:p")]
    assert tree.children[0].attributes == []
