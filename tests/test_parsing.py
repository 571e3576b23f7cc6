import pytest

from xml_field_analyzer.exceptions import ParseError, XmlFieldAnalyzerError
from xml_field_analyzer.io_utils import has_xml_content
from xml_field_analyzer.parsing import element_children, element_name, element_text, parse_xml


def test_parse_returns_root():
    root = parse_xml("<Order><Id>1</Id></Order>")
    assert element_name(root) == "Order"
    assert [element_name(c) for c in element_children(root)] == ["Id"]


def test_parse_accepts_encoding_declaration_in_str():
    root = parse_xml('<?xml version="1.0" encoding="UTF-8"?><a>é</a>')
    assert element_text(root) == "é"


def test_prefixed_names_are_kept_verbatim():
    root = parse_xml('<ns0:Order xmlns:ns0="urn:orders"><ns0:Id>1</ns0:Id><Plain/></ns0:Order>')
    assert element_name(root) == "ns0:Order"
    assert [element_name(c) for c in element_children(root)] == ["ns0:Id", "Plain"]


def test_comments_are_not_children():
    root = parse_xml("<a><!-- note --><b/><?pi x?></a>")
    assert [element_name(c) for c in element_children(root)] == ["b"]


def test_element_text_excludes_child_text():
    root = parse_xml("<a> head <b>inner</b> tail </a>")
    assert element_text(root) == "head  tail"


@pytest.mark.parametrize("content", ["<a><b></a>", "not xml at all", "", "   "])
def test_malformed_input_raises_parse_error(content):
    with pytest.raises(ParseError):
        parse_xml(content, "broken.xml")


def test_parse_error_carries_filename():
    with pytest.raises(XmlFieldAnalyzerError) as exc_info:
        parse_xml("<a>", "broken.xml")
    assert exc_info.value.filename == "broken.xml"
    assert "broken.xml" in str(exc_info.value)


def test_has_xml_content():
    assert has_xml_content("some text <record id='1'>x</record>")
    assert has_xml_content("<ns:item/>")
    assert not has_xml_content("plain text only")
    assert not has_xml_content("a < b and c > d")
    assert not has_xml_content("")
