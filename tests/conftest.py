import pytest

from xml_field_analyzer.extraction import extract_fields
from xml_field_analyzer.models import FileFieldSet
from xml_field_analyzer.parsing import parse_xml

ORDER_WITH_NAME = """<?xml version="1.0" encoding="UTF-8"?>
<Order>
  <Id>1</Id>
  <Name>X</Name>
</Order>
"""

ORDER_WITHOUT_NAME = """<Order>
  <Id>2</Id>
</Order>
"""


def make_file_set(filename, xml):
    return FileFieldSet(filename=filename, fields=extract_fields(parse_xml(xml, filename)))


@pytest.fixture
def file1():
    return make_file_set("file1.xml", ORDER_WITH_NAME)


@pytest.fixture
def file2():
    return make_file_set("file2.xml", ORDER_WITHOUT_NAME)
