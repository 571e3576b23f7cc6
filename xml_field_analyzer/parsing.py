"""Element Source: turn XML text into an lxml element tree."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from lxml import etree

from .exceptions import ParseError

logger = logging.getLogger(__name__)

XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'


def _make_parser(encoding: Optional[str] = None) -> etree.XMLParser:
    return etree.XMLParser(encoding=encoding, resolve_entities=False, no_network=True, huge_tree=True)


def parse_xml(content: Union[str, bytes], filename: Optional[str] = None):
    """Parse XML text and return the root element.

    Raises ParseError for malformed or empty documents.
    """
    if content is None:
        raise ParseError("No XML content.", filename)
    encoding = None
    if isinstance(content, str):
        # Decoded text: the declared encoding no longer applies.
        content = content.encode('utf-8')
        encoding = 'utf-8'
    if not content.strip():
        raise ParseError("Document is empty.", filename)

    try:
        root = etree.fromstring(content, parser=_make_parser(encoding))
    except (etree.XMLSyntaxError, ValueError) as e:
        raise ParseError(f"Invalid XML format: {e}", filename) from e

    if root is None:
        raise ParseError("Document has no root element.", filename)
    logger.debug("Parsed %s with root <%s>", filename or 'document', element_name(root))
    return root


def element_name(element) -> str:
    """Qualified name as written in the document ('prefix:local' or 'local')."""
    localname = etree.QName(element).localname
    if element.prefix:
        return f"{element.prefix}:{localname}"
    return localname


def attribute_name(element, key: str) -> str:
    if not key.startswith('{'):
        return key
    qname = etree.QName(key)
    if qname.namespace == XML_NAMESPACE:
        return f"xml:{qname.localname}"
    for prefix, uri in element.nsmap.items():
        if uri == qname.namespace and prefix:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def element_children(element) -> List:
    """Child elements only; comments and processing instructions are skipped."""
    return [child for child in element if isinstance(child.tag, str)]


def element_text(element) -> str:
    """Trimmed text that belongs directly to this element (not to its children)."""
    parts = [element.text or '']
    for child in element:
        parts.append(child.tail or '')
    return ''.join(parts).strip()


def element_text_content(element) -> str:
    """Trimmed text of the element and all its descendants, comments excluded."""
    return element.xpath('string()').strip()


def namespace_declarations(element) -> List[Tuple[str, str]]:
    """xmlns declarations made on this element (not inherited from the parent)."""
    parent = element.getparent()
    inherited = parent.nsmap if parent is not None else {}
    declared = []
    for prefix, uri in element.nsmap.items():
        if inherited.get(prefix) != uri:
            declared.append(('xmlns' if prefix is None else f"xmlns:{prefix}", uri))
    return declared
