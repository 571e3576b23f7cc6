from __future__ import annotations

import codecs
import re
from typing import Union

# A start tag or self-closing tag; declarations, comments and CDATA do not count.
_ELEMENT_TAG = re.compile(r'<[A-Za-z_][\w.\-]*(?::[A-Za-z_][\w.\-]*)?(\s[^<>]*)?/?>')


def read_xml_content(file_obj) -> Union[str, bytes]:
    """Read raw XML bytes (or text, for text-mode file objects) from an uploaded file or file path.

    Decoding is left to the parser so the document's own encoding
    declaration applies.
    """
    if file_obj is None:
        raise ValueError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        return file_obj.read()

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'rb') as f:
        return f.read()


def sniff_text(content: bytes) -> str:
    """Best-effort decode used only to look for tags before parsing."""
    if content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return content.decode('utf-16', errors='replace')
    return content.decode('utf-8', errors='replace')


def has_xml_content(text) -> bool:
    """True if the text holds at least one element tag."""
    if not text:
        return False
    if isinstance(text, bytes):
        text = sniff_text(text)
    return _ELEMENT_TAG.search(text) is not None
