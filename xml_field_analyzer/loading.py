"""Load files into FileFieldSets, one independent extraction per file."""
from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple, Union

from .config import get_setting
from .exceptions import ParseError, XmlFieldAnalyzerError
from .extraction import extract_fields
from .io_utils import has_xml_content, read_xml_content
from .models import FileFieldSet
from .parsing import parse_xml

logger = logging.getLogger(__name__)


def display_filename(file_obj) -> str:
    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    return os.path.basename(str(path))


def file_field_set_from_text(text: Union[str, bytes], filename: str) -> FileFieldSet:
    if filename.lower().endswith('.txt') and not has_xml_content(text):
        raise ParseError("File does not contain any XML content.", filename)
    root = parse_xml(text, filename)
    return FileFieldSet(filename=filename, fields=extract_fields(root))


def load_file_field_set(file_obj, filename: Optional[str] = None) -> FileFieldSet:
    filename = filename or display_filename(file_obj)
    try:
        text = read_xml_content(file_obj)
    except OSError as e:
        raise ParseError(f"Could not read file: {e}", filename) from e
    return file_field_set_from_text(text, filename)


def load_file_field_sets(files, max_workers: Optional[int] = None) -> Tuple[List[FileFieldSet], Dict[str, str]]:
    """Extract many files concurrently.

    Returns the loaded sets in input order plus a filename -> message map for
    the files that failed. One failing file never stops the others.
    """
    files = list(files or [])
    if not files:
        return [], {}
    if max_workers is None:
        max_workers = get_setting('loading.max_workers', 4)

    def worker(file_obj):
        name = display_filename(file_obj)
        try:
            return load_file_field_set(file_obj, name), None
        except (XmlFieldAnalyzerError, ValueError) as e:
            logger.warning("Skipping %s: %s", name, e)
            return None, (name, str(e))

    with ThreadPoolExecutor(max_workers=max(1, int(max_workers))) as pool:
        outcomes = list(pool.map(worker, files))

    loaded = [fs for fs, _ in outcomes if fs is not None]
    errors = dict(err for _, err in outcomes if err is not None)
    logger.info("Loaded %d of %d files", len(loaded), len(files))
    return loaded, errors
