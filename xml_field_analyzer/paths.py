from __future__ import annotations

from typing import List

PATH_SEPARATOR = ' > '


def join_path(parent_path: str, name: str) -> str:
    return f"{parent_path}{PATH_SEPARATOR}{name}" if parent_path else name


def split_path(path: str) -> List[str]:
    """Split a field path into its element names."""
    if not path:
        return []
    return [p for p in path.split(PATH_SEPARATOR) if p != '']


def parent_path_of(path: str) -> str:
    """Truncate a path at its last separator; the root has an empty parent."""
    if not path:
        return ''
    idx = path.rfind(PATH_SEPARATOR)
    if idx < 0:
        return ''
    return path[:idx]


def depth_of(path: str) -> int:
    if not path:
        return 0
    return path.count(PATH_SEPARATOR)


def is_descendant_path(path: str, ancestor_path: str) -> bool:
    return bool(ancestor_path) and path.startswith(ancestor_path + PATH_SEPARATOR)


def remove_prefix_from_name(name: str, prefix: str) -> str:
    """Strip a literal prefix (e.g. 'ns0:') from an element name.

    Purely textual: the prefix is not resolved against any namespace URI.
    A name equal to the prefix is left untouched so it never becomes empty.
    """
    if not name or not prefix:
        return name
    if name.startswith(prefix) and len(name) > len(prefix):
        return name[len(prefix):]
    return name


def remove_prefix_from_path(path: str, prefix: str) -> str:
    if not path or not prefix:
        return path
    return PATH_SEPARATOR.join(remove_prefix_from_name(p, prefix) for p in path.split(PATH_SEPARATOR))
