from typing import Any
from typing import List

from simpledata import commands
from simpledata import exceptions
from simpledata.utils.schema import NA


def split_path(path: str) -> List[str]:
    if not isinstance(path, str) or not path:
        raise exceptions.InvalidPath(path=path)
    return path.split('.')


def resolve(root: Any, path: str) -> Any:
    """Find value in a nested object graph by a dotted path

    Each segment is looked up on the current node, dicts by key, lists and
    collections by numeric index and all other objects by attribute name.

    Returns `NA` as soon as a segment is missing or is `None`:

        >>> resolve({'a': {'b': 1}}, 'a.b')
        1
        >>> resolve({'a': None}, 'a.b')
        <NA>

    """
    current = root
    for segment in split_path(path):
        current = commands.get_child(current, segment)
        if current is NA:
            return NA
    return current


def assign(root: Any, path: str, value: Any) -> None:
    """Set value in a nested object graph by a dotted path

    All intermediate segments must already exist, nothing is created on the
    way. A missing intermediate segment raises `PathNotFound`.
    """
    *parents, last = split_path(path)
    current = root
    for segment in parents:
        current = commands.get_child(current, segment)
        if current is NA:
            raise exceptions.PathNotFound(path=path, segment=segment)
    commands.set_child(current, last, value)
