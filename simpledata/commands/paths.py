from typing import Any

from simpledata import commands
from simpledata import exceptions
from simpledata.components import Collection
from simpledata.utils.schema import NA


def _index(items, segment: str):
    if not segment.isdigit():
        return None
    index = int(segment)
    if index >= len(items):
        return None
    return index


@commands.get_child.register(dict, str)
def get_child(node: dict, segment: str):
    value = node.get(segment)
    return NA if value is None else value


@commands.get_child.register((list, tuple, Collection), str)
def get_child(node, segment: str):
    index = _index(node, segment)
    if index is None or node[index] is None:
        return NA
    return node[index]


@commands.get_child.register((str, bytes, int, float, bool, type(None)), str)
def get_child(node, segment: str):
    return NA


@commands.get_child.register(object, str)
def get_child(node: Any, segment: str):
    value = getattr(node, segment, None)
    return NA if value is None else value


@commands.set_child.register(dict, str, object)
def set_child(node: dict, segment: str, value: Any):
    node[segment] = value


@commands.set_child.register((list, Collection), str, object)
def set_child(node, segment: str, value: Any):
    index = _index(node, segment)
    if index is None:
        raise exceptions.PathNotFound(path=segment, segment=segment)
    node[index] = value


@commands.set_child.register(object, str, object)
def set_child(node: Any, segment: str, value: Any):
    setattr(node, segment, value)
