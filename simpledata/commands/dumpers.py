from typing import Any

from simpledata import commands
from simpledata.components import Collection
from simpledata.components import Model
from simpledata.components import repo_model
from simpledata.utils.data import public_fields


@commands.dump.register(Model)
def dump(value: Model):
    return {
        '_type': repo_model(value).__name__,
        **{k: commands.dump(v) for k, v in public_fields(value).items()},
    }


@commands.dump.register(Collection)
def dump(value: Collection):
    return [commands.dump(v) for v in value]


@commands.dump.register(dict)
def dump(value: dict):
    return {k: commands.dump(v) for k, v in value.items()}


@commands.dump.register((list, tuple))
def dump(value):
    return [commands.dump(v) for v in value]


@commands.dump.register(object)
def dump(value: Any):
    return value
