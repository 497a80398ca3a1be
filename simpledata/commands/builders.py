from typing import Any

from simpledata import commands
from simpledata import exceptions
from simpledata.components import Model
from simpledata.components import Repository
from simpledata.utils.data import public_fields


def _model(repo: Repository, embedded: bool):
    return repo.member_type if embedded else repo.model


@commands.build.register(Repository, dict)
def build(repo: Repository, payload: dict, *, embedded: bool = False):
    return _model(repo, embedded)(**payload)


@commands.build.register(Repository, Model)
def build(repo: Repository, payload: Model, *, embedded: bool = False):
    model = _model(repo, embedded)
    if isinstance(payload, model):
        return payload
    return model(**public_fields(payload))


@commands.build.register(Repository, object)
def build(repo: Repository, payload: Any, *, embedded: bool = False):
    raise exceptions.InvalidRecord(value=payload, model=repo.model.__name__)
