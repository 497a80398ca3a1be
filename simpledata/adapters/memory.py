from __future__ import annotations

import itertools
import logging
from typing import Any
from typing import Dict
from typing import List
from typing import Type

from simpledata import commands
from simpledata import exceptions
from simpledata.adapters import Adapter
from simpledata.components import Model
from simpledata.core.config import RawConfig
from simpledata.utils.data import copy_record
from simpledata.utils.data import take

log = logging.getLogger(__name__)


class Memory(Adapter):
    """Keeps records in process memory, keyed by `id`

    Mostly usable in tests and examples.
    """

    data: Dict[Any, dict]

    def __init__(self, data: List[dict] = None):
        self.data = {}
        self._ids = itertools.count(1)
        self.calls = []
        for record in data or []:
            self.insert(record)

    def __repr__(self):
        return f'<{type(self).__name__} records={len(self.data)}>'

    @classmethod
    def from_config(cls, rc: RawConfig, model: Type[Model]) -> Memory:
        return cls()

    def insert(self, record: dict) -> dict:
        record = copy_record(record)
        if record.get('id') is None:
            record['id'] = next(self._ids)
            while record['id'] in self.data:
                record['id'] = next(self._ids)
        self.data[record['id']] = record
        return copy_record(record)

    def _get(self, id: Any) -> dict:
        if id not in self.data:
            raise exceptions.ItemDoesNotExist(id=id)
        return copy_record(self.data[id])

    async def create(self, record: Model) -> dict:
        self.calls.append(('create', record))
        return self.insert(take(commands.dump(record)))

    async def reload(self, record: Model) -> dict:
        self.calls.append(('reload', record))
        return self._get(record.id)

    async def remove(self, record: Model) -> None:
        self.calls.append(('remove', record))
        self._get(record.id)
        del self.data[record.id]

    async def find_record(self, id: Any = None, **params) -> Any:
        self.calls.append(('find_record', id))
        if id is not None:
            return self._get(id)
        return [
            copy_record(record)
            for record in self.data.values()
            if all(record.get(k) == v for k, v in params.items())
        ]
