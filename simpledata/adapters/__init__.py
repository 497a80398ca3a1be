from __future__ import annotations

from typing import Any
from typing import Type
from typing import TYPE_CHECKING

from simpledata import exceptions
from simpledata.utils.imports import importstr

if TYPE_CHECKING:
    from simpledata.components import Model
    from simpledata.core.config import RawConfig


class Adapter:
    """Fetches and stores records of a model type

    All operations are coroutines. Records passed in are model instances,
    records returned are raw payloads (dicts or lists of dicts).
    """

    def __repr__(self):
        return f'<{type(self).__name__}>'

    @classmethod
    def from_config(cls, rc: RawConfig, model: Type[Model]) -> Adapter:
        return cls()

    def _not_supported(self, operation: str):
        return exceptions.AdapterOperationNotSupported(
            adapter=type(self).__name__,
            operation=operation,
        )

    async def create(self, record: Model) -> Any:
        raise self._not_supported('create')

    async def reload(self, record: Model) -> Any:
        raise self._not_supported('reload')

    async def remove(self, record: Model) -> Any:
        raise self._not_supported('remove')

    async def find_record(self, *args, **kwargs) -> Any:
        raise self._not_supported('find_record')


def get_adapter_type(rc: RawConfig, name: str = None) -> Type[Adapter]:
    name = name or rc.get('adapter', default=None)
    if not name:
        return Adapter
    path = rc.get('components', 'adapters', name, default=None)
    if path is None:
        raise exceptions.UnknownAdapter(name=name)
    return importstr(path)
