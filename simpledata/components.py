from __future__ import annotations

import contextlib
import logging
from collections.abc import MutableSequence
from typing import Any
from typing import Dict
from typing import Iterator
from typing import List
from typing import Optional
from typing import Tuple
from typing import Type
from typing import TYPE_CHECKING
from typing import Union

from simpledata import commands
from simpledata import exceptions
from simpledata.adapters import Adapter
from simpledata.adapters import get_adapter_type
from simpledata.utils.data import copy_record
from simpledata.utils.data import public_fields
from simpledata.utils.path import assign
from simpledata.utils.path import resolve
from simpledata.utils.schema import NA

if TYPE_CHECKING:
    from simpledata.core.config import RawConfig

log = logging.getLogger(__name__)

# Path of a top level collection relative to its parent instance.
SELF_PATH = '_self'


class Model:
    """Typed wrapper around a raw record

    Record fields become instance attributes. Attributes starting with `_`
    are internal and are never part of the record.
    """

    _repo: Repository = None

    def __init__(self, /, **fields):
        self.__dict__.update(fields)

    def __repr__(self):
        name = type(self).__name__
        if 'id' in self.__dict__:
            return f'<{name} id={self.__dict__["id"]!r}>'
        return f'<{name} at 0x{id(self):02x}>'

    @classmethod
    def serialize(cls, payload):
        """Prepare data given to `Repository.preload`."""
        return payload

    async def reload(self) -> Model:
        data = await self._repo.adapter.reload(self)
        self.replace(data)
        return self

    def replace(self, data) -> None:
        self._repo.replace(self, data)

    async def remove(self) -> Model:
        await self._repo.adapter.remove(self)
        self.after_remove()
        return self

    def after_remove(self) -> None:
        pass


class ArrayMember:
    """Mixed into models embedded in a `Collection`"""

    _parent: Any = None
    _path: str = None

    def get_parent(self) -> Any:
        if self._parent is None:
            raise exceptions.NotArrayMember(object=self)
        return self._parent

    def get_array_ref(self) -> Collection:
        collection = resolve(self.get_parent(), self._path)
        if not isinstance(collection, Collection):
            raise exceptions.NotInCollection(object=self, path=self._path)
        return collection

    def remove_from_array(self) -> ArrayMember:
        return self.get_array_ref().remove_object(self)

    def after_remove(self) -> None:
        super().after_remove()
        self.remove_from_array()


class Collection(MutableSequence):
    """Ordered list of model instances found at `path` of `parent`"""

    parent: Any
    path: str
    content: List[Model]

    def __init__(self, parent: Any, path: str, content: List[Model] = None):
        self.parent = parent
        self.path = path
        self.content = [] if content is None else list(content)

    def __repr__(self):
        return f'<Collection {self.path!r} of {len(self)}: {self.content!r}>'

    def __getitem__(self, index):
        return self.content[index]

    def __setitem__(self, index, value):
        self.content[index] = value

    def __delitem__(self, index):
        del self.content[index]

    def __len__(self):
        return len(self.content)

    def insert(self, index: int, value: Model) -> None:
        self.content.insert(index, value)

    def index_of(self, obj: Model) -> int:
        for i, item in enumerate(self.content):
            if item is obj:
                return i
        raise exceptions.NotInCollection(object=obj, path=self.path)

    def remove_object(self, obj: Model) -> Model:
        del self.content[self.index_of(obj)]
        return obj

    def _repository(self, model: Type[Model]) -> Repository:
        return self.parent._repo.registry[model]

    async def add(self, instance: Model) -> Model:
        repo = self._repository(repo_model(instance))
        record = await repo.adapter.create(instance)
        item = repo.apply_mapping_for_array(record, self.parent, self.path)
        self.append(item)
        return item

    def insert_at(self, index: int, payload, model: Type[Model]) -> Model:
        repo = self._repository(model)
        item = repo.apply_mapping_for_array(payload, self.parent, self.path)
        self.insert(index, item)
        return item

    def insert_after(self, payload, model: Type[Model]) -> Model:
        return self.insert_at(len(self), payload, model)


def repo_model(instance: Model) -> Type[Model]:
    """Return registered model type of an instance."""
    if instance._repo is not None:
        return instance._repo.model
    for cls in type(instance).__mro__:
        if issubclass(cls, Model) and not issubclass(cls, ArrayMember):
            return cls
    raise TypeError(f"{instance!r} is not a model instance.")


class MappingState:
    """Tracks payloads being mapped during a single mapping call"""

    max_depth: int
    stack: List[Tuple[Type[Model], int, str]]

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        self.stack = []

    @property
    def path(self) -> str:
        return '.'.join(path for _, _, path in self.stack if path) or '.'

    @contextlib.contextmanager
    def visit(self, model: Type[Model], payload: Any, path: str = None) -> Iterator[None]:
        key = id(payload)
        for model_, key_, _ in self.stack:
            if model_ is model and key_ == key:
                raise exceptions.SchemaCycle(
                    model=model.__name__,
                    path=_join(self.path, path),
                )
        if len(self.stack) >= self.max_depth:
            raise exceptions.MappingTooDeep(
                model=model.__name__,
                path=_join(self.path, path),
                max_depth=self.max_depth,
            )
        self.stack.append((model, key, path))
        try:
            yield
        finally:
            self.stack.pop()


def _join(base: str, path: Optional[str]) -> str:
    if not path:
        return base
    if base == '.':
        return path
    return f'{base}.{path}'


class Repository:
    """Schema, identity cache and adapter of a single model type"""

    registry: Registry
    model: Type[Model]
    adapter: Adapter
    schema: Dict[str, Type[Model]]
    cache: List[dict]

    def __init__(self, registry: Registry, model: Type[Model], adapter: Adapter):
        self.registry = registry
        self.model = model
        self.adapter = adapter
        self.schema = {}
        self.cache = []
        self._member_type = None

    def __repr__(self):
        return f'<Repository {self.model.__name__} schema={list(self.schema)}>'

    @property
    def member_type(self) -> Type[Model]:
        if self._member_type is None:
            self._member_type = type(self.model.__name__, (ArrayMember, self.model), {
                '__module__': self.model.__module__,
                '__qualname__': self.model.__qualname__,
            })
        return self._member_type

    def map(self, path: str, model: Type[Model]) -> Repository:
        self.schema[path] = model
        return self

    def apply_mapping(self, payload) -> Union[Model, Collection]:
        state = self._new_state()
        return self._apply_mapping(copy_record(payload), state)

    def apply_mapping_for_array(self, payload, parent: Any, path: str) -> Model:
        state = self._new_state()
        return self._apply_mapping_for_array(copy_record(payload), parent, path, state)

    def apply_schema(self, instance: Model) -> Model:
        state = self._new_state()
        with state.visit(self.model, instance):
            return self._apply_schema(instance, state)

    def replace(self, instance: Model, data) -> None:
        """Update instance with fields of freshly mapped `data`

        Fields missing from `data` are left as they are, so collections not
        present in `data` keep their identity.
        """
        fresh = self._apply_mapping(copy_record(data), self._new_state())
        if isinstance(fresh, Collection):
            raise exceptions.InvalidRecord(value=data, model=self.model.__name__)
        for path in self.schema:
            value = resolve(fresh, path)
            if isinstance(value, Collection):
                _reparent(value, fresh, instance)
        fields = public_fields(fresh)
        log.debug("Replacing %r fields: %s", instance, ', '.join(fields))
        instance.__dict__.update(fields)

    def _new_state(self) -> MappingState:
        return MappingState(self.registry.max_depth)

    def _apply_mapping(self, payload, state: MappingState, path: str = None):
        if isinstance(payload, Collection):
            # Already mapped, members stay bound to their collection.
            return payload

        if isinstance(payload, (list, tuple)):
            parent = self._build(self.model, {})
            collection = Collection(parent, SELF_PATH)
            setattr(parent, SELF_PATH, collection)
            for item in payload:
                collection.append(
                    self._apply_mapping_for_array(item, parent, SELF_PATH, state)
                    if is_record(item) else item
                )
            return collection

        with state.visit(self.model, payload, path):
            instance = commands.build(self, payload)
            instance._repo = self
            return self._apply_schema(instance, state)

    def _apply_mapping_for_array(self, payload, parent: Any, path: str, state: MappingState):
        with state.visit(self.model, payload, path):
            instance = commands.build(self, payload, embedded=True)
            instance._repo = self
            instance._parent = parent
            instance._path = path
            return self._apply_schema(instance, state)

    def _apply_schema(self, instance: Model, state: MappingState) -> Model:
        for path, model in self.schema.items():
            value = resolve(instance, path)
            if value is NA:
                continue
            if isinstance(value, Collection) and value.parent is instance and value.path == path:
                continue
            repo = self.registry[model]
            if isinstance(value, (list, tuple, Collection)):
                log.debug("Mapping %s.%s as collection of %s.", self.model.__name__, path, model.__name__)
                value = Collection(instance, path, [
                    repo._apply_mapping_for_array(item, instance, path, state)
                    if is_record(item) else item
                    for item in value
                ])
            elif is_record(value):
                log.debug("Mapping %s.%s as %s.", self.model.__name__, path, model.__name__)
                value = repo._apply_mapping(value, state, path)
            else:
                continue
            assign(instance, path, value)
        return instance

    def _build(self, model: Type[Model], fields: dict) -> Model:
        instance = model(**fields)
        instance._repo = self
        return instance

    def preload(self, data) -> None:
        data = self.model.serialize(data)
        if isinstance(data, (list, tuple)):
            self.cache = list(data)
        else:
            self.cache = [data]
        log.info("Preloaded %d %s record(s).", len(self.cache), self.model.__name__)

    def invalidate_cache(self) -> None:
        log.info("Invalidating %s cache.", self.model.__name__)
        self.cache = []

    def find_cached(self, id: Any = None):
        """Return cached record by id, or first record if id is not given"""
        if id is None:
            return self.cache[0] if self.cache else NA
        for record in self.cache:
            if _record_id(record) == id:
                return record
        return NA

    async def find(self, id: Any = None, *args, **kwargs):
        record = self.find_cached(id)
        if record is not NA:
            log.debug("Cache hit for %s id=%r.", self.model.__name__, id)
            return self.apply_mapping(record)

        log.debug("Cache miss for %s id=%r, fetching.", self.model.__name__, id)
        data = await self.adapter.find_record(id, *args, **kwargs)
        if data is None:
            return None
        if self.registry.cache_fetched and isinstance(data, dict):
            self.cache.append(data)
        return self.apply_mapping(data)


def is_record(value: Any) -> bool:
    return isinstance(value, (dict, Model))


def _reparent(collection: Collection, old: Any, new: Any) -> None:
    if collection.parent is old:
        collection.parent = new
    for item in collection:
        if isinstance(item, ArrayMember) and item._parent is old:
            item._parent = new


def _record_id(record) -> Any:
    if isinstance(record, dict):
        return record.get('id')
    return getattr(record, 'id', None)


class Registry:
    """Holds repositories of all model types known to an application"""

    rc: Optional[RawConfig]
    max_depth: int
    cache_fetched: bool
    repositories: Dict[Type[Model], Repository]

    def __init__(
        self,
        rc: RawConfig = None,
        *,
        max_depth: int = 100,
        cache_fetched: bool = False,
    ):
        self.rc = rc
        self.max_depth = max_depth
        self.cache_fetched = cache_fetched
        self.repositories = {}

    def __repr__(self):
        models = ', '.join(m.__name__ for m in self.repositories)
        return f'<Registry [{models}]>'

    def __contains__(self, model: Type[Model]) -> bool:
        return model in self.repositories

    def __getitem__(self, model: Type[Model]) -> Repository:
        if model not in self.repositories:
            return self.register(model)
        return self.repositories[model]

    def register(self, model: Type[Model], adapter: Adapter = None) -> Repository:
        if adapter is None:
            adapter = self.create_adapter(model)
        if model in self.repositories:
            repo = self.repositories[model]
            repo.adapter = adapter
        else:
            repo = self.repositories[model] = Repository(self, model, adapter)
            log.debug("Registered %s with %r.", model.__name__, adapter)
        return repo

    def create_adapter(self, model: Type[Model]) -> Adapter:
        if self.rc is None:
            return Adapter()
        Adapter_ = get_adapter_type(self.rc)
        return Adapter_.from_config(self.rc, model)
