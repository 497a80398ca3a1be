from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import enum
import logging
import os
import pathlib
import sys

from ruamel.yaml import YAML

from simpledata import exceptions
from simpledata.utils.imports import importstr
from simpledata.utils.schema import NA

Key = Tuple[str, ...]

yaml = YAML(typ='safe')

log = logging.getLogger(__name__)

ENV_PREFIX = 'SIMPLEDATA_'

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def read_config(args=None, envfile=None) -> RawConfig:
    """Read configuration layered as defaults < .env < environment < -o args"""
    rc = RawConfig()
    rc.read([
        Path('simpledata', 'simpledata.config:CONFIG'),
        EnvFile('envfile', envfile or '.env'),
        EnvVars('envvars', os.environ),
        CliArgs('cliargs', args or []),
    ])
    return rc


class KeyFormat(str, enum.Enum):
    cfg = 'cfg'
    env = 'env'

    def format(self, key: Key) -> str:
        if self is KeyFormat.env:
            return ENV_PREFIX + '__'.join(key).upper()
        return '.'.join(key)


class ConfigSource:
    """Single configuration layer

    After `read()`, `config` maps key tuples to leaf values.
    """

    name: str
    config: Dict[Key, Any]

    def __init__(self, name: str, config: Any):
        self.name = name
        self.config = config

    def __repr__(self):
        return f'<{type(self).__name__} {self.name!r}>'

    def read(self) -> None:
        self.config = dict(_flatten(self.config))

    def keys(self) -> Iterator[Key]:
        yield from self.config

    def get(self, key: Key) -> Any:
        return self.config.get(key, NA)


class PyDict(ConfigSource):
    """Python dict, keys may be nested dicts or `dotted.names`"""


class Path(PyDict):
    """Python `dotted.path:NAME` of a dict or a YAML file path"""

    def read(self) -> None:
        if str(self.config).endswith(('.yml', '.yaml')):
            self.config = yaml.load(pathlib.Path(self.config).read_text()) or {}
        else:
            self.config = importstr(self.config)
        super().read()


class CliArgs(PyDict):
    """`name=value` pairs given with `-o`, comma separated values are lists"""

    def read(self) -> None:
        config = {}
        for arg in self.config:
            name, value = arg.split('=', 1)
            if ',' in value:
                value = [v.strip() for v in value.split(',')]
            config[name] = value
        self.config = config
        super().read()


class EnvVars(ConfigSource):
    """`SIMPLEDATA_` prefixed variables, `__` separates nested names"""

    def read(self) -> None:
        self.config = {
            tuple(name[len(ENV_PREFIX):].lower().split('__')): value
            for name, value in self.config.items()
            if name.startswith(ENV_PREFIX)
        }


class EnvFile(EnvVars):

    def read(self) -> None:
        path = pathlib.Path(self.config)
        self.config = dict(_read_env_file(path)) if path.exists() else {}
        super().read()


def _read_env_file(path: pathlib.Path) -> Iterator[Tuple[str, str]]:
    with path.open() as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            name, value = line.split('=', 1)
            yield name, value


def _flatten(value: Any, key: Key = ()) -> Iterator[Tuple[Key, Any]]:
    if isinstance(value, dict):
        for k, v in value.items():
            k = tuple(k.split('.')) if isinstance(k, str) else k
            yield from _flatten(v, key + k)
    else:
        yield key, value


def _cast(value: Any, cast: type) -> Any:
    if isinstance(value, str):
        if cast is list:
            return [v.strip() for v in value.split(',')] if value else []
        if cast is bool:
            return value.strip().lower() in TRUE_VALUES
    return cast(value)


class RawConfig:
    """A raw configuration reader component

    Reads configuration directly from supported configuration `sources`,
    later sources override earlier ones.

    Currently supported configuration sources are:

    - `PyDict` - python `dict` objects.
    - `Path` - python module path pointing to a `dict` or YAML file path.
    - `EnvVars` - environment variables with `SIMPLEDATA_` prefix.
    - `EnvFile` - `.env` files containing variables with `SIMPLEDATA_` prefix.
    - `CliArgs` - `-o` command line arguments with `name=value` values.

    """
    sources: List[ConfigSource]

    def __init__(self, sources: Optional[List[ConfigSource]] = None):
        self._locked = False
        self.sources = sources or []

    def read(self, sources: List[ConfigSource]) -> None:
        if self._locked:
            raise exceptions.ConfigLocked()
        for source in sources:
            log.info("Reading config from %s.", source.name)
            source.read()
        self.sources.extend(sources)

    def add(self, name: str, params: Dict[str, Any]) -> RawConfig:
        self.read([PyDict(name, params)])
        return self

    def fork(self, params: Dict[str, Any] = None) -> RawConfig:
        """Return unlocked copy, optionally with `params` layered on top"""
        rc = RawConfig(list(self.sources))
        if params:
            rc.add('fork', params)
        return rc

    def lock(self) -> None:
        self._locked = True

    def has(self, *key: str) -> bool:
        return self.get(*key, default=NA) is not NA

    def get(
        self,
        *key: str,
        default=None,
        cast: type = None,
        required: bool = False,
        origin: bool = False,
    ) -> Any:
        value, source = self._lookup(key, default)
        if cast is not None and value is not None and value is not NA:
            value = _cast(value, cast)
        if required and value is None:
            raise exceptions.MissingConfigOption(name='.'.join(key))
        if origin:
            return value, (source.name if source else '')
        return value

    def keys(self, *key: str) -> List[str]:
        """Return names of inner keys of a given key"""
        n = len(key)
        names = []
        for source in self.sources:
            for k in source.keys():
                if len(k) > n and k[:n] == key and k[n] not in names:
                    names.append(k[n])
        return names

    def getall(self, *key: str, origin=False) -> Iterator[tuple]:
        """Yield `(key, value)` or `(key, value, origin)` for all leaf keys"""
        inner = self.keys(*key)
        if inner and not self._has_leaf(key):
            for k in inner:
                yield from self.getall(*key, k, origin=origin)
        elif origin:
            yield (key,) + self.get(*key, origin=True)
        else:
            yield key, self.get(*key)

    def dump(self, *names: str, fmt: KeyFormat = KeyFormat.cfg, file=sys.stdout):
        """Print a table of origins, names and values

        `names` are dotted name prefixes to filter by. If `file` is None, the
        table rows are returned instead.
        """
        rows = list(self._dump_rows(names, fmt))
        header = ('Origin', 'Name', 'Value')
        sizes = [
            max(len(str(x)) for x in column)
            for column in zip(header, *rows)
        ]
        table = [header, tuple('-' * s for s in sizes)] + rows
        if file is None:
            return table
        for row in table:
            print('  '.join(str(x).ljust(s) for x, s in zip(row, sizes)), file=file)

    def _dump_rows(self, names: Iterable[str], fmt: KeyFormat) -> Iterator[tuple]:
        for key, value, origin in self.getall(origin=True):
            if names and not any(_matches(key, name) for name in names):
                continue
            name = fmt.format(key)
            if isinstance(value, list):
                for i, v in enumerate(value):
                    yield origin, f'{name}.{i}', v
            else:
                yield origin, name, value

    def _has_leaf(self, key: Key) -> bool:
        return any(source.get(key) is not NA for source in self.sources)

    def _lookup(self, key: Key, default: Any) -> Tuple[Any, Optional[ConfigSource]]:
        for source in reversed(self.sources):
            value = source.get(key)
            if value is not NA:
                return value, source
        inner = self.keys(*key)
        if inner:
            return {k: self.get(*key, k) for k in inner}, None
        return default, None


def _matches(key: Key, name: str) -> bool:
    parts = name.split('.')
    return all(
        i < len(key) and key[i].startswith(part)
        for i, part in enumerate(parts)
        if part
    )
