from typing import Iterator

import pytest
from responses import RequestsMock

from simpledata.components import Registry
from simpledata.core.config import RawConfig
from simpledata.core.config import read_config
from simpledata.core.context import create_registry
from simpledata.testing.cli import SimpleDataCliRunner


@pytest.fixture(scope='session')
def rc() -> RawConfig:
    rc = read_config()
    rc.add('pytest', {
        'adapter': 'memory',
        'http.url': 'https://example.com/api',
    })
    rc.lock()
    return rc


@pytest.fixture
def registry(rc: RawConfig) -> Registry:
    return create_registry(rc.fork())


@pytest.fixture
def responses() -> Iterator[RequestsMock]:
    with RequestsMock() as mock:
        yield mock


@pytest.fixture
def cli() -> SimpleDataCliRunner:
    return SimpleDataCliRunner()
