from __future__ import annotations

import asyncio
import logging
from typing import Any
from typing import Dict
from typing import Optional
from typing import Type

import requests

from simpledata import commands
from simpledata import exceptions
from simpledata.adapters import Adapter
from simpledata.components import Model
from simpledata.core.config import RawConfig
from simpledata.utils.data import take

log = logging.getLogger(__name__)


class Http(Adapter):
    """Talks to a JSON API where each model type lives under its own endpoint

        GET    {url}/{endpoint}          find_record()
        GET    {url}/{endpoint}/{id}     find_record(id), reload
        POST   {url}/{endpoint}          create
        DELETE {url}/{endpoint}/{id}     remove

    Blocking `requests` calls are run in a worker thread.
    """

    url: str
    endpoint: str
    timeout: Optional[float]
    session: requests.Session

    def __init__(
        self,
        url: str,
        endpoint: str,
        *,
        timeout: float = None,
        session: requests.Session = None,
    ):
        self.url = url.rstrip('/')
        self.endpoint = endpoint.strip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def __repr__(self):
        return f'<{type(self).__name__} {self.url}/{self.endpoint}>'

    @classmethod
    def from_config(cls, rc: RawConfig, model: Type[Model]) -> Http:
        endpoint = getattr(model, 'endpoint', None) or model.__name__.lower()
        return cls(
            rc.get('http', 'url', required=True),
            endpoint,
            timeout=rc.get('http', 'timeout', cast=float, default=None),
        )

    def _url(self, id: Any = None) -> str:
        if id is None:
            return f'{self.url}/{self.endpoint}'
        return f'{self.url}/{self.endpoint}/{id}'

    def _request(self, method: str, url: str, **kwargs) -> Any:
        log.debug("%s %s", method, url)
        resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if resp.status_code >= 400:
            raise exceptions.RemoteServerError(
                url=url,
                method=method,
                status=resp.status_code,
                response=resp.text,
            )
        if not resp.content:
            return None
        data = resp.json()
        if isinstance(data, dict) and '_data' in data:
            data = data['_data']
        return data

    async def request(self, method: str, url: str, **kwargs) -> Any:
        return await asyncio.to_thread(self._request, method, url, **kwargs)

    async def create(self, record: Model) -> Any:
        data = take(commands.dump(record))
        return await self.request('POST', self._url(), json=data)

    async def reload(self, record: Model) -> Any:
        return await self.request('GET', self._url(record.id))

    async def remove(self, record: Model) -> Any:
        return await self.request('DELETE', self._url(record.id))

    async def find_record(self, id: Any = None, **params: Dict[str, Any]) -> Any:
        if id is None:
            return await self.request('GET', self._url(), params=params or None)
        return await self.request('GET', self._url(id), params=params or None)
