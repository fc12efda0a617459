import copy
from typing import List, Dict, Optional
from dataclasses import dataclass, field, replace
from .encoding import encode_component


@dataclass
class ConnectionStringHost:
    host: str
    port: Optional[int] = None

    def __str__(self) -> str:
        return self.host if self.port is None else f'{self.host}:{self.port}'


@dataclass
class ConnectionStringParameters:
    """
    Structured form of a connection string.

    All string fields hold decoded values. ``password`` and ``endpoint`` keep
    the difference between ``None`` (segment absent) and ``''`` (segment present
    but empty); ``options`` keeps ``None`` apart from ``{}``.
    """
    scheme: str = ''
    username: Optional[str] = None
    password: Optional[str] = None
    hosts: List[ConnectionStringHost] = field(default_factory=list)
    endpoint: Optional[str] = None
    options: Optional[Dict[str, str]] = None

    @property
    def primary(self) -> Optional[ConnectionStringHost]:
        return self.hosts[0] if self.hosts else None

    def with_hosts(self, hosts: List[ConnectionStringHost]) -> 'ConnectionStringParameters':
        clone = self.copy()
        clone.hosts = [replace(h) for h in hosts]
        return clone

    def copy(self) -> 'ConnectionStringParameters':
        return copy.deepcopy(self)

    @property
    def redacted(self) -> str:
        auth = ''
        if self.username:
            user = encode_component(self.username)
            auth = f'{user}:****@' if self.password else f'{user}@'
        hosts = ','.join(encode_component(h.host) + ('' if h.port is None else f':{h.port}') for h in self.hosts)
        endpoint = f'/{encode_component(self.endpoint)}' if self.endpoint else ''
        query = '&'.join([f'{encode_component(k)}={encode_component(v)}' for k, v in (self.options or {}).items()])
        query_part = f'?{query}' if query else ''
        return f'{self.scheme}://{auth}{hosts}{endpoint}{query_part}'
