from typing import List, Tuple, Optional
from dataclasses import dataclass, field
from loguru import logger
from .models import ConnectionStringHost, ConnectionStringParameters
from .parser import ConnectionStringParser
from .errors import MalformedError


@dataclass
class ClusterLayout:
    """Primary transport address plus the nodes registered as secondary cluster members."""
    connection_string: str
    nodes: List[Tuple[str, Optional[int]]] = field(default_factory=list)


def split_primary(params: ConnectionStringParameters) -> Tuple[ConnectionStringParameters, List[ConnectionStringHost]]:
    if not params.hosts:
        raise MalformedError('At least one host is required')
    primary = params.with_hosts(params.hosts[:1])
    return (primary, [ConnectionStringHost(h.host, h.port) for h in params.hosts[1:]])


def cluster_layout(uri: str, scheme: str='amqp') -> ClusterLayout:
    parser = ConnectionStringParser(scheme)
    primary, secondaries = split_primary(parser.parse(uri))
    layout = ClusterLayout(connection_string=parser.format(primary), nodes=[(h.host, h.port) for h in secondaries])
    logger.debug(f'Primary node {primary.primary}, {len(layout.nodes)} secondary node(s)')
    return layout


def primary_connection_string(uri: str, scheme: str='amqp') -> str:
    return cluster_layout(uri, scheme).connection_string
