from typing import List, Dict, Optional, Tuple
from loguru import logger
from .models import ConnectionStringHost, ConnectionStringParameters
from .errors import MissingSchemeError, SchemeMismatchError, InvalidPortError, MalformedError
from .encoding import encode_component, decode_component, find_delimiter, contains_any

DEFAULT_SCHEME = 'db'
SCHEME_SEPARATOR = '://'

# Unescaped characters each segment may not contain.
_CREDENTIAL_FORBIDDEN = '@,/?=&'
_HOSTS_FORBIDDEN = '@=&'
_ENDPOINT_FORBIDDEN = ':@,/=&'
_OPTIONS_FORBIDDEN = ':@,/?'


class ConnectionStringParser:
    """
    Parses and formats connection strings of the form:

        scheme://[username[:password]@]host1[:port1][,host2[:port2],...][/[endpoint]][?options]

    The parser only holds the expected scheme. ``None`` selects ``'db'``;
    an empty string accepts any scheme.
    """

    def __init__(self, scheme: Optional[str]=None):
        self._scheme = DEFAULT_SCHEME if scheme is None else scheme

    @classmethod
    def from_parameters(cls, params: Optional[ConnectionStringParameters]=None) -> 'ConnectionStringParser':
        return cls((params.scheme or None) if params is not None else None)

    @property
    def scheme(self) -> str:
        return self._scheme

    def __repr__(self) -> str:
        return f'ConnectionStringParser(scheme={self._scheme!r})'

    def _matches(self, scheme: Optional[str]) -> bool:
        return not self._scheme or not scheme or self._scheme.lower() == scheme.lower()

    def format(self, params: Optional[ConnectionStringParameters]=None) -> str:
        if params is None:
            return f'{self._scheme or DEFAULT_SCHEME}://localhost'
        if not self._matches(params.scheme):
            raise SchemeMismatchError(f'Scheme not supported: {params.scheme}', expected=self._scheme, actual=params.scheme)
        if not params.hosts:
            raise MalformedError('At least one host is required')
        uri = f'{self._scheme or params.scheme or DEFAULT_SCHEME}://'
        if params.username:
            uri += encode_component(params.username)
            # An empty password is rendered as no password at all.
            if params.password:
                uri += ':' + encode_component(params.password)
            uri += '@'
        uri += self._format_hosts(params.hosts)
        if params.endpoint:
            uri += '/' + encode_component(params.endpoint)
        if params.options:
            uri += '?' + '&'.join([f'{encode_component(k)}={encode_component(v)}' for k, v in params.options.items()])
        return uri

    def parse(self, uri: str) -> ConnectionStringParameters:
        text = uri.strip()
        sep = text.find(SCHEME_SEPARATOR)
        if sep < 0:
            raise MissingSchemeError(f'No scheme found in URI {uri}')
        scheme = text[:sep]
        if not scheme:
            raise MissingSchemeError(f'Empty scheme in URI {uri}')
        if ':' in scheme:
            raise MalformedError(f"Invalid scheme '{scheme}'")
        if not self._matches(scheme):
            raise SchemeMismatchError(f"URI must start with '{self._scheme}://'", expected=self._scheme, actual=scheme)
        rest = text[sep + len(SCHEME_SEPARATOR):]
        end = find_delimiter(rest, '/?')
        authority = rest if end < 0 else rest[:end]
        tail = '' if end < 0 else rest[end:]
        username = None
        password = None
        if '@' in authority:
            credentials, authority = authority.split('@', 1)
            username, password = self._parse_credentials(credentials)
        hosts = self._parse_hosts(authority)
        endpoint = None
        options = None
        if tail.startswith('/'):
            q = tail.find('?')
            path = tail[1:] if q < 0 else tail[1:q]
            tail = '' if q < 0 else tail[q:]
            if contains_any(path, _ENDPOINT_FORBIDDEN):
                raise MalformedError(f"Invalid endpoint '{path}': reserved characters must be percent-encoded")
            endpoint = decode_component(path)
        if tail.startswith('?'):
            options = self._parse_options(tail[1:])
        logger.debug(f'Parsed {scheme} connection string with {len(hosts)} host(s)')
        return ConnectionStringParameters(scheme=scheme, username=username, password=password, hosts=hosts, endpoint=endpoint, options=options)

    def _parse_credentials(self, credentials: str) -> Tuple[str, Optional[str]]:
        username, colon, password = credentials.partition(':')
        if not username:
            raise MalformedError('Credentials must include a username')
        if contains_any(username, _CREDENTIAL_FORBIDDEN) or contains_any(password, _CREDENTIAL_FORBIDDEN + ':'):
            raise MalformedError('Invalid credentials: reserved characters must be percent-encoded')
        return (decode_component(username), decode_component(password) if colon else None)

    def _parse_hosts(self, addresses: str) -> List[ConnectionStringHost]:
        if not addresses:
            raise MalformedError('No host found in URI')
        if contains_any(addresses, _HOSTS_FORBIDDEN):
            raise MalformedError(f"Invalid host list '{addresses}': reserved characters must be percent-encoded")
        hosts = []
        for address in addresses.split(','):
            name, colon, port = address.partition(':')
            if not name:
                raise MalformedError(f"Empty host in '{addresses}'")
            hosts.append(ConnectionStringHost(host=decode_component(name), port=self._parse_port(port) if colon else None))
        return hosts

    @staticmethod
    def _parse_port(token: str) -> int:
        if not (token.isascii() and token.isdigit()):
            raise InvalidPortError(f"Invalid port '{token}'", token=token)
        return int(token)

    def _parse_options(self, query: str) -> Optional[Dict[str, str]]:
        if not query:
            return None
        if contains_any(query, _OPTIONS_FORBIDDEN):
            raise MalformedError(f"Invalid options '{query}': reserved characters must be percent-encoded")
        result = {}
        for option in query.split('&'):
            key, eq, value = option.partition('=')
            if not eq:
                logger.debug(f"Dropping option without value: '{option}'")
                continue
            result[decode_component(key)] = decode_component(value)
        return result

    @staticmethod
    def _format_hosts(hosts: List[ConnectionStringHost]) -> str:
        rendered = []
        for h in hosts:
            if not h.host:
                raise MalformedError('Host name must not be empty')
            if h.port is None:
                rendered.append(encode_component(h.host))
                continue
            if isinstance(h.port, bool) or not isinstance(h.port, int) or h.port < 0:
                raise InvalidPortError(f"Invalid port '{h.port}' for host '{h.host}'", token=str(h.port))
            rendered.append(f'{encode_component(h.host)}:{h.port}')
        return ','.join(rendered)


def parse(uri: str, scheme: Optional[str]=None) -> ConnectionStringParameters:
    return ConnectionStringParser(scheme).parse(uri)


def format_uri(params: Optional[ConnectionStringParameters]=None, scheme: Optional[str]=None) -> str:
    return ConnectionStringParser(scheme).format(params)
