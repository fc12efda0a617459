from loguru import logger
from .models import ConnectionStringHost, ConnectionStringParameters
from .errors import ErrorKind, ConnectionStringError, MissingSchemeError, SchemeMismatchError, InvalidPortError, MalformedError, MissingConnectionStringError
from .parser import ConnectionStringParser, DEFAULT_SCHEME, parse, format_uri
from .cluster import ClusterLayout, split_primary, cluster_layout, primary_connection_string

__version__ = '1.0.0'
__all__ = ['ConnectionStringHost', 'ConnectionStringParameters', 'ErrorKind', 'ConnectionStringError', 'MissingSchemeError', 'SchemeMismatchError', 'InvalidPortError', 'MalformedError', 'MissingConnectionStringError', 'ConnectionStringParser', 'DEFAULT_SCHEME', 'parse', 'format_uri', 'ClusterLayout', 'split_primary', 'cluster_layout', 'primary_connection_string']

# Silent as a library; connuri.log.setup_logging turns output back on.
logger.disable('connuri')
