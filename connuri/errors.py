from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    MISSING_SCHEME = 'MissingScheme'
    SCHEME_MISMATCH = 'SchemeMismatch'
    INVALID_PORT = 'InvalidPort'
    MALFORMED = 'Malformed'
    MISSING = 'Missing'


class ConnectionStringError(ValueError):
    """Raised for any connection string that cannot be parsed or formatted."""
    kind = ErrorKind.MALFORMED

    def __init__(self, message: str, kind: Optional[ErrorKind]=None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        return self.message


class MissingSchemeError(ConnectionStringError):
    kind = ErrorKind.MISSING_SCHEME


class SchemeMismatchError(ConnectionStringError):
    kind = ErrorKind.SCHEME_MISMATCH

    def __init__(self, message: str, expected: str, actual: str):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class InvalidPortError(ConnectionStringError):
    kind = ErrorKind.INVALID_PORT

    def __init__(self, message: str, token: str):
        super().__init__(message)
        self.token = token


class MalformedError(ConnectionStringError):
    kind = ErrorKind.MALFORMED


class MissingConnectionStringError(ConnectionStringError):
    kind = ErrorKind.MISSING
