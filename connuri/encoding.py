import urllib.parse
from typing import Iterable
from .errors import MalformedError

# Characters that separate fields; a literal occurrence inside a value must be
# percent-encoded.
DELIMITERS = ':@,/?=&'


def encode_component(value: str) -> str:
    """Escapes everything outside the RFC 3986 unreserved set, '%' included."""
    return urllib.parse.quote(value, safe='')


def decode_component(value: str) -> str:
    try:
        return urllib.parse.unquote(value, errors='strict')
    except UnicodeDecodeError as e:
        raise MalformedError(f"Invalid percent-encoding in '{value}': escapes must form UTF-8") from e


def find_delimiter(text: str, delimiters: Iterable[str], start: int=0) -> int:
    """Index of the first of ``delimiters`` in ``text`` at or after ``start``, or -1."""
    for i in range(start, len(text)):
        if text[i] in delimiters:
            return i
    return -1


def contains_any(text: str, chars: Iterable[str]) -> bool:
    return any(c in text for c in chars)
