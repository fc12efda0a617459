from .parser import ConnectionStringParser
from .errors import ConnectionStringError
from .encoding import find_delimiter


def mask_password(target: str) -> str:
    """Masks the text between the first ':' and the last '@' of the authority, without parsing."""
    start = target.find('://') + 3
    end = find_delimiter(target, '/?', start)
    authority = target[start:] if end < 0 else target[start:end]
    at = authority.rfind('@')
    colon = authority.find(':', 0, at) if at >= 0 else -1
    if colon < 0:
        return target
    return target[:start] + authority[:colon + 1] + '****' + authority[at:] + ('' if end < 0 else target[end:])


def redact_target(target: str) -> str:
    if not target:
        return ''
    if '://' not in target:
        return target
    try:
        return ConnectionStringParser('').parse(target).redacted
    except ConnectionStringError:
        return mask_password(target)
