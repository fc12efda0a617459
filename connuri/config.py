import os
import json
from typing import Optional, Dict
from dataclasses import dataclass
from loguru import logger
from .models import ConnectionStringParameters
from .parser import ConnectionStringParser
from .errors import ConnectionStringError, MissingConnectionStringError

ENV_PREFIX = 'CONNURI_'
CONNECTION_STRINGS_SECTION = 'ConnectionStrings'
_TRUTHY = {'1', 'true', 'yes', 'on'}


@dataclass
class Settings:
    scheme: str = 'amqp'
    config_file: str = 'appsettings.json'
    debug: bool = False

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(scheme=os.environ.get(ENV_PREFIX + 'SCHEME', 'amqp'), config_file=os.environ.get(ENV_PREFIX + 'CONFIG', 'appsettings.json'), debug=os.environ.get(ENV_PREFIX + 'DEBUG', '').strip().lower() in _TRUTHY)

    @property
    def log_level(self) -> str:
        return 'DEBUG' if self.debug else 'WARNING'


def env_key(name: str) -> str:
    return f'{ENV_PREFIX}{CONNECTION_STRINGS_SECTION.upper()}__{name.upper()}'


def _read_config_file(path: str) -> Dict[str, str]:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConnectionStringError(f'Cannot read config file {path}: {e}') from e
    section = data.get(CONNECTION_STRINGS_SECTION, {}) if isinstance(data, dict) else {}
    if not isinstance(section, dict):
        raise ConnectionStringError(f"'{CONNECTION_STRINGS_SECTION}' in {path} must be an object")
    return section


def get_connection_string(name: str, settings: Optional[Settings]=None) -> str:
    """Environment variable first, then the ``ConnectionStrings`` section of the config file."""
    settings = settings or Settings.from_env()
    key = env_key(name)
    value = os.environ.get(key)
    if value:
        logger.debug(f'Connection string {name} taken from {key}')
        return value
    value = _read_config_file(settings.config_file).get(name)
    if value is not None and not isinstance(value, str):
        raise ConnectionStringError(f"Connection string '{name}' in {settings.config_file} must be a string, got {type(value).__name__}")
    if value:
        logger.debug(f'Connection string {name} taken from {settings.config_file}')
        return value
    raise MissingConnectionStringError(f"Connection string '{name}' not found (set {key} or add it to {settings.config_file})")


def load_parameters(name: str, settings: Optional[Settings]=None) -> ConnectionStringParameters:
    settings = settings or Settings.from_env()
    return ConnectionStringParser(settings.scheme).parse(get_connection_string(name, settings))
