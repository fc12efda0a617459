import os
import pytest
from loguru import logger
from connuri.parser import ConnectionStringParser
from connuri.config import ENV_PREFIX


@pytest.fixture
def amqp():
    return ConnectionStringParser('amqp')


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    yield
    logger.remove()
    logger.disable('connuri')


@pytest.fixture
def log_lines():
    lines = []
    handler_id = logger.add(lines.append, level='DEBUG', format='{level} | {message}')
    logger.enable('connuri')
    yield lines
    logger.disable('connuri')
    logger.remove(handler_id)
