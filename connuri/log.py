import sys
from loguru import logger

LOG_FORMAT = '{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}'


def setup_logging(log_level: str='WARNING', sink=None):
    """Replaces loguru's default handler with a single sink at ``log_level`` and enables connuri's messages."""
    logger.remove()
    logger.add(sink if sink is not None else sys.stderr, level=log_level, format=LOG_FORMAT)
    logger.enable('connuri')
