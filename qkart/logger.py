"""日志"""

from datetime import datetime
from pathlib import Path
from sys import stderr

from loguru import logger

from .config import LOG_DIR, LOG_LEVEL

_BASE_FORMAT = (
    '[<green>{time:HH:mm:ss}</green>] [<level>{level:.3}</level>] '
    '[<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>] >>> '
    '<level>{message}</level>'
)
_USER_FORMAT = (
    '[<green>{time:HH:mm:ss}</green>] [<level>{level:.3}</level>] '
    '[<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>] '
    '[<green>{extra[username]}</green>] >>> '
    '<level>{message}</level>'
)

logger.remove()
logger.add(
    stderr,
    level=LOG_LEVEL,
    format=_BASE_FORMAT,
    filter=lambda record: 'username' not in record['extra'],
)
logger.add(
    stderr,
    level=LOG_LEVEL,
    format=_USER_FORMAT,
    filter=lambda record: 'username' in record['extra'],
)

if LOG_DIR:
    _log_dir = Path.cwd() / LOG_DIR
    _log_dir.mkdir(parents=True, exist_ok=True)
    _log_file = _log_dir / f'{datetime.now().strftime("%Y_%m_%d-%H_%M_%S")}.log'
    logger.add(
        _log_file,
        level=LOG_LEVEL,
        format=_BASE_FORMAT,
        filter=lambda record: 'username' not in record['extra'],
        enqueue=True,
    )
    logger.add(
        _log_file,
        level=LOG_LEVEL,
        format=_USER_FORMAT,
        filter=lambda record: 'username' in record['extra'],
        enqueue=True,
    )
