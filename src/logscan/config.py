"""Environment driven settings"""

import logging
import os


logger = logging.getLogger(__name__)


def get_int_env(name: str, default: int, minimum: int = 1) -> int:
    """Read a positive integer from the environment, falling back to default on bad values."""
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except (ValueError, TypeError):
        logger.warning(f'Invalid {name} value {raw!r}, using default {default}')
        return default
    if value < minimum:
        logger.warning(f'{name}={value} is below {minimum}, using default {default}')
        return default
    return value


def get_str_env(name: str, default: str) -> str:
    return os.getenv(name) or default


def get_max_workers() -> int:
    """Upper bound on concurrent per-entry workers. Controlled by LOGSCAN_MAX_WORKERS."""
    return get_int_env('LOGSCAN_MAX_WORKERS', 20)


def get_encoding() -> str:
    """Encoding used to decode scanned lines. Controlled by LOGSCAN_ENCODING."""
    return get_str_env('LOGSCAN_ENCODING', 'utf-8')


def get_log_level() -> str:
    return get_str_env('LOGSCAN_LOG_LEVEL', 'WARNING').upper()
