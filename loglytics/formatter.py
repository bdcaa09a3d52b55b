"""
Console and file formatting on top of the stdlib logging package.
"""

import hashlib
import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional, TextIO, Tuple

CONSOLE_FORMAT = '[%(asctime)s] [%(location)s] %(message)s'
TIME_FORMAT = '%H:%M:%S'


class ConsoleFormatter(logging.Formatter):
    """
    Formatter for human readable console lines.

    Output format:
        [14:03:09] [CheckoutService] 🗣 Payment accepted

    The location comes from `extra={'location': ...}`; records logged
    without one fall back to the logger name.
    """

    def __init__(self):
        super().__init__(CONSOLE_FORMAT, datefmt=TIME_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if not getattr(record, 'location', None):
            record.location = record.name
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per record.

    Output format:
    {
        "timestamp": "2026-02-08T20:30:00.123456Z",
        "level": "INFO",
        "location": "CheckoutService",
        "category": "SUCCESS",
        "message": "✅ Payment accepted"
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).replace(tzinfo=None).isoformat() + 'Z',
            'level': record.levelname,
            'location': getattr(record, 'location', None) or record.name,
            'message': record.getMessage(),
        }

        category = getattr(record, 'category', None)
        if category:
            log_data['category'] = category

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_data, default=str, ensure_ascii=False)


def console_logger_name(prefix: str, level: int, log_file: Optional[str] = None) -> str:
    """
    Logger name for one level and log file combination.

    Services with different settings get different loggers, so building
    one never changes the level or file handlers of another.
    """
    name = f'{prefix}.{level}'
    if log_file:
        digest = hashlib.sha1(os.path.abspath(log_file).encode('utf-8')).hexdigest()[:12]
        name = f'{name}.{digest}'
    return name


def add_file_handler(logger: logging.Logger, log_file: str, level: int) -> None:
    """Attach a JSONFormatter file handler unless one already writes to log_file"""
    path = os.path.abspath(log_file)
    if any(isinstance(h, logging.FileHandler) and h.baseFilename == path for h in logger.handlers):
        return
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(JSONFormatter())
    logger.addHandler(file_handler)


def get_console_logger(
    name: Optional[str] = None,
    level: int = logging.DEBUG,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Get the logger that receives rendered console lines.

    Args:
        name: Logger name (default: derived from level and log_file)
        level: Minimum level written to the handlers
        log_file: Optional path for an extra JSON lines file handler
        stream: Console stream (default: stderr)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or console_logger_name('loglytics.console', level, log_file))
    logger.setLevel(level)
    logger.propagate = False

    has_console_handler = any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
                              for h in logger.handlers)

    if not has_console_handler:
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter())
        logger.addHandler(console_handler)

    if log_file:
        add_file_handler(logger, log_file, level)

    return logger


def validate_log_format(log_line: str) -> bool:
    """
    Validate that a log file line is properly formatted JSON.

    Args:
        log_line: Log line to validate

    Returns:
        True if valid JSON with required fields, False otherwise
    """
    try:
        data = json.loads(log_line)

        required_fields = ['timestamp', 'level', 'location', 'message']
        if not all(field in data for field in required_fields):
            return False

        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if data['level'] not in valid_levels:
            return False

        return True

    except (json.JSONDecodeError, TypeError):
        return False


def check_log_file(log_file: str) -> Tuple[int, int]:
    """
    Count the lines of a JSON log file and how many fail validation.

    Returns:
        (total lines, invalid lines)
    """
    total = invalid = 0
    with open(log_file, 'r', encoding='utf-8') as f:
        for line in f:
            if not line.strip():
                continue
            total += 1
            if not validate_log_format(line):
                invalid += 1
    return total, invalid
