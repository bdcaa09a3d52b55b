"""
Log categories with their console icons and crash-report labels.
"""

import logging
from enum import Enum

KEY_ICON = '🔑'
VALUE_ICON = '💾'


class LogType(Enum):
    """Category of a single log call"""
    INFO = 'info'
    WARNING = 'warning'
    ERROR = 'error'
    SUCCESS = 'success'
    ANALYTIC = 'analytic'

    @property
    def label(self) -> str:
        return self.name

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @property
    def level(self) -> int:
        """Stdlib logging level used for the console record"""
        return _LEVELS[self]

    @classmethod
    def parse(cls, name: str) -> 'LogType':
        """Resolve a case-insensitive category name"""
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = [t.value for t in cls]
            raise ValueError(f"Invalid log type: {name}. Must be one of {valid}")


_ICONS = {
    LogType.INFO: '🗣',
    LogType.WARNING: '⚠',
    LogType.ERROR: '❌',
    LogType.SUCCESS: '✅',
    LogType.ANALYTIC: '📈',
}

_LEVELS = {
    LogType.INFO: logging.INFO,
    LogType.WARNING: logging.WARNING,
    LogType.ERROR: logging.ERROR,
    LogType.SUCCESS: logging.INFO,
    LogType.ANALYTIC: logging.INFO,
}
