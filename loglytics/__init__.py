"""
loglytics: Console logging with crash-report breadcrumbs and analytics

Renders timestamped, labelled console lines and mirrors them to pluggable
crash-reporting and analytics sinks.
"""

from loglytics.analytics import AnalyticsService
from loglytics.log_type import KEY_ICON, VALUE_ICON, LogType
from loglytics.service import LogService, custom_log
from loglytics.settings import ConfigError, LogSettings, load_settings

__all__ = [
    'AnalyticsService',
    'ConfigError',
    'KEY_ICON',
    'LogService',
    'LogSettings',
    'LogType',
    'VALUE_ICON',
    'custom_log',
    'load_settings',
]
__version__ = '1.0.0'
