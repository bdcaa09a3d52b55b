"""
Settings for the logging facade.

Flags are set once at startup and passed explicitly to every LogService.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml


class ConfigError(Exception):
    """Configuration validation error"""
    pass


@dataclass(frozen=True)
class LogSettings:
    """Immutable logging configuration"""
    analytics_enabled: bool = True
    analytics_logs_enabled: bool = True
    crash_reporting_enabled: bool = True
    console_level: int = logging.DEBUG
    log_file: Optional[str] = None
    crash_reports_dir: Optional[str] = None
    crash_report_url: Optional[str] = None
    analytics_dir: Optional[str] = None
    analytics_url: Optional[str] = None
    request_timeout: float = 5.0

    def setup(
        self,
        analytics_enabled: Optional[bool] = None,
        log_analytics_enabled: Optional[bool] = None,
        crash_reporting_enabled: Optional[bool] = None
    ) -> 'LogSettings':
        """
        Return a copy with the given flags overwritten.

        Flags passed as None keep their current value.
        """
        changes = {}
        if analytics_enabled is not None:
            changes['analytics_enabled'] = analytics_enabled
        if log_analytics_enabled is not None:
            changes['analytics_logs_enabled'] = log_analytics_enabled
        if crash_reporting_enabled is not None:
            changes['crash_reporting_enabled'] = crash_reporting_enabled
        return replace(self, **changes)


_FLAGS = ('analytics_enabled', 'analytics_logs_enabled', 'crash_reporting_enabled')
_PATHS = ('log_file', 'crash_reports_dir', 'crash_report_url', 'analytics_dir', 'analytics_url')


def load_settings(config_path) -> LogSettings:
    """
    Parse the `logging` section of a YAML config file

    Args:
        config_path: Path to config.yml file

    Returns:
        LogSettings: Validated settings (defaults for missing keys)

    Raises:
        ConfigError: If the file is missing or the configuration is invalid
    """
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}")

    if not isinstance(config, dict):
        raise ConfigError("Config root must be a mapping")

    section = config.get('logging') or {}
    if not isinstance(section, dict):
        raise ConfigError("'logging' section must be a mapping")

    return settings_from_dict(section)


def settings_from_dict(section: Dict[str, Any]) -> LogSettings:
    """Build LogSettings from an already parsed `logging` mapping"""
    known = {f.name for f in fields(LogSettings)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"Unknown logging options: {', '.join(unknown)}")

    values: Dict[str, Any] = {}

    for flag in _FLAGS:
        if flag in section:
            if not isinstance(section[flag], bool):
                raise ConfigError(f"{flag} must be true or false, got {section[flag]!r}")
            values[flag] = section[flag]

    for key in _PATHS:
        if section.get(key) is not None:
            values[key] = os.path.expandvars(str(section[key]))

    if 'console_level' in section:
        values['console_level'] = _parse_level(section['console_level'])

    if 'request_timeout' in section:
        timeout = section['request_timeout']
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"request_timeout must be a positive number, got {timeout!r}")
        values['request_timeout'] = float(timeout)

    return LogSettings(**values)


def _parse_level(value) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    level = logging.getLevelName(str(value).upper())
    if not isinstance(level, int):
        raise ConfigError(f"Invalid console_level: {value}")
    return level
