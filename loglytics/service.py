"""
LogService: console logging with crash-report breadcrumbs.

Every rendered line looks like

    [14:03:09] [CheckoutService] 🗣 Payment accepted

and, while crash reporting is enabled, is mirrored to the crash reporter's
breadcrumb trail so later error reports carry the lines that led to them.
"""

import logging
import traceback
from typing import Any, Iterable, List, Mapping, Optional

from loglytics.analytics import AnalyticsService
from loglytics.formatter import get_console_logger
from loglytics.log_type import KEY_ICON, VALUE_ICON, LogType
from loglytics.settings import LogSettings
from loglytics.sinks import AnalyticsSink, CrashReporter, format_stack

_log = logging.getLogger('loglytics')

# Frames belonging to the logger itself at the top of _current_stack()
_OWN_FRAMES = 2
_TRIMMED_STACK_DEPTH = 6


class LogService:
    """Logger bound to one owner's display label"""

    def __init__(
        self,
        location: str,
        settings: Optional[LogSettings] = None,
        console: Optional[logging.Logger] = None,
        crash_reporter: Optional[CrashReporter] = None,
        analytics_sink: Optional[AnalyticsSink] = None,
        analytics_events=None
    ):
        self.location = location
        self.settings = settings or LogSettings()
        self.console = console or get_console_logger(
            level=self.settings.console_level,
            log_file=self.settings.log_file
        )
        self.crash_reporter = crash_reporter
        self.analytics_sink = analytics_sink
        self.analytics_events = analytics_events
        self._analytics: Optional[AnalyticsService] = None

    @classmethod
    def for_owner(cls, owner: Any, **kwargs) -> 'LogService':
        """Create a LogService labelled with the owner's class name"""
        return cls(type(owner).__name__, **kwargs)

    @property
    def analytics(self) -> AnalyticsService:
        assert self.analytics_events is not None, 'Pass analytics_events to LogService first.'
        if self._analytics is None:
            sink = self.analytics_sink if self.settings.analytics_enabled else None
            self._analytics = AnalyticsService(self, self.analytics_events, sink=sink)
        return self._analytics

    # Regular

    def log(self, message: str) -> None:
        self._log_message(message, LogType.INFO)

    def log_warning(self, message: str) -> None:
        self._log_message(message, LogType.WARNING)

    def log_error(
        self,
        message: str,
        error: Optional[BaseException] = None,
        stack=None,
        fatal: bool = False
    ) -> None:
        """
        Log an error and report it to the crash reporter.

        Args:
            message: Description of what failed
            error: The caught exception, if any
            stack: Explicit stack trace (text, traceback object or list of lines).
                Defaults to the current call stack.
            fatal: Mark the crash report as fatal
        """
        current = _current_stack() if stack is None else None

        if self._crash_reporting:
            crash_stack = format_stack(stack) if stack is not None else '\n'.join(current[_OWN_FRAMES:])
            self._try_crash(
                self.crash_reporter.record_error,
                error,
                crash_stack,
                fatal=fatal,
                print_details=False
            )

        self._log_message(message, LogType.ERROR)
        if error is not None:
            self._log_message(str(error), LogType.ERROR)

        if stack is not None:
            rendered = format_stack(stack)
        else:
            rendered = '\n'.join(current[_OWN_FRAMES:_OWN_FRAMES + _TRIMMED_STACK_DEPTH])
        self._log_message(rendered, LogType.ERROR)

    def log_success(self, message: str) -> None:
        self._log_message(message, LogType.SUCCESS)

    def log_analytic(
        self,
        name: str,
        value: Optional[str] = None,
        parameters: Optional[Mapping[str, Any]] = None
    ) -> None:
        """Echo an analytic event to the console when analytics logs are enabled"""
        if not self.settings.analytics_logs_enabled:
            return

        icon = LogType.ANALYTIC.icon
        suffix = f' : {value}' if value is not None else ''
        self._print(LogType.ANALYTIC, f'{icon} {name}{suffix}')
        for key, param in (parameters or {}).items():
            self._print(LogType.ANALYTIC, f'{icon} {{ {key} : {param} }}')

    # Values

    def log_value(self, value: Any, message: Optional[str] = None) -> None:
        self._log_value(value, LogType.INFO, message)

    def log_value_warning(self, value: Any, message: Optional[str] = None) -> None:
        self._log_value(value, LogType.WARNING, message)

    def log_value_error(self, value: Any, message: Optional[str] = None) -> None:
        self._log_value(value, LogType.ERROR, message)

    def log_value_success(self, value: Any, message: Optional[str] = None) -> None:
        self._log_value(value, LogType.SUCCESS, message)

    def log_list(self, items: Iterable[Any], message: Optional[str] = None) -> None:
        for item in items:
            self._log_value(item, LogType.INFO, message)

    def log_set(self, items: Iterable[Any], message: Optional[str] = None) -> None:
        for item in items:
            self._log_value(item, LogType.INFO, message)

    def log_map(self, mapping: Mapping[Any, Any], message: Optional[str] = None) -> None:
        for key, value in mapping.items():
            self._log_key_value(key, value, LogType.INFO, message)

    def log_keys(self, mapping: Mapping[Any, Any], message: Optional[str] = None) -> None:
        for key in mapping:
            self._log_key(key, LogType.INFO, message)

    def log_values(self, mapping: Mapping[Any, Any], message: Optional[str] = None) -> None:
        for value in mapping.values():
            self._log_value(value, LogType.INFO, message)

    # Lifecycle

    def log_init(self) -> None:
        self.log('I am Initialised!')

    def log_dispose(self) -> None:
        self.log('I am Disposed!')

    # Printers

    def _print(self, log_type: LogType, content: str) -> None:
        self.console.log(
            log_type.level,
            content,
            extra={'location': self.location, 'category': log_type.label}
        )

    def _log_message(self, message: str, log_type: LogType) -> None:
        self._breadcrumb(f'{log_type.label}: {message}')
        self._print(log_type, f'{log_type.icon} {message}')

    def _log_entry(self, content: str, breadcrumb: str, log_type: LogType, message: Optional[str]) -> None:
        if message is not None:
            self._log_message(message, log_type)
        self._breadcrumb(breadcrumb)
        self._print(log_type, content)

    def _log_value(self, value: Any, log_type: LogType, message: Optional[str]) -> None:
        self._log_entry(f'{VALUE_ICON} {value}', f'value: {value}', log_type, message)

    def _log_key(self, key: Any, log_type: LogType, message: Optional[str]) -> None:
        self._log_entry(f'{KEY_ICON} {key}', f'key: {key}', log_type, message)

    def _log_key_value(self, key: Any, value: Any, log_type: LogType, message: Optional[str]) -> None:
        self._log_entry(f'{KEY_ICON} {key} {VALUE_ICON} {value}', f'{key}: {value}', log_type, message)

    # Crash reporting

    @property
    def _crash_reporting(self) -> bool:
        return self.settings.crash_reporting_enabled and self.crash_reporter is not None

    def _breadcrumb(self, text: str) -> None:
        if self._crash_reporting:
            self._try_crash(self.crash_reporter.log, text)

    def _try_crash(self, call, *args, **kwargs) -> None:
        try:
            call(*args, **kwargs)
        except Exception as e:
            _log.warning("Crash reporter failed: %s", e)


def _current_stack() -> List[str]:
    """Current call stack, innermost frame first, one line per frame"""
    frames = reversed(traceback.extract_stack())
    return [f'{frame.filename}:{frame.lineno} in {frame.name}' for frame in frames]


def custom_log(
    message: str,
    location: str,
    log_type: LogType = LogType.INFO,
    settings: Optional[LogSettings] = None,
    console: Optional[logging.Logger] = None,
    crash_reporter: Optional[CrashReporter] = None
) -> None:
    """Log a single message under an explicit location"""
    service = LogService(location, settings=settings, console=console, crash_reporter=crash_reporter)
    service._log_message(message, log_type)
