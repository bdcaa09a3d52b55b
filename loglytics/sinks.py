"""
Crash-reporting and analytics sinks.

The facade only depends on the abstract CrashReporter and AnalyticsSink
interfaces; the file and HTTP implementations here cover self-hosted
setups and a vendor SDK can be wrapped behind the same methods.
"""

import json
import traceback
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

import click
import requests

from loglytics.file_writer import JsonlWriter
from loglytics.settings import LogSettings

MAX_BREADCRUMBS = 64


class CrashReporter(ABC):
    """Base crash reporter keeping a trail of breadcrumbs for error reports"""

    def __init__(self, max_breadcrumbs: int = MAX_BREADCRUMBS):
        self._breadcrumbs = deque(maxlen=max_breadcrumbs)

    @property
    def breadcrumbs(self) -> List[str]:
        return list(self._breadcrumbs)

    def log(self, message: str) -> None:
        """Append a free-text breadcrumb; the oldest is dropped when full"""
        self._breadcrumbs.append(message)

    def record_error(
        self,
        error: Optional[BaseException],
        stack: str,
        fatal: bool = False,
        print_details: bool = True
    ) -> None:
        """
        Report an error together with the current breadcrumb trail.

        Args:
            error: Error object (may be None for message-only reports)
            stack: Rendered stack trace
            fatal: Whether the error ends the process
            print_details: Echo the report to stderr
        """
        report = {
            'timestamp': datetime.utcnow().isoformat() + 'Z',
            'error_type': type(error).__name__ if error is not None else None,
            'error': str(error) if error is not None else None,
            'stack': stack,
            'fatal': fatal,
            'breadcrumbs': self.breadcrumbs,
        }

        if print_details:
            click.echo(json.dumps(report, indent=2, default=str, ensure_ascii=False), err=True)

        self._send_report(report)

    @abstractmethod
    def _send_report(self, report: Dict[str, Any]) -> None:
        """Deliver a built error report"""
        pass


class FileCrashReporter(CrashReporter):
    """Writes error reports to daily-rotated crashes-*.jsonl files"""

    def __init__(self, output_dir: str, max_breadcrumbs: int = MAX_BREADCRUMBS):
        super().__init__(max_breadcrumbs)
        self.writer = JsonlWriter(output_dir)

    def _send_report(self, report: Dict[str, Any]) -> None:
        self.writer.write('crashes', [report])


class HttpCrashReporter(CrashReporter):
    """Posts error reports as JSON to a collector endpoint"""

    def __init__(self, url: str, timeout: float = 5.0, max_breadcrumbs: int = MAX_BREADCRUMBS):
        super().__init__(max_breadcrumbs)
        self.url = url
        self.timeout = timeout

    def _send_report(self, report: Dict[str, Any]) -> None:
        response = requests.post(self.url, json=report, timeout=self.timeout)
        response.raise_for_status()


class AnalyticsSink(ABC):
    """Destination for analytic events"""

    @abstractmethod
    def log_event(self, name: str, parameters: Optional[Mapping[str, Any]] = None) -> None:
        pass


class FileAnalyticsSink(AnalyticsSink):
    """Writes analytic events to daily-rotated analytics-*.jsonl files"""

    def __init__(self, output_dir: str):
        self.writer = JsonlWriter(output_dir)

    def log_event(self, name: str, parameters: Optional[Mapping[str, Any]] = None) -> None:
        self.writer.write('analytics', [_event(name, parameters)])


class HttpAnalyticsSink(AnalyticsSink):
    """Posts analytic events as JSON to a collector endpoint"""

    def __init__(self, url: str, timeout: float = 5.0):
        self.url = url
        self.timeout = timeout

    def log_event(self, name: str, parameters: Optional[Mapping[str, Any]] = None) -> None:
        response = requests.post(self.url, json=_event(name, parameters), timeout=self.timeout)
        response.raise_for_status()


def _event(name: str, parameters: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    return {
        'timestamp': datetime.utcnow().isoformat() + 'Z',
        'name': name,
        'parameters': {str(k): _jsonable(v) for k, v in (parameters or {}).items()},
    }


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def format_stack(stack) -> str:
    """Render a stack given as text, a traceback object or a list of lines"""
    if stack is None:
        return ''
    if isinstance(stack, str):
        return stack
    if hasattr(stack, 'tb_frame'):
        return ''.join(traceback.format_tb(stack)).rstrip('\n')
    return '\n'.join(str(line).rstrip('\n') for line in stack)


def create_crash_reporter(settings: LogSettings) -> Optional[CrashReporter]:
    """Build the configured crash reporter (URL wins over directory)"""
    if settings.crash_report_url:
        return HttpCrashReporter(settings.crash_report_url, timeout=settings.request_timeout)
    if settings.crash_reports_dir:
        return FileCrashReporter(settings.crash_reports_dir)
    return None


def create_analytics_sink(settings: LogSettings) -> Optional[AnalyticsSink]:
    """Build the configured analytics sink (URL wins over directory)"""
    if settings.analytics_url:
        return HttpAnalyticsSink(settings.analytics_url, timeout=settings.request_timeout)
    if settings.analytics_dir:
        return FileAnalyticsSink(settings.analytics_dir)
    return None
