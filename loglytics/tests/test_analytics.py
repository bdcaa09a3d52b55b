"""
Tests for AnalyticsService.
"""

import io
import logging
import uuid
from enum import Enum
from unittest.mock import Mock

import pytest

from loglytics.formatter import ConsoleFormatter
from loglytics.service import LogService
from loglytics.settings import LogSettings
from loglytics.sinks import AnalyticsSink


class Events(Enum):
    CHECKOUT_STARTED = 'checkout_started'
    ITEM_ADDED = 'item_added'


@pytest.fixture
def console():
    logger = logging.getLogger(f'test_analytics_{uuid.uuid4().hex[:8]}')
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.handlers.clear()

    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ConsoleFormatter())
    logger.addHandler(handler)
    return logger, stream


def make_service(console, sink, **flags):
    logger, _ = console
    return LogService(
        'Checkout',
        settings=LogSettings().setup(**flags),
        console=logger,
        analytics_sink=sink,
        analytics_events=Events
    )


class TestTrack:
    """Test AnalyticsService.track"""

    def test_forwards_and_echoes(self, console):
        sink = Mock(spec=AnalyticsSink)
        service = make_service(console, sink)

        service.analytics.track(Events.ITEM_ADDED, value='sku-1', parameters={'qty': 2})

        sink.log_event.assert_called_once_with('item_added', {'qty': 2, 'value': 'sku-1'})
        lines = console[1].getvalue().splitlines()
        assert lines[0].endswith('📈 item_added : sku-1')
        assert lines[1].endswith('📈 { qty : 2 }')

    def test_accepts_event_value(self, console):
        sink = Mock(spec=AnalyticsSink)
        service = make_service(console, sink)

        service.analytics.track('checkout_started')

        sink.log_event.assert_called_once_with('checkout_started', {})

    def test_unknown_event(self, console):
        service = make_service(console, Mock(spec=AnalyticsSink))

        with pytest.raises(ValueError, match='Unknown analytics event'):
            service.analytics.track('refund')

    def test_analytics_disabled_skips_sink(self, console):
        """Should only echo when analytics are disabled"""
        sink = Mock(spec=AnalyticsSink)
        service = make_service(console, sink, analytics_enabled=False)

        service.analytics.track(Events.CHECKOUT_STARTED)

        sink.log_event.assert_not_called()
        assert 'checkout_started' in console[1].getvalue()

    def test_echo_disabled_still_forwards(self, console):
        sink = Mock(spec=AnalyticsSink)
        service = make_service(console, sink, log_analytics_enabled=False)

        service.analytics.track(Events.CHECKOUT_STARTED)

        sink.log_event.assert_called_once()
        assert console[1].getvalue() == ''

    def test_sink_failure_swallowed(self, console):
        sink = Mock(spec=AnalyticsSink)
        sink.log_event.side_effect = ConnectionError('offline')
        service = make_service(console, sink)

        service.analytics.track(Events.CHECKOUT_STARTED)

        assert 'checkout_started' in console[1].getvalue()

    def test_without_sink(self, console):
        service = make_service(console, None)

        service.analytics.track(Events.CHECKOUT_STARTED)

        assert 'checkout_started' in console[1].getvalue()


class TestUserProperty:
    """Test AnalyticsService.set_user_property"""

    def test_forwards_property(self, console):
        sink = Mock(spec=AnalyticsSink)
        service = make_service(console, sink)

        service.analytics.set_user_property('plan', 'pro')

        sink.log_event.assert_called_once_with('user_property', {'plan': 'pro'})
        lines = console[1].getvalue().splitlines()
        assert lines[0].endswith('📈 user_property')
        assert lines[1].endswith('📈 { plan : pro }')
