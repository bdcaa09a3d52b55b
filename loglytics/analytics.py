"""
Forwarding of analytic events to an AnalyticsSink.
"""

import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, Union

_log = logging.getLogger('loglytics')


class AnalyticsService:
    """
    Tracks events from a fixed vocabulary.

    Events go to the sink (when one is attached) and are echoed through
    the owning LogService.

    Example:
        class Events(Enum):
            CHECKOUT_STARTED = 'checkout_started'

        logger = LogService('Checkout', analytics_sink=sink, analytics_events=Events)
        logger.analytics.track(Events.CHECKOUT_STARTED, parameters={'items': 3})
    """

    def __init__(self, log_service, events: Type[Enum], sink=None):
        self.log_service = log_service
        self.events = events
        self.sink = sink

    def track(
        self,
        event: Union[Enum, str],
        value: Optional[str] = None,
        parameters: Optional[Mapping[str, Any]] = None
    ) -> None:
        name = self._resolve(event)

        payload: Dict[str, Any] = dict(parameters or {})
        if value is not None:
            payload['value'] = value
        self._forward(name, payload)

        self.log_service.log_analytic(name=name, value=value, parameters=parameters)

    def set_user_property(self, name: str, value: Any) -> None:
        self._forward('user_property', {name: value})
        self.log_service.log_analytic(name='user_property', parameters={name: value})

    def _resolve(self, event: Union[Enum, str]) -> str:
        if isinstance(event, self.events):
            return str(event.value)
        try:
            return str(self.events(event).value)
        except ValueError:
            valid = [str(e.value) for e in self.events]
            raise ValueError(f"Unknown analytics event: {event}. Must be one of {valid}")

    def _forward(self, name: str, parameters: Dict[str, Any]) -> None:
        if self.sink is None:
            return
        try:
            self.sink.log_event(name, parameters)
        except Exception as e:
            _log.warning("Analytics sink failed for %s: %s", name, e)
