#!/usr/bin/env python3
"""
Demo script showing loglytics usage.

This example demonstrates:
1. Console lines for every log category
2. Values, collections and mappings
3. Error reports with breadcrumbs written to JSONL files
4. Analytic events forwarded to a file sink
"""

import os
import sys
import tempfile
from enum import Enum
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from loglytics import LogService, load_settings
from loglytics.sinks import create_analytics_sink, create_crash_reporter


class Events(Enum):
    CART_OPENED = 'cart_opened'
    CHECKOUT_FAILED = 'checkout_failed'


class Cart:
    def __init__(self, settings):
        self.logger = LogService.for_owner(
            self,
            settings=settings,
            crash_reporter=create_crash_reporter(settings),
            analytics_sink=create_analytics_sink(settings),
            analytics_events=Events
        )
        self.logger.log_init()

    def checkout(self, items):
        self.logger.analytics.track(Events.CART_OPENED, parameters={'items': len(items)})
        self.logger.log_list(items, message='Checking out')
        self.logger.log_map({'count': len(items)}, message='stats')
        try:
            raise ConnectionError('payment provider unreachable')
        except ConnectionError as e:
            self.logger.log_error('Checkout failed', error=e, stack=e.__traceback__)
            self.logger.analytics.track(Events.CHECKOUT_FAILED, value=type(e).__name__)


if __name__ == '__main__':
    with tempfile.TemporaryDirectory() as tmpdir:
        os.environ['LOGLYTICS_DEMO_DIR'] = tmpdir
        settings = load_settings(Path(__file__).parent / 'config.yml')

        cart = Cart(settings)
        cart.checkout(['apple', 'pear'])
        cart.logger.log_success('Demo finished')

        print("\nFiles written:")
        for path in sorted(Path(tmpdir).rglob('*.jsonl')):
            print(f"  {path.relative_to(tmpdir)}")
