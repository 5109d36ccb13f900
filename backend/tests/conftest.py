"""
Shared fixtures for the test suite.
"""
import pytest

from core.notifications import Notifier


class FakeTimer:
    """Stands in for threading.Timer; fires only when told to."""

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.callback()


class TimerFactory:
    """Records every timer an AutoSaver creates."""

    def __init__(self):
        self.timers = []

    def __call__(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self):
        return self.timers[-1] if self.timers else None


@pytest.fixture
def timers():
    return TimerFactory()


@pytest.fixture
def notifier():
    return Notifier()
