"""
Brief: Shared pytest fixtures: a manual clock for the suppression timer and
a transport that records what it is asked to send.
"""

import os
import sys

import pytest

# Ensure 'src' is on sys.path so 'mdns_responder' is importable in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


class FakeHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for an event loop's call_later."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds):
        self.now += seconds
        due = [h for h in self.pending() if h.when <= self.now]
        for handle in due:
            self.handles.remove(handle)
            handle.callback(*handle.args)


class RecordingTransport:
    def __init__(self):
        self.sent = []
        self.fail_with = None

    def respond(self, response):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(response)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def transport():
    return RecordingTransport()
