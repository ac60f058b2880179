import pytest

from mdns_responder.dedup import ResponseDeduplicator
from mdns_responder.records import Record, Response

RESPONSE = Response(answers=(Record("host.local", "A", "10.0.0.1"),))


def test_should_suppress_after_record(scheduler):
    dedup = ResponseDeduplicator(scheduler=scheduler)
    assert not dedup.should_suppress(RESPONSE)
    dedup.record(RESPONSE)
    assert dedup.should_suppress(Response(answers=(Record("host.local", "A", "10.0.0.1"),)))
    assert len(dedup) == 1


def test_equality_is_order_sensitive(scheduler):
    a = Record("host.local", "A", "10.0.0.1")
    b = Record("host.local", "A", "10.0.0.2")
    dedup = ResponseDeduplicator(scheduler=scheduler)
    dedup.record(Response(answers=(a, b)))
    assert not dedup.should_suppress(Response(answers=(b, a)))


def test_record_stores_a_copy(scheduler):
    txt = {"path": "/"}
    response = Response(answers=(Record("x.local", "TXT", txt),))
    dedup = ResponseDeduplicator(scheduler=scheduler)
    dedup.record(response)
    txt["path"] = "/changed"
    assert not dedup.should_suppress(response)


def test_arm_starts_one_shared_timer(scheduler):
    dedup = ResponseDeduplicator(window_ms=5000, scheduler=scheduler)
    dedup.arm()
    scheduler.advance(3)
    dedup.arm()
    assert len(scheduler.pending()) == 1
    assert scheduler.pending()[0].when == pytest.approx(5.0)


def test_timer_clears_everything_at_once(scheduler):
    dedup = ResponseDeduplicator(window_ms=5000, scheduler=scheduler)
    dedup.arm()
    dedup.record(RESPONSE)
    scheduler.advance(4.9)
    dedup.record(Response(answers=(Record("other.local", "A", "10.0.0.2"),)))
    scheduler.advance(0.2)
    assert len(dedup) == 0
    assert not dedup.armed


def test_close_cancels_pending_timer(scheduler):
    dedup = ResponseDeduplicator(scheduler=scheduler)
    dedup.arm()
    dedup.record(RESPONSE)
    handle = scheduler.pending()[0]
    dedup.close()
    assert handle.cancelled
    assert len(dedup) == 0
    assert not dedup.armed
