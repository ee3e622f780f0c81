"""Tests for the readiness signal."""

from ntrcheck.host.readiness import ReadinessSignal
from ntrcheck.models import IssuePage

PAGE = IssuePage(url="https://github.com/monarch-initiative/mondo/issues/1", title="t")


def test_emit_reaches_every_listener():
    signal = ReadinessSignal()
    seen_a, seen_b = [], []
    signal.subscribe(seen_a.append)
    signal.subscribe(seen_b.append)

    signal.emit(PAGE)
    signal.emit(PAGE)

    assert seen_a == [PAGE, PAGE]
    assert seen_b == [PAGE, PAGE]


def test_cancel_stops_delivery():
    signal = ReadinessSignal()
    seen = []
    sub = signal.subscribe(seen.append)
    sub.cancel()
    sub.cancel()

    signal.emit(PAGE)

    assert seen == []
    assert not sub.active
    assert signal.subscriber_count == 0


def test_listener_may_cancel_itself_during_emit():
    signal = ReadinessSignal()
    seen = []

    def once(page):
        seen.append(page)
        sub.cancel()

    sub = signal.subscribe(once)
    other = []
    signal.subscribe(other.append)

    signal.emit(PAGE)
    signal.emit(PAGE)

    assert seen == [PAGE]
    assert other == [PAGE, PAGE]
