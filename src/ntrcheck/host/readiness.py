"""Readiness signal — fires when an issue page is ready for injection.

Fires on the first load and again on every in-page navigation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ntrcheck.models import IssuePage

logger = logging.getLogger(__name__)

Listener = Callable[[IssuePage], None]


class Subscription:
    def __init__(self, signal: ReadinessSignal, listener: Listener) -> None:
        self._signal = signal
        self._listener = listener
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._signal._remove(self)


class ReadinessSignal:
    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def subscribe(self, listener: Listener) -> Subscription:
        sub = Subscription(self, listener)
        self._subscriptions.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        self._subscriptions.remove(sub)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def emit(self, page: IssuePage) -> None:
        # listeners may cancel themselves while we iterate
        for sub in list(self._subscriptions):
            if sub.active:
                sub._listener(page)
