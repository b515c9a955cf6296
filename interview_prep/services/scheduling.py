"""
services/scheduling.py

Repeating callbacks and release handles.

Every "start monitoring" call returns a Subscription. Releasing it stops the
callback or listener; release is idempotent. A SubscriptionGroup owns all
handles of one quiz view and releases them together on every exit path.
"""

import contextlib
import logging
import threading
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class Subscription:
    """Handle for a registered callback. `release()` may be called any number of times."""

    def __init__(self, release: Callable[[], None], name: str = ""):
        self._release = release
        self._released = False
        self._lock = threading.Lock()
        self.name = name

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        with self._lock:
            if self._released:
                return
            self._released = True
        self._release()
        logger.debug(f"subscription released: {self.name}")

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.release()


class SubscriptionGroup:
    """Collects subscriptions and releases them in reverse order of registration."""

    def __init__(self):
        self._stack = contextlib.ExitStack()
        self._subscriptions: List[Subscription] = []

    def add(self, subscription: Subscription) -> Subscription:
        self._subscriptions.append(subscription)
        self._stack.callback(subscription.release)
        return subscription

    def __len__(self) -> int:
        return sum(1 for s in self._subscriptions if not s.released)

    def close(self) -> None:
        self._stack.close()

    def __enter__(self) -> "SubscriptionGroup":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ThreadScheduler:
    """Runs each registered callback on its own daemon thread at a fixed interval."""

    def every(self, interval: float, callback: Callable[[], None], name: str = "tick") -> Subscription:
        stop = threading.Event()

        def _loop():
            # Event.wait returns True once the subscription is released
            while not stop.wait(interval):
                try:
                    callback()
                except Exception:
                    logger.exception(f"scheduled callback '{name}' failed")

        thread = threading.Thread(target=_loop, name=f"scheduler-{name}", daemon=True)
        thread.start()
        return Subscription(stop.set, name=name)


class ManualScheduler:
    """Scheduler driven by hand. `advance(n)` fires every live callback n times."""

    def __init__(self):
        self._callbacks: List[Optional[Callable[[], None]]] = []

    def every(self, interval: float, callback: Callable[[], None], name: str = "tick") -> Subscription:
        slot = len(self._callbacks)
        self._callbacks.append(callback)

        def _release():
            self._callbacks[slot] = None

        return Subscription(_release, name=name)

    @property
    def active(self) -> int:
        return sum(1 for cb in self._callbacks if cb is not None)

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            for cb in list(self._callbacks):
                if cb is not None:
                    cb()
