"""
services/timer.py

Quiz countdown.

RUNNING -> EXPIRED, one way. Each tick takes exactly one second off
QuizState.remaining_seconds. At zero the on_expire callback runs once; ticks
that arrive later (a callback not cancelled in time) are ignored.
"""

import enum
import logging
from typing import Callable

from config import TIMER_WARNING_SECONDS
from interview_prep.models.session_state import QuizState
from interview_prep.services.scheduling import Subscription

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0


class TimerStatus(str, enum.Enum):
    RUNNING = "running"
    EXPIRED = "expired"


def format_clock(seconds: int) -> str:
    """Seconds -> 'MM:SS'."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class Countdown:
    def __init__(
        self,
        state: QuizState,
        on_expire: Callable[[], None],
        warning_threshold: int = TIMER_WARNING_SECONDS,
    ):
        self._state = state
        self._on_expire = on_expire
        self.warning_threshold = warning_threshold
        self.status = TimerStatus.RUNNING if state.remaining_seconds > 0 else TimerStatus.EXPIRED
        self._cancelled = False

    @property
    def remaining(self) -> int:
        return self._state.remaining_seconds

    @property
    def is_warning(self) -> bool:
        """Display hint only: the last minutes are shown in red."""
        return self._state.remaining_seconds < self.warning_threshold

    def start(self, scheduler, lock=None) -> Subscription:
        """
        Register the one-second tick. Release the returned handle on teardown;
        ticks already in flight after release are dropped.

        Args:
            scheduler: anything with `every(interval, callback, name)`.
            lock:      held around each tick when the state is shared with other threads.
        """
        tick = self.tick
        if lock is not None:
            def tick():
                with lock:
                    self.tick()

        handle = scheduler.every(TICK_INTERVAL, tick, name="countdown")

        def _release():
            self._cancelled = True
            handle.release()

        return Subscription(_release, name="countdown")

    def tick(self) -> None:
        if self._cancelled or self.status is TimerStatus.EXPIRED:
            return
        if self._state.remaining_seconds > 0:
            self._state.remaining_seconds -= 1
        if self._state.remaining_seconds == 0:
            self.status = TimerStatus.EXPIRED
            logger.info("countdown expired")
            self._on_expire()
