"""
services/integrity_guard.py

Focus monitoring for a running quiz.

The quiz page reports platform events (fullscreen changes, tab visibility,
context menu, copy, developer-tool shortcuts) and the guard answers each one
with a GuardVerdict telling the page what to show.

Rules:
  - Leaving fullscreen or hiding the tab is a violation: the count goes up
    and a blocking notice is returned.
  - Below the ceiling a fullscreen exit also asks the page to re-request
    fullscreen. From the ceiling on the count keeps rising, the notice is
    final and nothing is submitted automatically.
  - Context menu, copy and the blocked shortcuts are always suppressed but
    never counted.
  - The quiz content stays behind an overlay while the session is not
    compliant. Finishing the run is always possible.
  - If the browser has no fullscreen API or refuses it, the page reports
    `fullscreen-denied` and the fullscreen requirement is dropped, so the
    overlay can never lock the respondent in.

This is a deterrent only. Everything it sees comes from the client, and a
client that disables the page script or fakes events is not detected.
"""

import enum
import logging
from typing import List, Optional

from pydantic import BaseModel

from config import VIOLATION_CEILING
from interview_prep.models.session_state import QuizState
from interview_prep.services.scheduling import Subscription

logger = logging.getLogger(__name__)


class GuardEvent(str, enum.Enum):
    FULLSCREEN_EXIT = "fullscreen-exit"
    FULLSCREEN_ENTER = "fullscreen-enter"
    FULLSCREEN_DENIED = "fullscreen-denied"
    VISIBILITY_HIDDEN = "visibility-hidden"
    VISIBILITY_VISIBLE = "visibility-visible"
    CONTEXT_MENU = "context-menu"
    COPY = "copy"
    SHORTCUT = "shortcut"


_SUPPRESSED = {GuardEvent.CONTEXT_MENU, GuardEvent.COPY, GuardEvent.SHORTCUT}


class GuardStatus(str, enum.Enum):
    COMPLIANT = "compliant"
    VIOLATING = "violating"


class Shortcut(BaseModel):
    key: str
    ctrl: bool = False
    shift: bool = False


BLOCKED_SHORTCUTS: List[Shortcut] = [
    Shortcut(key="F12"),
    Shortcut(key="I", ctrl=True, shift=True),
    Shortcut(key="C", ctrl=True, shift=True),
    Shortcut(key="J", ctrl=True, shift=True),
    Shortcut(key="U", ctrl=True),
]

FULLSCREEN_NOTICE = "WARNING: the test must be taken in fullscreen mode!"
VISIBILITY_NOTICE = "WARNING: switching tabs is not allowed during the test!"
CEILING_NOTICE = (
    "Violation limit reached ({count}). Return to fullscreen on this tab to continue, "
    "or finish the test."
)


def is_blocked_shortcut(key: str, ctrl: bool = False, shift: bool = False, meta: bool = False) -> bool:
    """
    True if the key combination opens developer tools or page source.
    Cmd (meta) counts as Ctrl. Letter keys are matched case-insensitively.
    """
    ctrl = ctrl or meta
    for sc in BLOCKED_SHORTCUTS:
        if sc.key.lower() != (key or "").lower():
            continue
        if sc.ctrl and not ctrl:
            continue
        if sc.shift and not shift:
            continue
        return True
    return False


class GuardVerdict(BaseModel):
    status: GuardStatus
    violation_count: int
    blocking: bool
    counted: bool = False
    prevent_default: bool = False
    request_fullscreen: bool = False
    ceiling_reached: bool = False
    notice: Optional[str] = None


class IntegrityGuard:
    def __init__(self, state: QuizState, ceiling: int = VIOLATION_CEILING, require_fullscreen: bool = True):
        self._state = state
        self.ceiling = ceiling
        self.fullscreen_required = require_fullscreen
        self.is_fullscreen = False
        self.is_visible = True
        self.monitoring = False

    # ── lifecycle ───────────────────────────────────────────────────────────

    def start(self) -> Subscription:
        """Begin monitoring. Events are ignored once the handle is released."""
        self.monitoring = True
        logger.info("integrity guard started")
        return Subscription(self._stop, name="integrity-guard")

    def _stop(self) -> None:
        self.monitoring = False
        logger.info(f"integrity guard stopped ({self._state.violation_count} violations)")

    # ── state ───────────────────────────────────────────────────────────────

    @property
    def violation_count(self) -> int:
        return self._state.violation_count

    @property
    def ceiling_reached(self) -> bool:
        return self._state.violation_count >= self.ceiling

    @property
    def is_compliant(self) -> bool:
        fullscreen_ok = self.is_fullscreen or not self.fullscreen_required
        return fullscreen_ok and self.is_visible

    @property
    def status(self) -> GuardStatus:
        return GuardStatus.COMPLIANT if self.is_compliant else GuardStatus.VIOLATING

    @property
    def blocking(self) -> bool:
        return self.monitoring and not self._state.is_finished and not self.is_compliant

    def verdict(self, **extra) -> GuardVerdict:
        return GuardVerdict(
            status=self.status,
            violation_count=self._state.violation_count,
            blocking=self.blocking,
            ceiling_reached=self.ceiling_reached,
            **extra,
        )

    # ── events ──────────────────────────────────────────────────────────────

    def handle(self, event: GuardEvent) -> GuardVerdict:
        event = GuardEvent(event)

        if event in _SUPPRESSED:
            # suppressed even when not monitoring; harmless
            return self.verdict(prevent_default=self.monitoring)

        if not self.monitoring or self._state.is_finished:
            return self.verdict()

        if event is GuardEvent.FULLSCREEN_ENTER:
            self.is_fullscreen = True
            return self.verdict()

        if event is GuardEvent.VISIBILITY_VISIBLE:
            self.is_visible = True
            return self.verdict()

        if event is GuardEvent.FULLSCREEN_DENIED:
            if self.fullscreen_required:
                logger.warning("fullscreen unavailable on client; fullscreen requirement waived")
            self.fullscreen_required = False
            return self.verdict()

        if event is GuardEvent.FULLSCREEN_EXIT:
            self.is_fullscreen = False
            if not self.fullscreen_required:
                return self.verdict()
            below_ceiling = not self.ceiling_reached
            self._count_violation(event)
            return self.verdict(
                counted=True,
                request_fullscreen=below_ceiling,
                notice=FULLSCREEN_NOTICE if below_ceiling else self._ceiling_notice(),
            )

        # VISIBILITY_HIDDEN
        self.is_visible = False
        below_ceiling = not self.ceiling_reached
        self._count_violation(event)
        return self.verdict(
            counted=True,
            notice=VISIBILITY_NOTICE if below_ceiling else self._ceiling_notice(),
        )

    def _count_violation(self, event: GuardEvent) -> None:
        self._state.violation_count += 1
        logger.warning(
            f"integrity violation #{self._state.violation_count}: {event.value}"
        )

    def _ceiling_notice(self) -> str:
        return CEILING_NOTICE.format(count=self._state.violation_count)


def policy(ceiling: int = VIOLATION_CEILING) -> dict:
    """What the quiz page must suppress locally, and the violation ceiling."""
    return {
        "ceiling": ceiling,
        "block_context_menu": True,
        "block_copy": True,
        "shortcuts": [sc.model_dump() for sc in BLOCKED_SHORTCUTS],
    }
