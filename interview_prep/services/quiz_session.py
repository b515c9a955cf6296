"""
services/quiz_session.py

One quiz run from loading to result:

    LOADING -> CONFIGURING -> RUNNING -> FINISHED
    LOADING -> ERROR (load failed; retry() goes back to LOADING)

start() is the mount of the quiz view: it samples the active set and
registers the countdown and the integrity guard. teardown() is the unmount:
it releases both, whichever way the session ends. Finishing twice (timer
expiry racing a "finish" click) returns the first result unchanged.

The countdown runs on a scheduler thread, so every entry point takes the
session lock.
"""

import enum
import logging
import threading
from typing import List, Optional

from config import QUIZ_DURATION_SECONDS, TIMER_WARNING_SECONDS, VIOLATION_CEILING
from interview_prep.models.question_model import (
    MultipleChoiceQuestion,
    Question,
    QuestionPool,
    correct_answer,
)
from interview_prep.models.session_state import Answer, QuizState, ScoreResult
from interview_prep.services import configurator
from interview_prep.services.errors import LoadError, SessionFinishedError, SessionStateError
from interview_prep.services.integrity_guard import GuardEvent, GuardVerdict, IntegrityGuard
from interview_prep.services.navigator import Navigator
from interview_prep.services.sampler import sample
from interview_prep.services.scheduling import SubscriptionGroup, ThreadScheduler
from interview_prep.services.scorer import get_incorrect_questions, score
from interview_prep.services.timer import Countdown, format_clock

logger = logging.getLogger(__name__)

FINISH_SUBMITTED = "submitted"
FINISH_TIMEOUT = "timeout"


class QuizPhase(str, enum.Enum):
    LOADING = "loading"
    CONFIGURING = "configuring"
    RUNNING = "running"
    FINISHED = "finished"
    ERROR = "error"


class QuizSession:
    def __init__(
        self,
        topic_id: str,
        duration: int = QUIZ_DURATION_SECONDS,
        ceiling: int = VIOLATION_CEILING,
        warning_threshold: int = TIMER_WARNING_SECONDS,
    ):
        if duration <= 0:
            raise ValueError("quiz duration must be positive")
        self.topic_id = topic_id
        self.duration = duration
        self.ceiling = ceiling
        self.warning_threshold = warning_threshold

        self.phase = QuizPhase.LOADING
        self.error: Optional[str] = None
        self.pool: Optional[QuestionPool] = None
        self.state: Optional[QuizState] = None
        self.navigator: Optional[Navigator] = None
        self.countdown: Optional[Countdown] = None
        self.guard: Optional[IntegrityGuard] = None

        self._source = None
        self._result: Optional[ScoreResult] = None
        self._subscriptions = SubscriptionGroup()
        self._lock = threading.RLock()

    # ── loading / configuration ─────────────────────────────────────────────

    def load(self, source) -> QuestionPool:
        """
        Fetch the question pool through `source.fetch_questions(topic_id)`.

        Raises:
            LoadError: source failed or returned no questions. The session is
                       left in ERROR and `retry()` may be called.
            SessionStateError: a run was already started on this session.
        """
        with self._lock:
            if self.phase in (QuizPhase.RUNNING, QuizPhase.FINISHED):
                raise SessionStateError(f"cannot reload a quiz in phase '{self.phase.value}'")
            self._source = source
            self.phase = QuizPhase.LOADING
            self.error = None
            try:
                pool = source.fetch_questions(self.topic_id)
                if len(pool) == 0:
                    raise LoadError(f'test for topic "{self.topic_id}" has no questions')
            except LoadError as e:
                self.phase = QuizPhase.ERROR
                self.error = str(e)
                logger.warning(f"quiz load failed [{self.topic_id}]: {e}")
                raise

            self.pool = pool
            self.phase = QuizPhase.CONFIGURING
            logger.info(f"quiz loaded [{self.topic_id}]: '{pool.title}', {len(pool)} questions")
            return pool

    def retry(self) -> QuestionPool:
        """Repeat a failed load. Only valid in ERROR."""
        with self._lock:
            if self.phase is not QuizPhase.ERROR or self._source is None:
                raise SessionStateError(f"nothing to retry in phase '{self.phase.value}'")
            return self.load(self._source)

    @property
    def available(self) -> int:
        return len(self.pool) if self.pool is not None else 0

    def count_options(self) -> List[configurator.CountOption]:
        return configurator.count_options(self.available)

    def default_count(self) -> int:
        return configurator.default_count(self.available)

    # ── mount / unmount ─────────────────────────────────────────────────────

    def start(self, count: int, scheduler=None, rng=None) -> List[Question]:
        """
        Draw `count` questions and start the countdown and the guard.

        Raises:
            SessionStateError: not in CONFIGURING.
            InvalidCountError: count outside 1..pool size.
        """
        with self._lock:
            if self.phase is not QuizPhase.CONFIGURING:
                raise SessionStateError(f"cannot start a quiz in phase '{self.phase.value}'")

            active_set = sample(self.pool.questions, count, rng=rng)
            self.state = QuizState(remaining_seconds=self.duration)
            self.navigator = Navigator(active_set, self.state)
            self.countdown = Countdown(self.state, self._on_timeout, self.warning_threshold)
            self.guard = IntegrityGuard(self.state, ceiling=self.ceiling)

            try:
                self._subscriptions.add(self.guard.start())
                self._subscriptions.add(
                    self.countdown.start(scheduler or ThreadScheduler(), lock=self._lock)
                )
            except Exception:
                self._subscriptions.close()
                raise

            self.phase = QuizPhase.RUNNING
            logger.info(
                f"quiz started [{self.topic_id}]: {count}/{self.available} questions, "
                f"{self.duration}s"
            )
            return active_set

    def teardown(self) -> None:
        """Release the countdown and the guard. Safe to call any number of times."""
        with self._lock:
            self._subscriptions.close()

    def __enter__(self) -> "QuizSession":
        return self

    def __exit__(self, *exc) -> None:
        self.teardown()

    # ── running ─────────────────────────────────────────────────────────────

    def _require_running(self) -> None:
        if self.phase is QuizPhase.FINISHED:
            raise SessionFinishedError("the quiz is already finished")
        if self.phase is not QuizPhase.RUNNING:
            raise SessionStateError(f"no quiz running (phase '{self.phase.value}')")

    def record_answer(self, question_id: str, value: Answer) -> None:
        with self._lock:
            self._require_running()
            self.navigator.record_answer(question_id, value)

    def advance(self) -> int:
        with self._lock:
            self._require_running()
            return self.navigator.advance()

    def retreat(self) -> int:
        with self._lock:
            self._require_running()
            return self.navigator.retreat()

    def report(self, event: GuardEvent) -> GuardVerdict:
        """Pass a client event to the guard. Accepted in any phase after start."""
        with self._lock:
            if self.guard is None:
                raise SessionStateError("no quiz running")
            return self.guard.handle(event)

    # ── finishing ───────────────────────────────────────────────────────────

    def _on_timeout(self) -> None:
        logger.info(f"quiz time is up [{self.topic_id}]")
        self.finish(FINISH_TIMEOUT)

    def finish(self, reason: str = FINISH_SUBMITTED) -> ScoreResult:
        """Score the run and release its resources. Later calls return the same result."""
        with self._lock:
            if self._result is not None:
                return self._result
            if self.phase is not QuizPhase.RUNNING:
                raise SessionStateError(f"cannot finish a quiz in phase '{self.phase.value}'")

            self.state.is_finished = True
            self.state.finish_reason = reason
            self._result = score(self.navigator.questions, self.state.answers)
            self.phase = QuizPhase.FINISHED
            self._subscriptions.close()

            logger.info(
                f"quiz finished [{self.topic_id}] ({reason}): "
                f"{self._result.correct}/{self._result.total} ({self._result.percentage}%), "
                f"{self.state.violation_count} violations"
            )
            return self._result

    @property
    def result(self) -> Optional[ScoreResult]:
        return self._result

    def incorrect_questions(self) -> List[Question]:
        if self._result is None:
            return []
        return get_incorrect_questions(self.navigator.questions, self.state.answers)

    # ── views ───────────────────────────────────────────────────────────────

    def snapshot(self) -> dict:
        """Everything the quiz page needs to render the current phase."""
        with self._lock:
            data = {
                "phase": self.phase.value,
                "topic_id": self.topic_id,
                "title": self.pool.title if self.pool else None,
                "error": self.error,
            }
            if self.phase is QuizPhase.CONFIGURING:
                data.update({
                    "available": self.available,
                    "count_options": [o.model_dump() for o in self.count_options()],
                    "default_count": self.default_count(),
                })
            elif self.phase is QuizPhase.RUNNING:
                nav = self.navigator
                q = nav.current
                data.update({
                    "index": nav.index,
                    "total": nav.total,
                    "question": q.public_dict(),
                    "answer": nav.answer_for(q.id),
                    "answered_count": nav.answered_count,
                    "answered_ids": list(self.state.answers),
                    "is_first": nav.is_first(),
                    "is_last": nav.is_last(),
                    "remaining_seconds": self.state.remaining_seconds,
                    "clock": format_clock(self.state.remaining_seconds),
                    "timer_warning": self.countdown.is_warning,
                    "guard": self.guard.verdict().model_dump(mode="json"),
                })
            elif self.phase is QuizPhase.FINISHED:
                data["result"] = self.results()
            return data

    def results(self) -> dict:
        with self._lock:
            if self._result is None:
                raise SessionStateError("the quiz is not finished yet")
            res = self._result
            review = []
            for q in self.incorrect_questions():
                item = q.public_dict()
                item["user_answer"] = self.state.answers.get(q.id)
                item["correct_answer"] = correct_answer(q)
                if isinstance(q, MultipleChoiceQuestion):
                    item["correct_option"] = q.options[q.correct_index]
                review.append(item)
            return {
                "title": self.pool.title,
                "correct": res.correct,
                "total": res.total,
                "unanswered": res.unanswered,
                "percentage": res.percentage,
                "finish_reason": self.state.finish_reason,
                "violation_count": self.state.violation_count,
                "incorrect_questions": review,
            }
