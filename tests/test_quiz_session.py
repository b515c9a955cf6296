from __future__ import annotations

import random

import pytest

from interview_prep.services.errors import (
    InvalidCountError,
    LoadError,
    SessionFinishedError,
    SessionStateError,
)
from interview_prep.services.integrity_guard import GuardEvent
from interview_prep.services.quiz_session import QuizPhase, QuizSession

from tests.conftest import FakeSource, build_pool


def _running(scheduler, count=10, duration=60) -> QuizSession:
    quiz = QuizSession("css", duration=duration)
    quiz.load(FakeSource(build_pool()))
    quiz.start(count, scheduler=scheduler, rng=random.Random(3))
    return quiz


def test_twelve_questions_ten_requested_none_answered(scheduler):
    quiz = QuizSession("css", duration=60)
    pool = quiz.load(FakeSource(build_pool()))
    assert len(pool) == 12
    assert quiz.phase is QuizPhase.CONFIGURING
    assert [o.value for o in quiz.count_options()] == [5, 10, 12]

    active = quiz.start(10, scheduler=scheduler)
    assert len(active) == 10
    assert quiz.phase is QuizPhase.RUNNING

    result = quiz.finish()
    assert (result.correct, result.total) == (0, 10)
    assert result.unanswered == 10
    assert quiz.phase is QuizPhase.FINISHED


def test_finish_is_idempotent(scheduler):
    quiz = _running(scheduler)
    q = quiz.navigator.current
    quiz.record_answer(q.id, q.correct_index if hasattr(q, "correct_index") else q.correct_text)

    first = quiz.finish()
    second = quiz.finish("timeout")

    assert second is first
    assert first.correct == 1
    assert quiz.state.finish_reason == "submitted"


def test_timeout_finishes_once_and_releases_resources(scheduler):
    quiz = _running(scheduler, duration=3)
    assert scheduler.active == 1

    scheduler.advance(3)

    assert quiz.phase is QuizPhase.FINISHED
    assert quiz.state.finish_reason == "timeout"
    assert quiz.state.remaining_seconds == 0
    assert scheduler.active == 0
    assert not quiz.guard.monitoring

    result = quiz.result
    scheduler.advance(2)
    assert quiz.finish() is result


def test_answers_and_navigation_closed_after_finish(scheduler):
    quiz = _running(scheduler)
    quiz.finish()
    with pytest.raises(SessionFinishedError):
        quiz.record_answer(quiz.navigator.current.id, 0)
    with pytest.raises(SessionFinishedError):
        quiz.advance()


def test_invalid_count_leaves_session_configurable(scheduler):
    quiz = QuizSession("css")
    quiz.load(FakeSource(build_pool()))
    with pytest.raises(InvalidCountError):
        quiz.start(13, scheduler=scheduler)
    assert quiz.phase is QuizPhase.CONFIGURING
    assert scheduler.active == 0

    quiz.start(12, scheduler=scheduler)
    assert quiz.navigator.total == 12


def test_start_requires_loaded_pool(scheduler):
    quiz = QuizSession("css")
    with pytest.raises(SessionStateError):
        quiz.start(5, scheduler=scheduler)


def test_load_error_then_retry():
    source = FakeSource(build_pool(), failures=1)
    quiz = QuizSession("css")

    with pytest.raises(LoadError):
        quiz.load(source)
    assert quiz.phase is QuizPhase.ERROR
    assert quiz.snapshot()["error"] == "source unreachable"

    quiz.retry()
    assert quiz.phase is QuizPhase.CONFIGURING
    assert quiz.error is None
    assert source.calls == 2


def test_empty_pool_is_a_load_error():
    quiz = QuizSession("css")
    with pytest.raises(LoadError):
        quiz.load(FakeSource(build_pool(multiple_choice=0, open_ended=0)))
    assert quiz.phase is QuizPhase.ERROR


def test_retry_without_load_is_rejected():
    with pytest.raises(SessionStateError):
        QuizSession("css").retry()


def test_teardown_on_context_exit(scheduler):
    with QuizSession("css") as quiz:
        quiz.load(FakeSource(build_pool()))
        quiz.start(5, scheduler=scheduler)
        assert scheduler.active == 1
        assert quiz.guard.monitoring

    assert scheduler.active == 0
    assert not quiz.guard.monitoring
    remaining = quiz.state.remaining_seconds
    scheduler.advance(5)
    assert quiz.state.remaining_seconds == remaining


def test_teardown_on_error_path(scheduler):
    with pytest.raises(RuntimeError):
        with QuizSession("css") as quiz:
            quiz.load(FakeSource(build_pool()))
            quiz.start(5, scheduler=scheduler)
            raise RuntimeError("view crashed")
    assert scheduler.active == 0


def test_guard_events_update_shared_state(scheduler):
    quiz = _running(scheduler)
    quiz.report(GuardEvent.FULLSCREEN_ENTER)
    for _ in range(3):
        verdict = quiz.report(GuardEvent.FULLSCREEN_EXIT)
    assert verdict.violation_count == 3
    assert quiz.state.violation_count == 3
    assert quiz.snapshot()["guard"]["blocking"] is True

    # finishing stays possible behind the overlay
    quiz.finish()
    assert quiz.results()["violation_count"] == 3


def test_snapshot_running_hides_answers(scheduler):
    quiz = _running(scheduler, count=5)
    snap = quiz.snapshot()
    assert snap["phase"] == "running"
    assert snap["total"] == 5
    assert snap["index"] == 0 and snap["is_first"]
    assert snap["clock"] == "01:00"
    assert "correct_index" not in snap["question"]
    assert "correct_text" not in snap["question"]


def test_results_review_lists_incorrect_questions(scheduler):
    quiz = _running(scheduler, count=12)
    first = quiz.navigator.current
    quiz.record_answer(first.id, first.correct_index if hasattr(first, "correct_index") else "wrong")
    quiz.finish()

    results = quiz.results()
    review_ids = [item["id"] for item in results["incorrect_questions"]]
    assert results["total"] == 12
    assert len(review_ids) == 12 - results["correct"]
    assert all("correct_answer" in item for item in results["incorrect_questions"])


def test_results_before_finish_is_rejected(scheduler):
    quiz = _running(scheduler)
    with pytest.raises(SessionStateError):
        quiz.results()


def test_retry_while_running_keeps_the_run_intact(scheduler):
    quiz = _running(scheduler, duration=10)
    scheduler.advance(5)

    with pytest.raises(SessionStateError):
        quiz.retry()
    with pytest.raises(SessionStateError):
        quiz.load(FakeSource(build_pool()))

    assert quiz.phase is QuizPhase.RUNNING
    assert scheduler.active == 1
    scheduler.advance(4)
    assert quiz.state.remaining_seconds == 1
    assert quiz.phase is QuizPhase.RUNNING


def test_retry_after_finish_keeps_the_result(scheduler):
    quiz = _running(scheduler, count=5)
    result = quiz.finish()

    with pytest.raises(SessionStateError):
        quiz.retry()

    assert quiz.phase is QuizPhase.FINISHED
    assert quiz.result is result
    with pytest.raises(SessionStateError):
        quiz.start(5, scheduler=scheduler)
