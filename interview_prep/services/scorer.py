"""
services/scorer.py

Scoring of a finished quiz run.
Pure functions: no UI code, no state changes.
"""

from typing import Dict, List, Sequence

from interview_prep.models.question_model import Question, correct_answer
from interview_prep.models.session_state import Answer, ScoreResult


def _is_correct(question: Question, answers: Dict[str, Answer]) -> bool:
    if question.id not in answers:
        return False
    given = answers[question.id]
    expected = correct_answer(question)
    # True == 1 in Python; an option index must be a real int
    if type(given) is not type(expected):
        return False
    return given == expected


def score(active_set: Sequence[Question], answers: Dict[str, Answer]) -> ScoreResult:
    """
    Count answers equal to each question's reference answer.

    Comparison is exact: option index equality for multiple-choice, exact
    string equality for open-ended (no trimming, no case folding). Questions
    without an answer count as wrong.

    Args:
        active_set: questions of the run, in run order.
        answers:    answer sheet. {question.id: option index or text}

    Returns:
        ScoreResult with correct, total and unanswered counts.
    """
    correct = sum(1 for q in active_set if _is_correct(q, answers))
    unanswered = sum(1 for q in active_set if q.id not in answers)
    return ScoreResult(correct=correct, total=len(active_set), unanswered=unanswered)


def get_incorrect_questions(
    active_set: Sequence[Question],
    answers: Dict[str, Answer],
) -> List[Question]:
    """
    Questions answered wrongly or left unanswered (review list).

    Returns:
        Incorrect questions in run order.
    """
    return [q for q in active_set if not _is_correct(q, answers)]
