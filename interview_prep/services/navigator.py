"""
services/navigator.py

Position and answer sheet of a running quiz.

Works directly on the shared QuizState so the timer, the integrity guard and
the navigator all see one state object.
"""

from typing import Dict, List, Optional, Sequence

from interview_prep.models.question_model import (
    MultipleChoiceQuestion,
    OpenEndedQuestion,
    Question,
)
from interview_prep.models.session_state import Answer, QuizState
from interview_prep.services.errors import SessionFinishedError, TypeMismatchError


class Navigator:
    def __init__(self, active_set: Sequence[Question], state: QuizState):
        if not active_set:
            raise ValueError("active set must contain at least one question")
        self._questions: List[Question] = list(active_set)
        self._by_id: Dict[str, Question] = {q.id: q for q in self._questions}
        self._state = state
        self._state.current_index = max(0, min(state.current_index, len(self._questions) - 1))

    # ── position ────────────────────────────────────────────────────────────

    @property
    def index(self) -> int:
        return self._state.current_index

    @property
    def total(self) -> int:
        return len(self._questions)

    @property
    def current(self) -> Question:
        return self._questions[self._state.current_index]

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    def is_first(self) -> bool:
        return self._state.current_index == 0

    def is_last(self) -> bool:
        return self._state.current_index == len(self._questions) - 1

    def advance(self) -> int:
        """Move to the next question. No-op on the last one."""
        if self._state.current_index < len(self._questions) - 1:
            self._state.current_index += 1
        return self._state.current_index

    def retreat(self) -> int:
        """Move to the previous question. No-op on the first one."""
        if self._state.current_index > 0:
            self._state.current_index -= 1
        return self._state.current_index

    # ── answers ─────────────────────────────────────────────────────────────

    @property
    def answered_count(self) -> int:
        return len(self._state.answers)

    def answer_for(self, question_id: str) -> Optional[Answer]:
        return self._state.answers.get(question_id)

    def record_answer(self, question_id: str, value: Answer) -> None:
        """
        Store the respondent's answer, replacing any earlier one.

        Multiple-choice answers are option indexes, open-ended answers are
        strings. Anything else is a caller bug.

        Raises:
            SessionFinishedError: the run has already been finished.
            TypeMismatchError:    unknown question id, or value of the wrong shape.
        """
        if self._state.is_finished:
            raise SessionFinishedError("answers are closed after finish")

        question = self._by_id.get(question_id)
        if question is None:
            raise TypeMismatchError(f"question '{question_id}' is not in the active set")

        if isinstance(question, MultipleChoiceQuestion):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeMismatchError(
                    f"question '{question_id}' expects an option index, got {type(value).__name__}"
                )
            if not (0 <= value < len(question.options)):
                raise TypeMismatchError(
                    f"option index {value} out of range for question '{question_id}'"
                )
        elif isinstance(question, OpenEndedQuestion):
            if not isinstance(value, str):
                raise TypeMismatchError(
                    f"question '{question_id}' expects text, got {type(value).__name__}"
                )

        self._state.answers[question_id] = value
