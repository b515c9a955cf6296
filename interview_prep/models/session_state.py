"""
models/session_state.py

State of one quiz run and its final score.
Pydantic BaseModel based; no UI code.
"""

import math
import time
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field

Answer = Union[int, str]


class QuizState(BaseModel):
    """
    Shared state of an active quiz run.

    Attributes:
        current_index:     0-based position in the active set.
        answers:           {question.id: selected option index or free text}.
        remaining_seconds: seconds left on the countdown.
        violation_count:   integrity violations detected so far (never decreases).
        is_finished:       once True, stays True.
        finish_reason:     "submitted" or "timeout".
        start_time:        Unix timestamp of the moment the run started.
    """

    current_index: int = Field(
        default=0,
        ge=0,
        description="Current question index (0-based)"
    )
    answers: Dict[str, Answer] = Field(
        default_factory=dict,
        description="Answer sheet. key: question.id, value: option index or text"
    )
    remaining_seconds: int = Field(
        default=0,
        ge=0,
        description="Seconds left before the run is finished automatically"
    )
    violation_count: int = Field(
        default=0,
        ge=0,
        description="Integrity violations detected so far"
    )
    is_finished: bool = Field(
        default=False,
        description="Final submission done"
    )
    finish_reason: Optional[str] = Field(
        default=None,
        description="Why the run ended"
    )
    start_time: float = Field(
        default_factory=time.time,
        description="Start of the run (Unix timestamp, time.time())"
    )


class ScoreResult(BaseModel):
    """Final tally of a quiz run. Recomputable from the answers at any time."""

    correct: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    unanswered: int = Field(default=0, ge=0)

    @property
    def percentage(self) -> int:
        """Whole percent, halves rounded up. 0 for an empty run."""
        if self.total == 0:
            return 0
        return math.floor(100 * self.correct / self.total + 0.5)
