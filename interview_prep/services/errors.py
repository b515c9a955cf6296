"""
services/errors.py

Exceptions raised by the quiz and content services.
The API layer maps them to HTTP status codes; views turn them into notices.
"""


class QuizError(Exception):
    """Base class for all quiz and content errors."""


class InvalidCountError(QuizError, ValueError):
    """Requested question count is outside 1..pool size."""

    def __init__(self, count: int, total: int):
        super().__init__(f"question count must be between 1 and {total}, got {count}")
        self.count = count
        self.total = total


class LoadError(QuizError, RuntimeError):
    """Question source unreachable or malformed. The user may retry."""


class TypeMismatchError(QuizError, TypeError):
    """Answer value does not fit the question kind, or the question is unknown."""


class SessionStateError(QuizError, RuntimeError):
    """Operation not allowed in the current session phase."""


class SessionFinishedError(SessionStateError):
    """The run is already finished; answers and navigation are closed."""


class ContentNotFoundError(QuizError, FileNotFoundError):
    """Requested topic, question list or answer file does not exist."""
