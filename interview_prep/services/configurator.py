"""
services/configurator.py

Question-count choices offered before a quiz run starts.
"""

from typing import List

from pydantic import BaseModel

from config import STANDARD_COUNTS
from interview_prep.services.errors import InvalidCountError


class CountOption(BaseModel):
    value: int
    label: str
    is_all: bool = False


def count_options(total: int) -> List[CountOption]:
    """
    Standard counts that fit the pool, plus "all" when the pool size is not
    itself a standard count.

    Args:
        total: number of questions in the pool.

    Returns:
        Options in ascending order. Empty when the pool is empty.
    """
    options = [
        CountOption(value=value, label=f"{value} questions")
        for value in STANDARD_COUNTS
        if value <= total
    ]
    if total > 0 and total not in STANDARD_COUNTS:
        options.append(CountOption(value=total, label=f"All questions ({total})", is_all=True))
    return options


def default_count(total: int) -> int:
    """Pre-selected count: the whole pool when it is tiny, else up to 10."""
    if total < STANDARD_COUNTS[0]:
        return total
    return min(10, total)


def validate_count(count: int, total: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int) or not (1 <= count <= total):
        raise InvalidCountError(count, total)
    return count
