"""
services/sampler.py

Random draw of the active set from a question pool.
"""

import logging
import random
from typing import List, Optional, Sequence

from interview_prep.models.question_model import Question
from interview_prep.services.configurator import validate_count

logger = logging.getLogger(__name__)


def sample(
    pool: Sequence[Question],
    count: int,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """
    Draw `count` distinct questions in random order.

    A copy of the pool is shuffled (random.shuffle is a Fisher-Yates shuffle,
    so every ordering is equally likely) and the first `count` questions are
    kept. The pool itself is not touched. Without `rng` the module-level
    generator is used, so two calls may return different sets.

    Raises:
        InvalidCountError: count is not within 1..len(pool).
    """
    validate_count(count, len(pool))

    shuffled = list(pool)
    (rng or random).shuffle(shuffled)
    selected = shuffled[:count]

    logger.info(f"sample: {count}/{len(pool)} questions drawn")
    return selected
