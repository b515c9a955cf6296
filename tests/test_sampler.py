from __future__ import annotations

import random

import pytest

from interview_prep.services.configurator import count_options, default_count
from interview_prep.services.errors import InvalidCountError
from interview_prep.services.sampler import sample

from tests.conftest import build_pool


@pytest.mark.parametrize("count", [1, 5, 11, 12])
def test_sample_returns_distinct_questions_from_pool(count):
    pool = build_pool()
    drawn = sample(pool.questions, count)

    ids = [q.id for q in drawn]
    assert len(drawn) == count
    assert len(set(ids)) == count
    assert set(ids) <= {q.id for q in pool.questions}


@pytest.mark.parametrize("count", [0, -1, 13, True])
def test_sample_rejects_out_of_range_count(count):
    pool = build_pool()
    with pytest.raises(InvalidCountError):
        sample(pool.questions, count)


def test_sample_does_not_touch_pool():
    pool = build_pool()
    before = [q.id for q in pool.questions]
    questions = list(pool.questions)
    sample(questions, 12, rng=random.Random(1))
    assert [q.id for q in questions] == before


def test_sample_order_varies_between_calls():
    pool = build_pool()
    rng = random.Random(42)
    orders = {tuple(q.id for q in sample(pool.questions, 12, rng=rng)) for _ in range(20)}
    assert len(orders) > 1


def test_sample_reaches_every_question():
    pool = build_pool()
    rng = random.Random(7)
    seen = set()
    for _ in range(200):
        seen.update(q.id for q in sample(pool.questions, 1, rng=rng))
    assert seen == {q.id for q in pool.questions}


def test_count_options_include_all_when_pool_is_not_standard():
    options = count_options(12)
    assert [o.value for o in options] == [5, 10, 12]
    assert options[-1].is_all
    assert options[-1].label == "All questions (12)"


def test_count_options_for_standard_and_tiny_pools():
    assert [o.value for o in count_options(20)] == [5, 10, 20]
    assert not any(o.is_all for o in count_options(20))
    assert [o.value for o in count_options(3)] == [3]
    assert count_options(0) == []


@pytest.mark.parametrize("total, expected", [(3, 3), (5, 5), (8, 8), (12, 10), (100, 10)])
def test_default_count(total, expected):
    assert default_count(total) == expected
