"""
api/routes.py — FastAPI endpoints
"""

import logging
from typing import Union

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, StrictInt, StrictStr

from interview_prep.services.errors import (
    ContentNotFoundError,
    InvalidCountError,
    LoadError,
    SessionFinishedError,
    SessionStateError,
    TypeMismatchError,
)
from interview_prep.services.integrity_guard import GuardEvent, policy
from interview_prep.services.md_parser import answer_slug, parse_question_list
from interview_prep.services.quiz_session import QuizSession

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class StartQuizBody(BaseModel):
    count: StrictInt


class AnswerBody(BaseModel):
    question_id: str
    answer: Union[StrictInt, StrictStr]


class GuardEventBody(BaseModel):
    event: GuardEvent


# ── helpers ──────────────────────────────────────────────────────────────────

def _sid(request: Request) -> str:
    return request.state.session_id


def _topic_or_404(request: Request, topic_id: str):
    topic = request.app.state.registry.lookup(topic_id)
    if topic is None:
        raise HTTPException(status_code=404, detail="Topic not found")
    return topic


def _quiz(request: Request) -> QuizSession:
    quiz = request.app.state.sessions.get(_sid(request), "quiz")
    if quiz is None:
        raise HTTPException(status_code=404, detail="No quiz session.")
    return quiz


def _load_error(e: LoadError) -> HTTPException:
    return HTTPException(status_code=502, detail={"message": str(e), "retry": True})


def _state_error(e: SessionStateError) -> HTTPException:
    if isinstance(e, SessionFinishedError):
        return HTTPException(status_code=409, detail="The quiz is already finished.")
    return HTTPException(status_code=409, detail=str(e))


# ── content ──────────────────────────────────────────────────────────────────

@router.get("/api/topics")
async def list_topics(request: Request):
    return [t.model_dump() for t in request.app.state.registry.all()]


@router.get("/api/topics/{topic_id}/questions")
def list_questions(request: Request, topic_id: str):
    topic = _topic_or_404(request, topic_id)
    try:
        markdown = request.app.state.content.read_question_file(topic.file)
    except ContentNotFoundError as e:
        logger.error(f"question list for '{topic_id}': {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch questions")

    questions = []
    for q in parse_question_list(markdown):
        d = q.model_dump()
        d["slug"] = answer_slug(q)
        questions.append(d)
    return {"topic": topic.model_dump(), "questions": questions}


@router.get("/api/answers/{topic_id}/{slug}")
def get_answer(request: Request, topic_id: str, slug: str):
    _topic_or_404(request, topic_id)
    try:
        content = request.app.state.content.read_answer_file(topic_id, slug)
    except ContentNotFoundError:
        raise HTTPException(status_code=404, detail="Answer not found")
    return {"content": content}


# ── quiz ─────────────────────────────────────────────────────────────────────
# Plain def: these take the session lock shared with the countdown thread,
# so FastAPI runs them in its threadpool instead of on the event loop.

@router.post("/api/quiz/{topic_id}/load")
def load_quiz(request: Request, topic_id: str):
    _topic_or_404(request, topic_id)
    sessions = request.app.state.sessions
    sid = _sid(request)

    previous = sessions.get(sid, "quiz")
    if previous is not None:
        previous.teardown()

    quiz = QuizSession(topic_id, duration=request.app.state.quiz_duration)
    sessions.put(sid, "quiz", quiz)
    try:
        quiz.load(request.app.state.source)
    except LoadError as e:
        raise _load_error(e)
    return quiz.snapshot()


@router.post("/api/quiz/retry")
def retry_quiz(request: Request):
    quiz = _quiz(request)
    try:
        quiz.retry()
    except LoadError as e:
        raise _load_error(e)
    except SessionStateError as e:
        raise _state_error(e)
    return quiz.snapshot()


@router.post("/api/quiz/start")
def start_quiz(request: Request, body: StartQuizBody):
    quiz = _quiz(request)
    try:
        quiz.start(body.count, scheduler=request.app.state.scheduler_factory())
    except InvalidCountError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SessionStateError as e:
        raise _state_error(e)
    return quiz.snapshot()


@router.get("/api/quiz/state")
def quiz_state(request: Request):
    return _quiz(request).snapshot()


@router.post("/api/quiz/answer")
def save_answer(request: Request, body: AnswerBody):
    quiz = _quiz(request)
    try:
        quiz.record_answer(body.question_id, body.answer)
    except TypeMismatchError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SessionStateError as e:
        raise _state_error(e)
    return {"ok": True, "answered_count": quiz.navigator.answered_count}


@router.post("/api/quiz/advance")
def advance(request: Request):
    quiz = _quiz(request)
    try:
        quiz.advance()
    except SessionStateError as e:
        raise _state_error(e)
    return quiz.snapshot()


@router.post("/api/quiz/retreat")
def retreat(request: Request):
    quiz = _quiz(request)
    try:
        quiz.retreat()
    except SessionStateError as e:
        raise _state_error(e)
    return quiz.snapshot()


@router.get("/api/quiz/guard-policy")
async def guard_policy():
    return policy()


@router.post("/api/quiz/guard")
def report_guard_event(request: Request, body: GuardEventBody):
    quiz = _quiz(request)
    try:
        verdict = quiz.report(body.event)
    except SessionStateError as e:
        raise _state_error(e)
    return verdict.model_dump(mode="json")


@router.post("/api/quiz/finish")
def finish_quiz(request: Request):
    quiz = _quiz(request)
    try:
        quiz.finish()
    except SessionStateError as e:
        raise _state_error(e)
    return quiz.results()


@router.get("/api/quiz/results")
def get_results(request: Request):
    quiz = _quiz(request)
    try:
        return quiz.results()
    except SessionStateError:
        raise HTTPException(status_code=400, detail="The quiz has not been finished yet.")


@router.post("/api/reset")
def reset_session(request: Request):
    request.app.state.sessions.reset(_sid(request))
    return {"ok": True}
