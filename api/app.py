"""
api/app.py — FastAPI app instance + session middleware + static file serving
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

import config
from api.routes import router
from api.session import SessionStore
from interview_prep.services.errors import ContentNotFoundError
from interview_prep.services.file_reader import ContentStore
from interview_prep.services.question_source import QuestionSource
from interview_prep.services.scheduling import ThreadScheduler
from interview_prep.services.topics import TopicRegistry

SESSION_COOKIE = "quiz_session"

logger = logging.getLogger(__name__)


def create_app(
    data_dir: str = config.DATA_DIR,
    static_dir: str = config.STATIC_DIR,
    scheduler_factory=ThreadScheduler,
    quiz_duration: int = config.QUIZ_DURATION_SECONDS,
    session_ttl: int = config.SESSION_TTL,
) -> FastAPI:
    """
    Build the application. Registry, content store and session store are
    created here once and shared through `app.state`.

    Args:
        data_dir:          content tree (topics.json, questions/, answers/, tests/, assets/).
        static_dir:        quiz page HTML/JS/CSS.
        scheduler_factory: zero-argument callable returning the countdown scheduler.
        quiz_duration:     seconds per quiz run.
        session_ttl:       idle seconds before a session is dropped.
    """
    registry = TopicRegistry.load(os.path.join(data_dir, "topics.json"))
    store = ContentStore(data_dir)
    sessions = SessionStore(ttl=session_ttl)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # periodic cleanup of expired sessions
        def _cleanup():
            removed = sessions.cleanup_expired()
            if removed:
                logger.info(f"{removed} expired sessions removed")

        cleanup = ThreadScheduler().every(config.SESSION_CLEANUP_INTERVAL, _cleanup, name="session-cleanup")
        try:
            yield
        finally:
            cleanup.release()
            sessions.close()

    app = FastAPI(title="Interview Prep", docs_url=None, redoc_url=None, lifespan=lifespan)
    app.state.registry = registry
    app.state.content = store
    app.state.source = QuestionSource(store)
    app.state.sessions = sessions
    app.state.scheduler_factory = scheduler_factory
    app.state.quiz_duration = quiz_duration

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Session middleware: read the session id from the cookie, issue a new one if missing
    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        sid = request.cookies.get(SESSION_COOKIE)
        if not sid or sessions.get_session(sid) is None:
            sid = sessions.create_session()

        request.state.session_id = sid
        response: Response = await call_next(request)
        response.set_cookie(
            key=SESSION_COOKIE,
            value=sid,
            httponly=True,
            samesite="lax",
            max_age=sessions.ttl,
        )
        return response

    app.include_router(router)

    if os.path.isdir(static_dir):
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    def _page(name: str, status_code: int = 200):
        path = os.path.join(static_dir, name)
        if os.path.exists(path):
            return FileResponse(path, status_code=status_code)
        raise HTTPException(status_code=404, detail=f"{name} not found")

    @app.get("/")
    async def serve_index():
        return _page("index.html")

    @app.get("/quiz/{topic_id}")
    async def serve_quiz(topic_id: str):
        if registry.lookup(topic_id) is None:
            return _page("not-found.html", status_code=404)
        return _page("quiz.html")

    @app.get("/assets/{name}")
    async def serve_asset(name: str):
        try:
            path = store.asset_path(name)
        except ContentNotFoundError:
            raise HTTPException(status_code=404, detail="asset not found")
        if not os.path.isfile(path):
            raise HTTPException(status_code=404, detail="asset not found")
        return FileResponse(path)

    return app
