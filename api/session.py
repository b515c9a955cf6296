"""
api/session.py — multi-user in-memory sessions (cookie based)

Each browser gets a UUID session id with its own state. Sessions expire after
SESSION_TTL seconds without access. Dropping a session tears down its quiz so
no countdown thread outlives it.
"""

import logging
import threading
import time
import uuid
from typing import Any

from config import SESSION_TTL

logger = logging.getLogger(__name__)


def _new_state() -> dict[str, Any]:
    return {
        "quiz": None,
    }


def _teardown(state: dict[str, Any]) -> None:
    quiz = state.get("quiz")
    if quiz is not None:
        quiz.teardown()


class SessionStore:
    def __init__(self, ttl: int = SESSION_TTL):
        self.ttl = ttl
        self._lock = threading.Lock()
        self._sessions: dict[str, dict[str, Any]] = {}
        self._timestamps: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self) -> str:
        """Create a session and return its id."""
        sid = uuid.uuid4().hex
        with self._lock:
            self._sessions[sid] = _new_state()
            self._timestamps[sid] = time.time()
        return sid

    def get_session(self, sid: str) -> dict[str, Any] | None:
        """Session data for `sid`, or None when missing or expired."""
        expired = None
        with self._lock:
            if sid not in self._sessions:
                return None
            if time.time() - self._timestamps[sid] > self.ttl:
                expired = self._sessions.pop(sid)
                del self._timestamps[sid]
            else:
                self._timestamps[sid] = time.time()  # refresh on access
                return self._sessions[sid]
        _teardown(expired)
        return None

    def get(self, sid: str, key: str, default=None):
        session = self.get_session(sid)
        if session is None:
            return default
        return session.get(key, default)

    def put(self, sid: str, key: str, value) -> None:
        with self._lock:
            if sid in self._sessions:
                self._sessions[sid][key] = value
                self._timestamps[sid] = time.time()

    def reset(self, sid: str) -> None:
        """Drop the session state (and its quiz), keeping the id."""
        old = None
        with self._lock:
            if sid in self._sessions:
                old = self._sessions[sid]
                self._sessions[sid] = _new_state()
                self._timestamps[sid] = time.time()
        if old is not None:
            _teardown(old)

    def cleanup_expired(self) -> int:
        """Remove expired sessions. Returns how many were removed."""
        now = time.time()
        with self._lock:
            expired = [sid for sid, ts in self._timestamps.items() if now - ts > self.ttl]
            dropped = [self._sessions.pop(sid) for sid in expired]
            for sid in expired:
                del self._timestamps[sid]
        for state in dropped:
            _teardown(state)
        return len(dropped)

    def close(self) -> None:
        """Tear down every session (application shutdown)."""
        with self._lock:
            states = list(self._sessions.values())
            self._sessions.clear()
            self._timestamps.clear()
        for state in states:
            _teardown(state)
