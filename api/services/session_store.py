"""In-memory registry of open builder sessions."""
from __future__ import annotations

import logging
import threading
import time
import uuid

from fastapi import HTTPException

from api import config
from builder import BuilderWizard

log = logging.getLogger(__name__)

_sessions: dict[str, BuilderWizard] = {}
_last_used: dict[str, float] = {}
_sessions_lock = threading.Lock()
_clock = time.monotonic


def _expire_idle(now: float) -> None:
    """Drop sessions untouched for longer than the idle limit. Caller holds the lock."""
    cutoff = now - config.BUILDER_SESSION_IDLE_SECONDS
    for session_id in [sid for sid, used in _last_used.items() if used < cutoff]:
        _sessions.pop(session_id, None)
        _last_used.pop(session_id, None)
        log.info("Expired idle builder session %s", session_id)


def create_session(metadata_id: int) -> tuple[str, BuilderWizard]:
    session_id = uuid.uuid4().hex
    wizard = BuilderWizard(metadata_id)
    with _sessions_lock:
        now = _clock()
        _expire_idle(now)
        _sessions[session_id] = wizard
        _last_used[session_id] = now
    log.info("Opened builder session %s for metadata %s", session_id, metadata_id)
    return session_id, wizard


def get_session(session_id: str) -> BuilderWizard:
    """Return the wizard for ``session_id``.

    Raises:
        HTTPException: 404 if no such session exists or it expired.
    """
    with _sessions_lock:
        now = _clock()
        _expire_idle(now)
        wizard = _sessions.get(session_id)
        if wizard is not None:
            _last_used[session_id] = now
    if wizard is None:
        raise HTTPException(status_code=404, detail="Builder session not found")
    return wizard


def discard_session(session_id: str) -> BuilderWizard:
    with _sessions_lock:
        wizard = _sessions.pop(session_id, None)
        _last_used.pop(session_id, None)
    if wizard is None:
        raise HTTPException(status_code=404, detail="Builder session not found")
    log.info("Closed builder session %s", session_id)
    return wizard


def session_count() -> int:
    with _sessions_lock:
        return len(_sessions)


def clear_sessions() -> None:
    with _sessions_lock:
        _sessions.clear()
        _last_used.clear()
