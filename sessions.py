# sessions.py
from __future__ import annotations

import threading
import uuid
from collections import OrderedDict
from typing import Optional, Tuple

import config
from engine.exercise import ExerciseInstance, ExerciseSession


class _Entry:
    def __init__(self, session: ExerciseSession):
        self.session = session
        self.lock = threading.Lock()


class SessionStore:
    """
    In-memory exercise sessions for the HTTP layer.

    Each session owns its own ExerciseSession (history + RNG) and lock, so
    generation for one session never waits on another. Issued exercises are
    kept so they can be graded and explained later. Both maps are bounded;
    the oldest entries are evicted first.
    """

    def __init__(
        self,
        max_sessions: int = config.MAX_SESSIONS,
        history_size: int = config.HISTORY_SIZE,
        max_exercises: Optional[int] = None,
    ):
        self.max_sessions = max_sessions
        self.history_size = history_size
        self.max_exercises = max_exercises or max_sessions * history_size
        self._sessions: "OrderedDict[str, _Entry]" = OrderedDict()
        self._exercises: "OrderedDict[str, Tuple[str, ExerciseInstance]]" = OrderedDict()
        self._lock = threading.Lock()

    def create(self) -> str:
        sid = uuid.uuid4().hex
        entry = _Entry(ExerciseSession(history_size=self.history_size))
        with self._lock:
            self._sessions[sid] = entry
            while len(self._sessions) > self.max_sessions:
                old, _ = self._sessions.popitem(last=False)
                self._drop_exercises(old)
        return sid

    def has_session(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def issue(self, session_id: str) -> Optional[Tuple[str, ExerciseInstance]]:
        with self._lock:
            entry = self._sessions.get(session_id)
        if entry is None:
            return None

        # Generation runs outside the store lock, serialised per session only
        with entry.lock:
            instance = entry.session.next_exercise()

        eid = uuid.uuid4().hex
        with self._lock:
            self._exercises[eid] = (session_id, instance)
            while len(self._exercises) > self.max_exercises:
                self._exercises.popitem(last=False)
        return eid, instance

    def exercise(self, exercise_id: str) -> Optional[Tuple[str, ExerciseInstance]]:
        with self._lock:
            return self._exercises.get(exercise_id)

    def _drop_exercises(self, session_id: str) -> None:
        for eid in [k for k, (sid, _) in self._exercises.items() if sid == session_id]:
            del self._exercises[eid]
