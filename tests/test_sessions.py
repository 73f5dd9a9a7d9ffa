import threading

from engine.exercise import ExerciseSession
from sessions import SessionStore


def test_store_issues_and_finds_exercises():
    store = SessionStore(max_sessions=4, history_size=8)
    sid = store.create()
    assert store.has_session(sid)
    eid, ex = store.issue(sid)
    assert store.exercise(eid) == (sid, ex)


def test_store_unknown_session():
    store = SessionStore(max_sessions=2, history_size=8)
    assert store.issue("nope") is None
    assert store.exercise("nope") is None


def test_store_evicts_oldest_session_and_its_exercises():
    store = SessionStore(max_sessions=2, history_size=8)
    first = store.create()
    eid, _ = store.issue(first)
    store.create()
    store.create()
    assert not store.has_session(first)
    assert store.exercise(eid) is None


def test_store_bounds_exercises():
    store = SessionStore(max_sessions=2, history_size=8, max_exercises=3)
    sid = store.create()
    ids = [store.issue(sid)[0] for _ in range(5)]
    assert store.exercise(ids[0]) is None
    assert store.exercise(ids[-1]) is not None


def test_issue_does_not_hold_store_lock_while_generating(monkeypatch):
    store = SessionStore(max_sessions=4, history_size=8)
    busy, other = store.create(), store.create()
    seen = {}

    real_next = ExerciseSession.next_exercise

    def next_exercise(self):
        # another session's lookup must succeed while this one is generating
        seen["store_free"] = store._lock.acquire(blocking=False)
        if seen["store_free"]:
            store._lock.release()
        return real_next(self)

    monkeypatch.setattr(ExerciseSession, "next_exercise", next_exercise)
    store.issue(busy)
    assert seen["store_free"] is True
    assert store.has_session(other)


def test_concurrent_issue_keeps_each_session_window():
    store = SessionStore(max_sessions=4, history_size=8)
    sid = store.create()
    results = []

    def worker():
        for _ in range(10):
            results.append(store.issue(sid)[1].signature)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(results) == 40
    history = store._sessions[sid].session.history.as_list()
    assert len(history) == 8 and len(set(history)) == 8
    assert set(history) <= set(results)
