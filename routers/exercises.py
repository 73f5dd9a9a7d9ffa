# routers/exercises.py
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from engine.errors import InvalidLabelError
from engine.exercise import ExerciseInstance, grade_selection
from engine.steps import ORDER_RULE
from schemas.exercises import (
    ExerciseOut,
    GradeRequest,
    GradeResponse,
    SessionOut,
    SolutionOut,
    StepOut,
)
from sessions import SessionStore

router = APIRouter(tags=["exercises"])


def _store(request: Request) -> SessionStore:
    return request.app.state.sessions


def _exercise_out(eid: str, sid: str, ex: ExerciseInstance) -> ExerciseOut:
    # No is_correct here: the answer is only revealed by /grade and /solution
    return ExerciseOut(
        id=eid,
        session_id=sid,
        display=ex.display,
        tex=ex.tex,
        template=ex.template,
        options=[{"label": o.label, "value": o.value} for o in ex.options],
    )


def _lookup(request: Request, exercise_id: str):
    found = _store(request).exercise(exercise_id)
    if not found:
        raise HTTPException(status_code=404, detail="exercise not found")
    return found


@router.post("/sessions", response_model=SessionOut)
def create_session(request: Request):
    store = _store(request)
    sid = store.create()
    return {"ok": True, "session_id": sid, "history_size": store.history_size}


@router.post("/sessions/{session_id}/exercises", response_model=ExerciseOut)
def next_exercise(session_id: str, request: Request):
    issued = _store(request).issue(session_id)
    if not issued:
        raise HTTPException(status_code=404, detail="session not found")
    eid, ex = issued
    return _exercise_out(eid, session_id, ex)


@router.get("/exercises/{exercise_id}", response_model=ExerciseOut)
def get_exercise(exercise_id: str, request: Request):
    sid, ex = _lookup(request, exercise_id)
    return _exercise_out(exercise_id, sid, ex)


@router.post("/exercises/{exercise_id}/grade", response_model=GradeResponse)
def grade(exercise_id: str, req: GradeRequest, request: Request):
    _, ex = _lookup(request, exercise_id)
    try:
        result = grade_selection(ex, req.label)
    except InvalidLabelError:
        raise HTTPException(status_code=400, detail="unknown option label")
    return {
        "ok": True,
        "correct": result.is_correct,
        "correct_value": result.correct_value,
        "correct_label": result.correct_label,
    }


@router.get("/exercises/{exercise_id}/solution", response_model=SolutionOut)
def solution(exercise_id: str, request: Request):
    _, ex = _lookup(request, exercise_id)
    return SolutionOut(
        id=exercise_id,
        display=ex.display,
        answer=ex.answer,
        rule=ORDER_RULE,
        steps=[StepOut.model_validate(s) for s in ex.steps],
    )
