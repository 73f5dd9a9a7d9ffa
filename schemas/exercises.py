# schemas/exercises.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict

# ---------- Sessions ----------


class SessionOut(BaseModel):
    ok: bool
    session_id: str
    history_size: int


# ---------- Exercises ----------


class OptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    label: str
    value: int


class ExerciseOut(BaseModel):
    id: str
    session_id: str
    display: str
    tex: str
    template: str
    options: List[OptionOut]


class StepOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    title: str
    rationale: str
    before: str
    focus: str
    after: str
    value: int
    before_tex: str
    focus_tex: str
    after_tex: str


class SolutionOut(BaseModel):
    id: str
    display: str
    answer: int
    rule: str
    steps: List[StepOut]


# ---------- Grade ----------


class GradeRequest(BaseModel):
    label: str


class GradeResponse(BaseModel):
    ok: bool
    correct: bool
    correct_value: int
    correct_label: str
