# engine/__init__.py
from engine.errors import ConsistencyError, InvalidLabelError
from engine.exercise import (
    ExerciseInstance,
    ExerciseSession,
    GradeResult,
    build_exercise,
    fallback_instance,
    grade_selection,
    request_exercise,
)
from engine.history import SignatureHistory
from engine.options import Option
from engine.steps import Step, extract_steps

__all__ = [
    "ConsistencyError",
    "ExerciseInstance",
    "ExerciseSession",
    "GradeResult",
    "InvalidLabelError",
    "Option",
    "SignatureHistory",
    "Step",
    "build_exercise",
    "extract_steps",
    "fallback_instance",
    "grade_selection",
    "request_exercise",
]
